"""In-memory adapters for minhypr tests."""
