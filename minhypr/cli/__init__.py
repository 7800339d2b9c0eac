"""Command-line interface for minhypr."""
