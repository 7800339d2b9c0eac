"""Core state engine: store, lock, adapters and projections."""
