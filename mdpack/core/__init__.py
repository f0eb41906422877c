"""Core record-transform-and-archive engine."""
