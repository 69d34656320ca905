"""Complexity analyzers — one module per strategy, registered on import."""
