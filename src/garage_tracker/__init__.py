"""In-memory tracker for a multi-level parking garage."""

__version__ = "1.0.0"
