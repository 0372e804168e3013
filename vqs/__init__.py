"""Keyword search with VQS ranking."""

__version__ = "0.1.0"
