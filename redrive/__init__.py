"""Queue-to-HTTP redrive service."""

__version__ = "1.0.0"
