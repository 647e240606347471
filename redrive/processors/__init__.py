"""Message processors package."""
from redrive.processors.base import MessageProcessor
from redrive.processors.http import HttpMessageProcessor

__all__ = [
    "MessageProcessor",
    "HttpMessageProcessor",
]
