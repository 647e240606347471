"""
Message Queue System

Provides the redrive side of queue processing:
- Abstract queue client interface supporting multiple backends
- In-memory queue client for testing and local runs
- Amazon SQS queue client for production
- Per-queue processor loop with delete-always semantics
"""

from redrive.message_queue.base import QueueClient, QueueMetrics
from redrive.message_queue.memory import InMemoryQueueClient
from redrive.message_queue.processor import QueueProcessor
from redrive.message_queue.sqs import SqsQueueClient

__all__ = [
    "QueueClient",
    "QueueMetrics",
    "InMemoryQueueClient",
    "QueueProcessor",
    "SqsQueueClient",
]
