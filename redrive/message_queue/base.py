"""
Base Queue Interface

Abstract interface for the message source a queue processor pulls from.
"""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel

from redrive.models.message import Message


class QueueMetrics(BaseModel):
    """
    Queue client statistics.

    Attributes:
        pending: Messages waiting to be received
        in_flight: Messages received but not yet deleted
        deleted: Total messages deleted
    """
    pending: int = 0
    in_flight: int = 0
    deleted: int = 0


class QueueClient(ABC):
    """
    Abstract queue client interface.

    Implementations own every transport concern: how long get_message
    waits before giving up, visibility timeouts and redelivery of messages
    that are never deleted.
    """

    @abstractmethod
    async def get_message(self) -> Optional[Message]:
        """
        Receive the next message.

        Implementations should wait (long poll) for a bounded time before
        returning None so callers can loop without their own delay.

        Returns:
            Next message or None if nothing arrived within the wait window
        """
        pass

    @abstractmethod
    async def delete_message(self, message: Message) -> None:
        """
        Remove a received message from the queue.

        Args:
            message: Message previously returned by get_message

        Raises:
            QueueDeletionError: If the transport could not delete it
        """
        pass
