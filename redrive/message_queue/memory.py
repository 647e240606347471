"""
In-Memory Queue Client

Simple in-memory queue implementation for testing and local runs.
Uses asyncio primitives for async-safe operations.
"""

import asyncio
import uuid
from typing import Optional

from redrive.errors import QueueDeletionError
from redrive.message_queue.base import QueueClient, QueueMetrics
from redrive.models.message import Message


class InMemoryQueueClient(QueueClient):
    """
    In-memory queue client implementation.

    Received messages stay in flight until deleted. There is no visibility
    timeout: a message that is never deleted is never redelivered.
    Data is lost on restart.
    """

    def __init__(self, poll_timeout: float = 0.1):
        """
        Initialize in-memory queue.

        Args:
            poll_timeout: Seconds get_message waits before returning None
        """
        self.poll_timeout = poll_timeout
        self._pending: asyncio.Queue = asyncio.Queue()
        self._in_flight: dict[str, Message] = {}
        self._deleted: list[str] = []
        self._lock = asyncio.Lock()

    async def enqueue(
        self,
        content: str,
        attributes: Optional[dict[str, str]] = None,
        identifier: Optional[str] = None,
    ) -> Message:
        """
        Add a message to the queue.

        Args:
            content: Raw message payload
            attributes: Message metadata
            identifier: Delivery id, generated when omitted

        Returns:
            The queued message
        """
        message = Message(
            identifier=identifier or str(uuid.uuid4()),
            content=content,
            attributes=attributes or {},
        )
        await self._pending.put(message)
        return message

    async def get_message(self) -> Optional[Message]:
        try:
            message = await asyncio.wait_for(
                self._pending.get(),
                timeout=self.poll_timeout
            )
        except asyncio.TimeoutError:
            return None

        async with self._lock:
            self._in_flight[message.identifier] = message

        return message

    async def delete_message(self, message: Message) -> None:
        async with self._lock:
            if self._in_flight.pop(message.identifier, None) is None:
                raise QueueDeletionError(
                    f"Message {message.identifier} is not in flight"
                )
            self._deleted.append(message.identifier)

    @property
    def deleted_ids(self) -> list[str]:
        """Identifiers of deleted messages, in deletion order."""
        return list(self._deleted)

    async def get_metrics(self) -> QueueMetrics:
        async with self._lock:
            return QueueMetrics(
                pending=self._pending.qsize(),
                in_flight=len(self._in_flight),
                deleted=len(self._deleted),
            )
