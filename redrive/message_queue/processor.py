"""
Queue Processor

Long-running loop that redrives one queue: receive, process, always delete.
"""

import asyncio
from typing import Any, Optional
from loguru import logger

from redrive.config import get_settings
from redrive.errors import (
    ProcessorNotInitializedError,
    QueueDeletionError,
    ShutdownTimeoutError,
)
from redrive.message_queue.base import QueueClient
from redrive.models.configuration import ConfigurationEntry
from redrive.models.message import Message, ProcessorStats
from redrive.processors.base import MessageProcessor


class QueueProcessor:
    """
    Redrive worker for a single queue.

    Owns one dedicated asyncio task that pulls messages one at a time,
    hands each to the message processor and then deletes it from the
    queue whatever the outcome. Processing failures are counted and
    logged, never raised; retries are left to the queue's own redelivery.

    Attributes:
        queue_client: Source of messages
        message_processor: Handler each message is passed to
        configuration: Queue configuration, read-only while running
        grace_seconds: How long stop() waits for the loop to exit
    """

    RECEIVE_ERROR_DELAY = 1.0

    def __init__(
        self,
        queue_client: Optional[QueueClient] = None,
        message_processor: Optional[MessageProcessor] = None,
        configuration: Optional[ConfigurationEntry] = None,
        grace_seconds: Optional[float] = None,
        log: Any = None,
    ):
        """
        Initialize queue processor.

        Dependencies may be given here or later through init().

        Args:
            queue_client: Source of messages
            message_processor: Handler for each message
            configuration: Queue configuration
            grace_seconds: Stop grace period (default from settings)
            log: loguru-compatible logger (default: loguru bound to the alias)
        """
        self.queue_client: Optional[QueueClient] = None
        self.message_processor: Optional[MessageProcessor] = None
        self.configuration: Optional[ConfigurationEntry] = None
        self.grace_seconds = (
            grace_seconds if grace_seconds is not None
            else get_settings().stop_grace_seconds
        )
        self._injected_log = log
        self._log = log or logger
        self._task: Optional[asyncio.Task] = None
        self._cancellation: Optional[asyncio.Event] = None
        self._stats = ProcessorStats()

        if queue_client and message_processor and configuration:
            self.init(queue_client, message_processor, configuration)

    def init(
        self,
        queue_client: QueueClient,
        message_processor: MessageProcessor,
        configuration: ConfigurationEntry,
    ) -> None:
        """Wire dependencies. Must be called before start()."""
        self.queue_client = queue_client
        self.message_processor = message_processor
        self.configuration = configuration
        self._log = self._injected_log or logger.bind(alias=configuration.alias)

    @property
    def alias(self) -> str:
        return self.configuration.alias if self.configuration else "<uninitialized>"

    @property
    def is_running(self) -> bool:
        return self._task is not None

    @property
    def stats(self) -> ProcessorStats:
        """Snapshot of the running totals."""
        return self._stats.model_copy()

    async def start(self) -> None:
        """
        Start the processing loop.

        No-op (logged) when already running.

        Raises:
            ProcessorNotInitializedError: If init() has not been called
        """
        if self._task is not None:
            self._log.info(f"Queue processor [{self.alias}] is already started")
            return

        if not (self.queue_client and self.message_processor and self.configuration):
            raise ProcessorNotInitializedError(
                f"Queue processor [{self.alias}] must be initialized before start"
            )

        self._stats = ProcessorStats()
        self._cancellation = asyncio.Event()
        self._task = asyncio.create_task(
            self._process_message_loop(self._cancellation),
            name=f"queue-processor-{self.alias}",
        )
        self._log.info(f"Queue processor [{self.alias}] started, url {self.configuration.redrive_url}")

    async def stop(self) -> None:
        """
        Stop the processing loop.

        Signals cancellation and waits up to grace_seconds for the current
        iteration to finish. A loop that does not exit in time is cancelled
        outright. The processor is marked stopped either way.
        """
        if self._task is None:
            self._log.info(f"Queue processor [{self.alias}] is already stopped")
            return

        task = self._task
        try:
            self._cancellation.set()
            await self._wait_for_exit(task)
            self._log.info(f"Queue processor [{self.alias}] stopped")
        except ShutdownTimeoutError as e:
            self._log.warning(f"Queue processor [{self.alias}] has not stopped gracefully - {e}")
            task.cancel()
        except Exception as e:
            self._log.warning(f"Queue processor [{self.alias}] has not stopped gracefully - {e}")
        finally:
            self._task = None
            self._cancellation = None

    async def _wait_for_exit(self, task: asyncio.Task) -> None:
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=self.grace_seconds)
        except asyncio.TimeoutError:
            raise ShutdownTimeoutError(
                f"loop still running after {self.grace_seconds}s"
            ) from None

    async def _process_message_loop(self, cancellation: asyncio.Event) -> None:
        while not cancellation.is_set():
            try:
                self._log.debug(f"Waiting for message, queue processor [{self.alias}]")
                message = await self.queue_client.get_message()
            except Exception as e:
                self._stats.receive_errors += 1
                self._log.error(f"Error receiving message, queue processor [{self.alias}] - {e}")
                await self._pause(cancellation, self.RECEIVE_ERROR_DELAY)
                continue

            if message is None:
                self._log.debug(f"No message received, queue processor [{self.alias}]")
            else:
                await self._handle_message(message)

            # Yield so a transport that never blocks cannot starve the event loop
            await asyncio.sleep(0)

    async def _handle_message(self, message: Message) -> None:
        self._stats.received += 1

        self._log.debug(f"Message received, queue processor [{self.alias}], id [{message.identifier}]")
        self._log.trace(f"[{self.alias}]: {message.content}")

        try:
            self._log.debug(
                f"Processing message, queue processor [{self.alias}], url {self.configuration.redrive_url}"
            )
            await self.message_processor.process_message(
                message.content,
                message.attributes,
                self.configuration,
            )
            self._log.debug(f"Processing complete, queue processor [{self.alias}]")

            self._stats.sent += 1
        except Exception as e:
            self._stats.failed += 1

            self._log.error(
                f"Error processing message [{message.identifier}], queue processor [{self.alias}] - {e!r}"
            )
            self._log.error(
                f"Message [{message.identifier}], queue processor [{self.alias}] follows\n{message.content}"
            )
        finally:
            self._log.info(
                f"Queue processor [{self.alias}], messages received {self._stats.received}, "
                f"sent {self._stats.sent}, failed {self._stats.failed}"
            )

        await self._delete(message)

    async def _delete(self, message: Message) -> None:
        try:
            self._log.debug(f"Deleting message, queue processor [{self.alias}], id [{message.identifier}]")
            if await self.queue_client.delete_message(message) is False:
                raise QueueDeletionError("queue client reported failure")
            self._log.debug(f"Message deleted, queue processor [{self.alias}], id [{message.identifier}]")
        except Exception as e:
            self._log.error(
                f"Could not delete message [{message.identifier}], queue processor [{self.alias}] "
                f"- MESSAGE REMAINS IN QUEUE! - {e}"
            )

    @staticmethod
    async def _pause(cancellation: asyncio.Event, seconds: float) -> None:
        """Sleep for up to seconds, waking early on cancellation."""
        try:
            await asyncio.wait_for(cancellation.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
