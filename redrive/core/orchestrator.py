"""
Redrive Orchestrator
Runs one QueueProcessor per active configuration entry.
"""
import asyncio
from typing import Callable, Iterable, Optional
from loguru import logger

from redrive.message_queue import QueueClient, QueueProcessor, SqsQueueClient
from redrive.models.configuration import ConfigurationEntry
from redrive.models.message import ProcessorStats
from redrive.processors import HttpMessageProcessor, MessageProcessor


class RedriveOrchestrator:
    """
    Owns the queue processors of a running service.

    Each active entry gets its own queue client and processor, so queues
    are redriven independently. The message processor is stateless and
    shared.

    Usage:
        orchestrator = RedriveOrchestrator(load_configuration("config.json"))
        await orchestrator.start()
        ...
        await orchestrator.stop()
    """

    def __init__(
        self,
        entries: Iterable[ConfigurationEntry],
        queue_client_factory: Optional[Callable[[ConfigurationEntry], QueueClient]] = None,
        message_processor: Optional[MessageProcessor] = None,
        grace_seconds: Optional[float] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            entries: Queue configuration entries
            queue_client_factory: Builds a client per entry (default: SqsQueueClient)
            message_processor: Shared processor (default: HttpMessageProcessor)
            grace_seconds: Stop grace period per processor (default from settings)
        """
        self._queue_client_factory = queue_client_factory or SqsQueueClient
        self._message_processor = message_processor or HttpMessageProcessor()
        self._processors: dict[str, QueueProcessor] = {}

        for entry in entries:
            if not entry.active:
                logger.info(f"Queue processor [{entry.alias}] is not active, skipping")
                continue

            processor = QueueProcessor(grace_seconds=grace_seconds)
            processor.init(
                self._queue_client_factory(entry),
                self._message_processor,
                entry,
            )
            self._processors[entry.alias] = processor

    @property
    def processors(self) -> dict[str, QueueProcessor]:
        return dict(self._processors)

    async def start(self) -> None:
        """Start every processor."""
        if not self._processors:
            logger.warning("No active queues configured, nothing to redrive")
            return

        for processor in self._processors.values():
            await processor.start()

        logger.info(f"🚀 Redrive started for {len(self._processors)} queue(s)")

    async def stop(self) -> None:
        """Stop every processor concurrently."""
        await asyncio.gather(*(p.stop() for p in self._processors.values()))
        logger.info("🛑 Redrive stopped")

    def stats(self) -> dict[str, ProcessorStats]:
        return {alias: p.stats for alias, p in self._processors.items()}
