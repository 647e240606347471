"""
Message Processor Interface
"""

from abc import ABC, abstractmethod

from redrive.models.configuration import ConfigurationEntry


class MessageProcessor(ABC):
    """
    Handles a single message on behalf of a queue processor.

    Returning normally means success; raising any exception means the
    message failed. Either way the queue processor deletes the message.
    """

    @abstractmethod
    async def process_message(
        self,
        content: str,
        attributes: dict[str, str],
        configuration: ConfigurationEntry,
    ) -> None:
        """
        Process one message.

        Args:
            content: Raw message payload
            attributes: Message metadata
            configuration: Configuration of the queue the message came from
        """
        pass
