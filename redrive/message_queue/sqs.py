"""
Amazon SQS Queue Client

Long-polls one SQS queue per configuration entry. boto3 is blocking, so
every call runs in a worker thread to keep other queues' loops moving.
"""

import asyncio
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from redrive.config import get_settings
from redrive.errors import ConfigurationError, QueueDeletionError
from redrive.message_queue.base import QueueClient
from redrive.models.configuration import ConfigurationEntry
from redrive.models.message import Message


class SqsQueueClient(QueueClient):
    """
    SQS-backed queue client.

    Visibility timeout and redelivery are left to SQS: a message that is
    not deleted reappears once its visibility timeout expires.
    """

    def __init__(
        self,
        configuration: ConfigurationEntry,
        client: Any = None,
        wait_time_seconds: Optional[int] = None,
        visibility_timeout: Optional[int] = None,
    ):
        """
        Initialize SQS client.

        Args:
            configuration: Queue configuration (queue_url is required)
            client: boto3 SQS client (created from configuration if None)
            wait_time_seconds: Long-poll wait, 0-20 (default from settings)
            visibility_timeout: Receive visibility timeout (default from settings)
        """
        if not configuration.queue_url:
            raise ConfigurationError(f"Queue [{configuration.alias}] has no QueueUrl")

        settings = get_settings()
        self.configuration = configuration
        self.queue_url = configuration.queue_url
        self.wait_time_seconds = (
            wait_time_seconds if wait_time_seconds is not None
            else settings.sqs_wait_time_seconds
        )
        self.visibility_timeout = (
            visibility_timeout if visibility_timeout is not None
            else settings.sqs_visibility_timeout
        )
        self._client = client

    @property
    def client(self) -> Any:
        """Lazy-load the boto3 client with a read timeout above the long-poll wait."""
        if self._client is None:
            entry = self.configuration
            self._client = boto3.client(
                "sqs",
                region_name=entry.region,
                endpoint_url=entry.service_url,
                aws_access_key_id=entry.access_key,
                aws_secret_access_key=entry.secret_key,
                config=Config(
                    read_timeout=self.wait_time_seconds + 10,
                    connect_timeout=5,
                    retries={"max_attempts": 3},
                ),
            )
        return self._client

    async def get_message(self) -> Optional[Message]:
        params = {
            "QueueUrl": self.queue_url,
            "MaxNumberOfMessages": 1,
            "WaitTimeSeconds": self.wait_time_seconds,
            "MessageAttributeNames": ["All"],
        }
        if self.visibility_timeout is not None:
            params["VisibilityTimeout"] = self.visibility_timeout

        response = await asyncio.to_thread(self.client.receive_message, **params)
        messages = response.get("Messages", [])
        if not messages:
            return None

        return self._to_message(messages[0])

    async def delete_message(self, message: Message) -> None:
        if not message.receipt_handle:
            raise QueueDeletionError(f"Message {message.identifier} has no receipt handle")

        try:
            await asyncio.to_thread(
                self.client.delete_message,
                QueueUrl=self.queue_url,
                ReceiptHandle=message.receipt_handle,
            )
        except (BotoCoreError, ClientError) as e:
            raise QueueDeletionError(
                f"Failed to delete message {message.identifier}: {e}"
            ) from e

    def _to_message(self, raw: dict) -> Message:
        """Map a raw SQS message; only string-typed attributes are forwarded."""
        attributes = {}
        for name, value in raw.get("MessageAttributes", {}).items():
            string_value = value.get("StringValue")
            if string_value is None:
                logger.debug(
                    f"Skipping non-string attribute [{name}] on message {raw.get('MessageId')}"
                )
                continue
            attributes[name] = string_value

        return Message(
            identifier=raw["MessageId"],
            content=raw.get("Body", ""),
            attributes=attributes,
            receipt_handle=raw.get("ReceiptHandle"),
        )
