"""
Tests for SqsQueueClient.
The boto3 client is replaced with a MagicMock.
"""

import pytest
from datetime import timedelta
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from redrive.errors import ConfigurationError, QueueDeletionError
from redrive.message_queue import SqsQueueClient
from redrive.models.message import Message


QUEUE_URL = "https://sqs.eu-west-1.amazonaws.com/123456789012/orders"


@pytest.fixture
def boto_client():
    client = MagicMock()
    client.receive_message.return_value = {}
    return client


@pytest.fixture
def sqs_queue(entry, boto_client):
    return SqsQueueClient(entry, client=boto_client, wait_time_seconds=1)


class TestSqsQueueClient:
    """Test suite for SqsQueueClient."""

    async def test_get_message_maps_sqs_message(self, sqs_queue, boto_client):
        boto_client.receive_message.return_value = {
            "Messages": [{
                "MessageId": "b8f2-41",
                "ReceiptHandle": "AQEB-handle",
                "Body": '{"order": 42}',
                "MessageAttributes": {
                    "trace-id": {"StringValue": "t-1", "DataType": "String"},
                    "priority": {"StringValue": "5", "DataType": "Number"},
                    "blob": {"BinaryValue": b"\x00\x01", "DataType": "Binary"},
                },
            }]
        }

        message = await sqs_queue.get_message()

        assert message == Message(
            identifier="b8f2-41",
            content='{"order": 42}',
            attributes={"trace-id": "t-1", "priority": "5"},
            receipt_handle="AQEB-handle",
        )

    async def test_get_message_long_polls_one_message(self, sqs_queue, boto_client):
        await sqs_queue.get_message()

        boto_client.receive_message.assert_called_once_with(
            QueueUrl=QUEUE_URL,
            MaxNumberOfMessages=1,
            WaitTimeSeconds=1,
            MessageAttributeNames=["All"],
        )

    async def test_get_message_with_visibility_timeout(self, entry, boto_client):
        sqs_queue = SqsQueueClient(entry, client=boto_client, wait_time_seconds=1, visibility_timeout=60)

        await sqs_queue.get_message()

        assert boto_client.receive_message.call_args.kwargs["VisibilityTimeout"] == 60

    async def test_get_message_empty_response(self, sqs_queue, boto_client):
        boto_client.receive_message.return_value = {"Messages": []}

        assert await sqs_queue.get_message() is None

    async def test_get_message_without_attributes(self, sqs_queue, boto_client):
        boto_client.receive_message.return_value = {
            "Messages": [{"MessageId": "m1", "ReceiptHandle": "h1", "Body": "plain"}]
        }

        message = await sqs_queue.get_message()

        assert message.attributes == {}
        assert message.content == "plain"

    async def test_receive_errors_propagate(self, sqs_queue, boto_client):
        boto_client.receive_message.side_effect = ClientError(
            {"Error": {"Code": "AWS.SimpleQueueService.NonExistentQueue", "Message": "gone"}},
            "ReceiveMessage",
        )

        with pytest.raises(ClientError):
            await sqs_queue.get_message()

    async def test_delete_message_uses_receipt_handle(self, sqs_queue, boto_client):
        message = Message(identifier="m1", content="x", receipt_handle="h1")

        await sqs_queue.delete_message(message)

        boto_client.delete_message.assert_called_once_with(QueueUrl=QUEUE_URL, ReceiptHandle="h1")

    async def test_delete_failure_raises_deletion_error(self, sqs_queue, boto_client):
        boto_client.delete_message.side_effect = ClientError(
            {"Error": {"Code": "ReceiptHandleIsInvalid", "Message": "expired"}},
            "DeleteMessage",
        )

        with pytest.raises(QueueDeletionError) as exc_info:
            await sqs_queue.delete_message(Message(identifier="m1", content="x", receipt_handle="h1"))

        assert "m1" in str(exc_info.value)

    async def test_delete_without_receipt_handle_raises(self, sqs_queue, boto_client):
        with pytest.raises(QueueDeletionError):
            await sqs_queue.delete_message(Message(identifier="m1", content="x"))

        boto_client.delete_message.assert_not_called()

    def test_queue_url_required(self, entry_factory):
        with pytest.raises(ConfigurationError):
            SqsQueueClient(entry_factory(queue_url=None), client=MagicMock())

    def test_defaults_from_settings(self, entry, monkeypatch):
        monkeypatch.setenv("REDRIVE_SQS_WAIT_TIME_SECONDS", "5")
        monkeypatch.setenv("REDRIVE_SQS_VISIBILITY_TIMEOUT", "120")

        sqs_queue = SqsQueueClient(entry, client=MagicMock())

        assert sqs_queue.wait_time_seconds == 5
        assert sqs_queue.visibility_timeout == 120

    def test_boto_client_built_from_configuration(self, entry_factory):
        entry = entry_factory(
            access_key="AKIA-test",
            secret_key="secret",
            service_url="http://localhost:4566",
            timeout=timedelta(seconds=3),
        )
        sqs_queue = SqsQueueClient(entry, wait_time_seconds=20)

        with patch("redrive.message_queue.sqs.boto3.client") as mock_boto:
            client = sqs_queue.client
            assert sqs_queue.client is client

        mock_boto.assert_called_once()
        args, kwargs = mock_boto.call_args
        assert args == ("sqs",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["endpoint_url"] == "http://localhost:4566"
        assert kwargs["aws_access_key_id"] == "AKIA-test"
        assert kwargs["aws_secret_access_key"] == "secret"
        assert kwargs["config"].read_timeout > 20
