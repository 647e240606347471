import asyncio
import pytest
from loguru import logger

from redrive.config import get_settings
from redrive.models.configuration import ConfigurationEntry


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment changes in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_records():
    """Collects loguru records emitted during the test, TRACE and up."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def entry_factory():
    """Returns a function building ConfigurationEntry objects with test defaults."""
    def _create_entry(**overrides):
        values = {
            "alias": "orders",
            "redrive_url": "https://api.example.com/v1/orders",
            "queue_url": "https://sqs.eu-west-1.amazonaws.com/123456789012/orders",
            "region": "eu-west-1",
        }
        values.update(overrides)
        return ConfigurationEntry(**values)
    return _create_entry


@pytest.fixture
def entry(entry_factory):
    """Returns a POST configuration entry."""
    return entry_factory()


async def _wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("Condition not met before timeout")
        await asyncio.sleep(interval)


@pytest.fixture
def wait_until():
    """Returns a coroutine function polling a predicate until it holds (2s default)."""
    return _wait_until
