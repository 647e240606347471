"""
Redrive Service Entry Point

Loads settings and queue configuration, then redrives every active queue
until SIGINT or SIGTERM.
"""
import argparse
import asyncio
import signal
import sys
from typing import Optional
from loguru import logger

from redrive.config import get_settings
from redrive.core.orchestrator import RedriveOrchestrator
from redrive.errors import ConfigurationError
from redrive.models.configuration import load_configuration
from redrive.utils.observability import configure_logging


async def run(config_file: str, shutdown: Optional[asyncio.Event] = None) -> None:
    """
    Run the redrive service until the shutdown event is set.

    Args:
        config_file: Path to the JSON queue configuration
        shutdown: Event that ends the run (default: set by SIGINT/SIGTERM)
    """
    entries = load_configuration(config_file)
    logger.info(f"Loaded {len(entries)} queue configuration(s) from {config_file}")

    if shutdown is None:
        shutdown = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, shutdown.set)

    orchestrator = RedriveOrchestrator(entries)
    await orchestrator.start()
    try:
        await shutdown.wait()
    finally:
        await orchestrator.stop()

    for alias, stats in orchestrator.stats().items():
        logger.info(
            f"Queue processor [{alias}] final totals: received {stats.received}, "
            f"sent {stats.sent}, failed {stats.failed}"
        )


def main(argv: Optional[list[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="redrive", description="Redrive queue messages to HTTP endpoints.")
    parser.add_argument(
        "--config",
        default=settings.config_file,
        help=f"queue configuration file (default: {settings.config_file})",
    )
    args = parser.parse_args(argv)

    configure_logging(settings)

    try:
        asyncio.run(run(args.config))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
