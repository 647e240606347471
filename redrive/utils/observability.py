"""
Structured Logging & Observability
Logging that's both human-readable and machine-parseable.
"""
import sys
from typing import Optional
from loguru import logger
from redrive.config import Settings, get_settings


def configure_logging(settings: Optional[Settings] = None):
    """
    Configure loguru for the redrive service.

    In development: Human-readable colorized output
    In production: Structured JSON logs for ingestion (ELK, Datadog, etc.)

    Queue processors bind their alias. The dev format prints it as a
    column, and JSON records carry record.extra.alias for per-queue
    filtering.
    """
    settings = settings or get_settings()

    # Records logged outside a queue processor show "-" in the alias column
    logger.configure(extra={"alias": "-"})

    # Remove default handler
    logger.remove()

    if not settings.enable_structured_logging:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<magenta>{extra[alias]}</magenta> | "
                "{message}"
            ),
            level=settings.log_level,
            colorize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,  # Output as JSON
        )

    logger.info(f"Logging configured: level={settings.log_level}, structured={settings.enable_structured_logging}")
