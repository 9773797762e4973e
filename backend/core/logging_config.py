"""
Loguru logging configuration.

- Console logging for development
- Structured JSON logging everywhere else
- Correlation ID in every log record
"""

import sys
from typing import TYPE_CHECKING

from loguru import logger

from core.correlation import get_correlation_id

if TYPE_CHECKING:
    from loguru import Record


def correlation_filter(record: "Record") -> bool:
    """
    Add correlation ID to log record.

    Args:
        record: Loguru log record.

    Returns:
        Always True (filter never drops messages).
    """
    record["extra"]["correlation_id"] = get_correlation_id() or "-"
    return True


def configure_logging(environment: str = "development") -> None:
    """
    Configure Loguru for the application.

    Args:
        environment: "development" for console, anything else for JSON.
    """
    logger.remove()

    if environment == "development":
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{extra[correlation_id]}</cyan> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
            level="DEBUG",
            filter=correlation_filter,
            colorize=True,
        )
    else:
        # One JSON object per line for log shippers
        logger.add(
            sys.stderr,
            format="{message}",
            level="INFO",
            filter=correlation_filter,
            serialize=True,
        )
