"""Core infrastructure modules for logging, correlation IDs and Sentry."""

from core.correlation import (
    CorrelationIdMiddleware,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry

__all__ = [
    "CorrelationIdMiddleware",
    "init_sentry",
    "configure_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
