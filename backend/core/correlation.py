"""
Request correlation IDs.

Every request gets a short ID, taken from the incoming ``X-Correlation-ID``
header when the caller supplies one. The ID is stored in a context variable
so log lines and exceptions can pick it up, and echoed back on the response.
"""

import uuid
from collections.abc import Awaitable, Callable
from contextvars import ContextVar

import sentry_sdk
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

CORRELATION_HEADER = "X-Correlation-ID"

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a fresh 8-character hex ID."""
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Correlation ID of the current request, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a correlation ID to the request context and the response headers."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = (
            request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        )
        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id
        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
