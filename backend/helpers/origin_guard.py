"""Origin allow-list enforcement.

Starlette's CORSMiddleware only decides which CORS headers to emit; a request
from a foreign origin still reaches the route. This middleware rejects such
requests outright, before rate limiting, validation or dispatch.
"""

from collections.abc import Iterable

from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.types import ASGIApp, Receive, Scope, Send

from models.exceptions import OriginDeniedException


def is_origin_allowed(origin: str | None, allowed_origins: Iterable[str]) -> bool:
    """Decide whether a declared origin may use the API.

    Requests without an Origin header (curl, server-to-server, mobile apps)
    are always allowed.
    """
    if not origin:
        return True
    return origin in allowed_origins


class OriginGuardMiddleware:
    """Reject requests whose Origin header is not in the allow-list with 403."""

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
        self.app = app
        self.allowed_origins = frozenset(allowed_origins)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = None
        for key, value in scope["headers"]:
            if key == b"origin":
                origin = value.decode("latin-1")
                break

        if is_origin_allowed(origin, self.allowed_origins):
            await self.app(scope, receive, send)
            return

        exc = OriginDeniedException(origin or "")
        logger.warning(f"Rejected {scope['method']} {scope['path']}: {exc.message}")
        response = JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"message": exc.message},
        )
        await response(scope, receive, send)
