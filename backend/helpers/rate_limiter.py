"""Rate limiter configuration module.

Per-client limits live in the limits in-memory storage: one counter per
client identity, created on its first request and expiring 24 hours later
(fixed window anchored at that first request). Increments on the same key
are serialized by the storage's per-key lock. Counters are process-local and
reset on restart.
"""

from collections.abc import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from helpers.request_utils import get_client_ip, get_peer_ip
from models.config import Settings

RATE_LIMIT_MESSAGE = (
    "You have reached the daily message limit. Please try again tomorrow."
)


def client_key_func(trust_proxy_headers: bool) -> Callable[[Request], str]:
    """Build the function mapping a request to its rate-limit identity."""
    resolve = get_client_ip if trust_proxy_headers else get_peer_ip

    def key(request: Request) -> str:
        return resolve(request) or "unknown"

    return key


def create_limiter(settings: Settings) -> Limiter:
    """Create the limiter for one application instance."""
    return Limiter(
        key_func=client_key_func(settings.TRUST_PROXY_HEADERS),
        strategy="fixed-window",
        storage_uri="memory://",
        headers_enabled=True,
        retry_after="delta-seconds",
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Return 429 with the daily-limit message and X-RateLimit-* headers."""
    limiter: Limiter = request.app.state.limiter
    logger.warning(
        f"Rate limit exceeded for {limiter._key_func(request)} on {request.url.path}"
    )
    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": RATE_LIMIT_MESSAGE},
    )
    return limiter._inject_headers(response, request.state.view_rate_limit)


def inject_rate_limit_headers(request: Request, response: Response) -> Response:
    """Add X-RateLimit-* headers to an error response from a limited route.

    slowapi only decorates responses the view returns, so responses built by
    exception handlers need this. Requests that never reached the limiter
    are returned unchanged.
    """
    current_limit = getattr(request.state, "view_rate_limit", None)
    if current_limit is None:
        return response
    limiter: Limiter = request.app.state.limiter
    return limiter._inject_headers(response, current_limit)
