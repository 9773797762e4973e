# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before settings are read

import time
from collections.abc import Awaitable, Callable

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    CORRELATION_HEADER,
    CorrelationIdMiddleware,
    get_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from helpers.origin_guard import OriginGuardMiddleware
from helpers.rate_limiter import (
    create_limiter,
    inject_rate_limit_headers,
    rate_limit_exceeded_handler,
)
from models.config import Settings, load_settings
from models.exceptions import (
    DomainException,
    EmailDeliveryException,
    OriginDeniedException,
    ValidationException,
)
from routers.contact_router import create_contact_router
from services.contact_service import ContactService
from services.email_service import EmailProvider, get_email_provider

INTERNAL_ERROR_MESSAGE = "Internal server error."


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    def __init__(self, app, slow_request_threshold: float) -> None:
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log timing information."""
        start_time = time.perf_counter()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        if duration > self.slow_request_threshold:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {self.slow_request_threshold}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


def _message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Centralized exception handlers mapping domain errors to JSON responses."""

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        logger.info(f"Rejected submission ({exc.__class__.__name__}): {exc.message}")
        response = _message_response(status.HTTP_400_BAD_REQUEST, exc.message)
        return inject_rate_limit_headers(request, response)

    @app.exception_handler(OriginDeniedException)
    async def origin_denied_exception_handler(
        request: Request, exc: OriginDeniedException
    ) -> JSONResponse:
        logger.warning(exc.message)
        return _message_response(status.HTTP_403_FORBIDDEN, exc.message)

    @app.exception_handler(EmailDeliveryException)
    async def email_delivery_exception_handler(
        request: Request, exc: EmailDeliveryException
    ) -> JSONResponse:
        sentry_sdk.set_tag("correlation_id", exc.correlation_id)
        sentry_sdk.capture_exception(exc)
        logger.error(f"Email delivery failed (correlation_id={exc.correlation_id})")
        response = _message_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message
        )
        return inject_rate_limit_headers(request, response)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        logger.error(
            f"Unmapped domain exception {exc.__class__.__name__}: {exc.message}"
        )
        return _message_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Catch-all: generic 500, details only in the logs
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        correlation_id = (
            getattr(request.state, "correlation_id", None) or get_correlation_id()
        )
        sentry_sdk.capture_exception(exc)
        logger.opt(exception=exc).error(
            f"Unhandled exception on {request.method} {request.url.path} "
            f"(correlation_id={correlation_id or '-'})"
        )
        response = _message_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )
        # Runs outside CorrelationIdMiddleware, so the header is set here
        if correlation_id:
            response.headers[CORRELATION_HEADER] = correlation_id
        return response


def create_app(
    settings: Settings | None = None,
    email_provider: EmailProvider | None = None,
) -> FastAPI:
    """Build the contact relay application.

    Args:
        settings: Startup configuration; read from the environment when omitted
            (the process exits if RESEND_API_KEY or EMAIL_TO is missing).
        email_provider: Mail provider override; defaults to Resend.
    """
    if settings is None:
        settings = load_settings()

    configure_logging(settings.ENVIRONMENT)
    init_sentry(settings)

    app = FastAPI(
        title="Contact Relay", docs_url=None, redoc_url=None, openapi_url=None
    )

    limiter = create_limiter(settings)
    app.state.settings = settings
    app.state.limiter = limiter
    app.state.contact_service = ContactService(
        settings, email_provider or get_email_provider(settings)
    )

    register_exception_handlers(app)
    app.include_router(create_contact_router(limiter, settings))

    # Middleware runs in reverse order of registration: correlation ID and
    # request logging wrap the origin guard, which wraps CORS header handling.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
        ],
    )
    app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.allowed_origins)
    app.add_middleware(
        RequestLoggingMiddleware,
        slow_request_threshold=settings.SLOW_REQUEST_THRESHOLD,
    )
    app.add_middleware(CorrelationIdMiddleware)

    logger.info(
        f"Contact relay configured: recipient={settings.EMAIL_TO} "
        f"origins={settings.allowed_origins} "
        f"rate_limit={settings.rate_limit}"
    )
    return app


app = create_app()


def main() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings: Settings = app.state.settings
    logger.info(f"Server listening on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
