import os
import sys
from typing import List

from loguru import logger
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    Local development picks up `backend/.env` automatically. Under pytest or
    in CI the file is ignored so tests that check missing variables still
    fail fast.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', or 'production'",
    )

    # Mail provider (Resend)
    RESEND_API_KEY: str = Field(
        ...,  # Required, no default
        min_length=1,
        description="Resend API key - must be set via RESEND_API_KEY environment variable",
    )
    RESEND_REGION: str = Field(
        default="us-east-1",
        description="Resend region the sending domain is registered in",
    )
    RESEND_API_URL: str = Field(
        default="https://api.resend.com",
        description="Base URL of the Resend HTTP API",
    )
    EMAIL_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for the outbound send-mail call (seconds)",
    )

    # Addresses
    EMAIL_TO: str = Field(
        ...,  # Required, no default
        min_length=1,
        description="Inbox receiving contact messages - must be set via EMAIL_TO",
    )
    EMAIL_FROM: str = Field(
        default="Contact Form <onboarding@resend.dev>",
        description="Sender identity verified with the mail provider",
    )

    # CORS settings
    CORS_ORIGIN: str = Field(
        default="http://localhost:4321",
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Rate limiting
    RATE_LIMIT_MAX: int = Field(
        default=50,
        ge=1,
        description="Maximum submissions per client identity per 24 hours",
    )
    TRUST_PROXY_HEADERS: bool = Field(
        default=False,
        description="Identify clients by proxy headers (X-Forwarded-For etc.) instead of the socket peer",
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Monitoring
    SENTRY_DSN: str | None = None
    SENTRY_RELEASE: str = "unknown"
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    @property
    def allowed_origins(self) -> List[str]:
        """Parse CORS origins from the comma-separated CORS_ORIGIN value."""
        return [
            origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()
        ]

    @property
    def rate_limit(self) -> str:
        """Limit string in slowapi notation (fixed 24-hour window)."""
        return f"{self.RATE_LIMIT_MAX} per 1 day"

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


def load_settings() -> Settings:
    """Read settings from the environment, exiting if required values are missing.

    Raises:
        SystemExit: if RESEND_API_KEY, EMAIL_TO or any other value is invalid.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        logger.error(
            f"Invalid or missing environment variables ({missing}). "
            "The server cannot start."
        )
        raise SystemExit(1) from e
