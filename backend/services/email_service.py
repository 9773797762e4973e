"""Email service for sending transactional emails.

Messages go out through the Resend HTTP API. The provider is an opaque
collaborator: network errors, timeouts, authentication and quota errors are
all reported the same way, as a failed send.
"""

from abc import ABC, abstractmethod

import httpx
from loguru import logger

from models.config import Settings
from models.schemas import OutgoingEmail


class EmailProvider(ABC):
    """Abstract base class for email providers."""

    @abstractmethod
    async def send(self, email: OutgoingEmail) -> bool:
        """Send an email. Returns True once the provider accepted it."""
        pass


class ResendProvider(EmailProvider):
    """Resend email provider (https://resend.com/docs/api-reference)."""

    def __init__(self, settings: Settings) -> None:
        """Initialize Resend provider with settings."""
        self.api_key = settings.RESEND_API_KEY
        self.api_url = settings.RESEND_API_URL.rstrip("/")
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS

    async def send(self, email: OutgoingEmail) -> bool:
        """Submit the email to POST /emails.

        Delivery itself is not confirmed; a 2xx only means Resend queued it.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = email.model_dump(by_alias=True)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/emails",
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
        except httpx.TimeoutException:
            logger.error(
                f"Resend: no response within {self.timeout}s sending to {email.to}"
            )
            return False
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Resend: HTTP {e.response.status_code} sending to {email.to}: "
                f"{e.response.text[:200]!r}"
            )
            return False
        except Exception as e:
            logger.error(f"Resend: failed to send email to {email.to}: {e!r}")
            return False

        logger.info(f"Email accepted by Resend for {email.to}")
        return True


def get_email_provider(settings: Settings) -> EmailProvider:
    """Get the configured email provider."""
    logger.info(
        f"Email provider: resend ({settings.RESEND_API_URL}, "
        f"region={settings.RESEND_REGION})"
    )
    return ResendProvider(settings)
