"""
Sentry SDK configuration.

Contact submissions are personal data (names, emails, phone numbers), so
request bodies never leave the process. Sentry stays disabled unless a DSN
is configured.
"""

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.types import Event, Hint

from models.config import Settings


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Scrub PII before sending to Sentry.

    - Drop the request body (contact form fields)
    - Drop cookies and the Authorization header
    - Drop user email and let Sentry anonymize the IP

    Args:
        event: Sentry event.
        hint: Additional context about the event.

    Returns:
        The scrubbed event.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("data", None)
        request.pop("cookies", None)
        headers = request.get("headers")
        if isinstance(headers, dict) and "Authorization" in headers:
            headers["Authorization"] = "[Filtered]"

    return event


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry SDK with FastAPI and Loguru integrations.

    Call this BEFORE creating the FastAPI app instance.

    Returns:
        True if Sentry was initialized, False when no DSN is configured.
    """
    if not settings.SENTRY_DSN:
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        release=settings.SENTRY_RELEASE,
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoguruIntegration(),
        ],
        traces_sample_rate=0.2,
        sample_rate=1.0,
        before_send=_before_send,
        attach_stacktrace=True,
        ignore_errors=[KeyboardInterrupt, SystemExit],
    )
    return True
