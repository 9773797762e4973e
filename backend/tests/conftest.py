"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["EMAIL_TO"] = "inbox@example.com"
os.environ["CORS_ORIGIN"] = "http://localhost:4321,https://shop.example.com"
os.environ["ENVIRONMENT"] = "test"

from models.config import Settings  # noqa: E402
from models.schemas import OutgoingEmail  # noqa: E402
from services.email_service import EmailProvider  # noqa: E402


class FakeEmailProvider(EmailProvider):
    """Records outgoing emails instead of calling Resend."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[OutgoingEmail] = []

    async def send(self, email: OutgoingEmail) -> bool:
        self.sent.append(email)
        return self.succeed


def make_settings(**overrides) -> Settings:
    values = {
        "RESEND_API_KEY": "re_test_key",
        "EMAIL_TO": "inbox@example.com",
        "EMAIL_FROM": "Shop <contact@shop.example.com>",
        "CORS_ORIGIN": "http://localhost:4321,https://shop.example.com",
        "ENVIRONMENT": "test",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def email_provider() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def make_app(email_provider) -> Callable[..., FastAPI]:
    """Factory building an app around the fake provider with setting overrides."""
    from main import create_app

    def _make_app(**overrides) -> FastAPI:
        return create_app(make_settings(**overrides), email_provider=email_provider)

    return _make_app


@pytest.fixture
def client(make_app):
    """Test client for an app with default settings and a fresh rate limiter."""
    with TestClient(make_app()) as test_client:
        yield test_client


@pytest.fixture
def valid_submission() -> dict[str, str]:
    return {
        "name": "Ana",
        "email": "ana@example.com",
        "phone": "555-1234",
        "subject": "Pricing",
        "message": "Hi",
    }
