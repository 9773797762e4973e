"""Tests for startup configuration."""

import pytest
from pydantic import ValidationError

from models.config import Settings, load_settings


class TestSettingsDefaults:
    """Defaults applied when only the required values are set."""

    @pytest.fixture
    def minimal(self, monkeypatch) -> Settings:
        for name in ("CORS_ORIGIN", "ENVIRONMENT"):
            monkeypatch.delenv(name, raising=False)
        return Settings(RESEND_API_KEY="re_key", EMAIL_TO="inbox@example.com")

    def test_port(self, minimal) -> None:
        assert minimal.PORT == 3000

    def test_region(self, minimal) -> None:
        assert minimal.RESEND_REGION == "us-east-1"

    def test_sender(self, minimal) -> None:
        assert minimal.EMAIL_FROM == "Contact Form <onboarding@resend.dev>"

    def test_allowed_origins(self, minimal) -> None:
        assert minimal.allowed_origins == ["http://localhost:4321"]

    def test_rate_limit(self, minimal) -> None:
        assert minimal.RATE_LIMIT_MAX == 50
        assert minimal.rate_limit == "50 per 1 day"
        assert minimal.TRUST_PROXY_HEADERS is False

    def test_outbound_timeout(self, minimal) -> None:
        assert minimal.EMAIL_TIMEOUT_SECONDS == 10.0


class TestSettingsFromEnvironment:
    def test_comma_separated_origins(self, monkeypatch) -> None:
        monkeypatch.setenv("CORS_ORIGIN", "https://a.example.com, https://b.example.com,")

        settings = Settings()  # type: ignore[call-arg]

        assert settings.allowed_origins == [
            "https://a.example.com",
            "https://b.example.com",
        ]

    def test_numeric_values(self, monkeypatch) -> None:
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("RATE_LIMIT_MAX", "5")

        settings = Settings()  # type: ignore[call-arg]

        assert settings.PORT == 8080
        assert settings.rate_limit == "5 per 1 day"

    def test_settings_are_immutable(self) -> None:
        settings = Settings()  # type: ignore[call-arg]

        with pytest.raises(ValidationError):
            settings.EMAIL_TO = "other@example.com"  # type: ignore[misc]


class TestLoadSettings:
    """Missing required configuration stops the process."""

    def test_loads_when_configured(self) -> None:
        settings = load_settings()

        assert settings.RESEND_API_KEY == "re_test_key"
        assert settings.EMAIL_TO == "inbox@example.com"

    @pytest.mark.parametrize("name", ["RESEND_API_KEY", "EMAIL_TO"])
    def test_exits_when_missing(self, monkeypatch, name) -> None:
        monkeypatch.delenv(name)

        with pytest.raises(SystemExit) as exc_info:
            load_settings()

        assert exc_info.value.code == 1

    @pytest.mark.parametrize("name", ["RESEND_API_KEY", "EMAIL_TO"])
    def test_exits_when_empty(self, monkeypatch, name) -> None:
        monkeypatch.setenv(name, "")

        with pytest.raises(SystemExit):
            load_settings()

    def test_exits_on_invalid_threshold(self, monkeypatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_MAX", "0")

        with pytest.raises(SystemExit):
            load_settings()

    def test_create_app_refuses_to_start(self, monkeypatch) -> None:
        from main import create_app

        monkeypatch.delenv("RESEND_API_KEY")

        with pytest.raises(SystemExit):
            create_app()
