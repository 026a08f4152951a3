"""Unit tests for environment-driven settings."""

from __future__ import annotations

import pytest

from gitlytics_view.config import Settings, load_settings

pytestmark = pytest.mark.unit


def test_default_settings_carry_a_secret_key() -> None:
    first, second = Settings(), Settings()
    assert first.secret_key
    assert first.secret_key != second.secret_key


def test_load_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setattr("gitlytics_view.config.load_dotenv", lambda: None)
    monkeypatch.setenv("ANALYTICS_API_BASE", " http://backend.test/api/ ")
    monkeypatch.setenv("RESULTS_TTL_SECONDS", "60")
    monkeypatch.setenv("SECRET_KEY", "s3cret")
    monkeypatch.setenv("GITHUB_WEB_HOST", "GitHub.Example.com")

    settings = load_settings()

    assert settings.api_base == "http://backend.test/api"
    assert settings.results_ttl_ms == 60_000
    assert settings.secret_key == "s3cret"
    assert settings.web_host == "github.example.com"


def test_blank_secret_key_is_generated(monkeypatch) -> None:
    monkeypatch.setattr("gitlytics_view.config.load_dotenv", lambda: None)
    monkeypatch.setenv("SECRET_KEY", "   ")
    assert load_settings().secret_key
