"""Tests for settings loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notification_client.config import Settings, get_settings, reset_settings_cache


def test_settings_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.poll_interval_seconds == 30
    assert settings.checkpoint_key == "lastNotificationCheck"
    assert settings.api_prefix == "/api"
    assert settings.default_page_size == 20


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "https://store.example.com/")
    monkeypatch.setenv("API_PREFIX", "v2/")
    monkeypatch.setenv("ACCESS_TOKEN", "abc")
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "5")
    reset_settings_cache()

    settings = get_settings()

    assert settings.api_base_url == "https://store.example.com"
    assert settings.api_prefix == "/v2"
    assert settings.access_token == "abc"
    assert settings.poll_interval_seconds == 5
    assert get_settings() is settings
    reset_settings_cache()


def test_poll_interval_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, poll_interval_seconds=0)
