"""Tests for environment driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from markethub.config import get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    reset_settings_cache()
    yield
    monkeypatch.undo()
    reset_settings_cache()


def test_settings_are_reloaded_after_cache_reset(monkeypatch):
    assert get_settings().notification_page_size == 50

    monkeypatch.setenv("NOTIFICATION_PAGE_SIZE", "30")
    monkeypatch.setenv("APP_TIMEZONE", "UTC")

    assert get_settings().notification_page_size == 50
    reset_settings_cache()
    settings = get_settings()
    assert settings.notification_page_size == 30
    assert settings.app_timezone == "UTC"


def test_feed_size_cannot_exceed_page_size(monkeypatch):
    monkeypatch.setenv("NOTIFICATION_PAGE_SIZE", "10")
    monkeypatch.setenv("NOTIFICATION_FEED_SIZE", "20")

    with pytest.raises(ValidationError):
        get_settings()


def test_unknown_store_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("NOTIFICATION_STORE", "redis")

    with pytest.raises(ValidationError):
        get_settings()
