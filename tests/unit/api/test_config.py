"""
Unit tests for API settings.
"""

import pytest
from pydantic import ValidationError

from safercosmetics.api.config import APISettings, get_settings, reset_settings


def test_defaults():
    settings = APISettings()

    assert settings.rate_limit_requests == 100
    assert settings.rate_limit_window == 60
    assert settings.rate_limit_backend == "memory"
    assert settings.cors_allow_methods == ["GET"]


def test_environment_aliases(monkeypatch):
    monkeypatch.setenv("API_RATE_LIMIT_REQUESTS", "5")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./local.db")
    monkeypatch.setenv("API_RATE_LIMIT_BACKEND", "REDIS")

    settings = APISettings()

    assert settings.rate_limit_requests == 5
    assert settings.database_url == "sqlite:///./local.db"
    assert settings.rate_limit_backend == "redis"


def test_comma_separated_cors_origins():
    settings = APISettings(API_CORS_ORIGINS="http://a.example, http://b.example")

    assert settings.cors_origins == ["http://a.example", "http://b.example"]


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        APISettings(API_RATE_LIMIT_BACKEND="memcached")


def test_settings_singleton():
    first = get_settings()
    assert get_settings() is first

    reset_settings()
    assert get_settings() is not first
