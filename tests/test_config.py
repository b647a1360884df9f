"""Tests for symposium/core/config.py."""

import pytest

from symposium.core.config import get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_defaults(monkeypatch, fresh_settings):
    for key in ("DATABASE_URL", "APP_ENV", "CONTEXT_MESSAGE_LIMIT", "PERPLEXITY_MODEL", "ENABLE_AUDIT_LOGGING"):
        monkeypatch.delenv(key, raising=False)

    settings = fresh_settings()

    assert settings.database_url == "sqlite:///symposium.db"
    assert settings.is_development()
    assert settings.context_message_limit == 50
    assert settings.perplexity_model == "sonar"
    assert settings.enable_audit_logging is True


def test_environment_overrides(monkeypatch, fresh_settings):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/symposium")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("CONTEXT_MESSAGE_LIMIT", "10")
    monkeypatch.setenv("OPENROUTER_BASE_URL", "https://gateway.test/v1/")
    monkeypatch.setenv("SEED_DEMO_DATA", "yes")

    settings = fresh_settings()

    assert settings.database_url == "postgresql://u:p@db/symposium"
    assert settings.is_production()
    assert settings.context_message_limit == 10
    assert settings.openrouter_base_url == "https://gateway.test/v1"
    assert settings.seed_demo_data is True


def test_missing_api_key_raises(monkeypatch, fresh_settings):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

    with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
        fresh_settings()
