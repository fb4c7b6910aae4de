"""Tests for configuration validation."""

import pytest

from src.core.config import Settings, constants


def test_require_credential_with_valid_value() -> None:
    """Test require_credential returns value when credential is set."""
    settings = Settings(openrouter_api_key="sk-or-test")

    result = settings.require_credential("openrouter_api_key", "OpenRouter API key")

    assert result == "sk-or-test"


def test_require_credential_with_none_raises_error() -> None:
    """Test require_credential raises ValueError when credential is None."""
    settings = Settings(openrouter_api_key=None)

    with pytest.raises(ValueError, match="OpenRouter API key credential not configured"):
        settings.require_credential("openrouter_api_key", "OpenRouter API key")


def test_require_credential_with_empty_string_raises_error() -> None:
    """Test require_credential raises ValueError when credential is empty."""
    settings = Settings(openrouter_api_key="")

    with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
        settings.require_credential("openrouter_api_key", "OpenRouter API key")


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test settings are read from environment variables."""
    monkeypatch.setenv("SQLITE_DB_PATH", "/tmp/other.db")
    monkeypatch.setenv("UPDATE_LOOKUP_MAX_ATTEMPTS", "5")

    settings = Settings()

    assert settings.sqlite_db_path == "/tmp/other.db"
    assert settings.update_lookup_max_attempts == 5


def test_retry_defaults() -> None:
    """Test the update lookup defaults to three attempts 0.2 seconds apart."""
    settings = Settings(_env_file=None)

    assert settings.update_lookup_max_attempts == 3
    assert settings.update_lookup_delay_seconds == 0.2


def test_default_reply_constant() -> None:
    """Test the reply used when a payload carries no text."""
    assert constants.DEFAULT_REPLY == "Task executed successfully."
