"""Tests for configuration loading."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from debtledger.config import (
    LedgerSettings,
    TelegramSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLedgerSettings:
    """Tests for LEDGER_* settings."""

    def test_defaults(self, monkeypatch):
        for name in ("LEDGER_DATA_DIR", "LEDGER_UTC_OFFSET_HOURS", "LEDGER_CONFIRM_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        settings = LedgerSettings(_env_file=None)
        assert settings.data_dir == "database"
        assert settings.utc_offset_hours == -4
        assert settings.confirm_token == "confirm"
        assert settings.tzinfo.utcoffset(None) == timedelta(hours=-4)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LEDGER_DATA_DIR", "/tmp/ledgers")
        monkeypatch.setenv("LEDGER_UTC_OFFSET_HOURS", "2")
        monkeypatch.setenv("LEDGER_CONFIRM_TOKEN", "  YES ")
        settings = LedgerSettings(_env_file=None)
        assert settings.data_dir == "/tmp/ledgers"
        assert settings.tzinfo.utcoffset(None) == timedelta(hours=2)
        assert settings.confirm_token == "yes"

    def test_offset_bounds(self, monkeypatch):
        monkeypatch.setenv("LEDGER_UTC_OFFSET_HOURS", "20")
        with pytest.raises(ValidationError):
            LedgerSettings(_env_file=None)


class TestTelegramSettings:
    """Tests for TELEGRAM_* settings."""

    def test_token_required(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        with pytest.raises(ValidationError):
            TelegramSettings(_env_file=None)

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        settings = TelegramSettings(_env_file=None)
        assert settings.bot_token == "123:abc"
        assert settings.poll_timeout == 30


class TestValidateAllSettings:
    """Tests for validate_all_settings."""

    def test_reports_each_section(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        results = validate_all_settings()
        assert results["ledger"] is True
        assert results["telegram"] is True
        assert results["app"] is True

    def test_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LEDGER_UTC_OFFSET_HOURS", "99")
        results = validate_all_settings()
        assert results["ledger"] is False
        assert "ledger_error" in results
