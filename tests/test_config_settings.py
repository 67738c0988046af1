"""
Tests for src/config/settings.py

Environment variables are set with monkeypatch so nothing leaks between tests.
"""

import pytest

from src.config import settings as settings_module
from src.config.settings import (
    ClockCheckSettings,
    CoinbaseTimeSettings,
    Settings,
    get_settings,
    reset_settings,
)

ENV_VARS = [
    "COINBASE_BASE_URL",
    "COINBASE_TIMEOUT_SECONDS",
    "COINBASE_REQUIRE_AUTH",
    "CLOCK_MAX_SKEW_SECONDS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from an environment without our variables and no cached singleton."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_coinbase_defaults():
    settings = CoinbaseTimeSettings()

    assert settings.base_url == "https://api.coinbase.com/v2"
    assert settings.timeout_seconds == 50
    assert settings.require_auth is False


def test_coinbase_empty_base_url_rejected():
    with pytest.raises(ValueError, match="COINBASE_BASE_URL"):
        CoinbaseTimeSettings(base_url="")


@pytest.mark.parametrize("timeout", [0, -5])
def test_coinbase_non_positive_timeout_rejected(timeout):
    with pytest.raises(ValueError, match="timeout_seconds must be positive"):
        CoinbaseTimeSettings(timeout_seconds=timeout)


def test_coinbase_from_env_defaults():
    settings = CoinbaseTimeSettings.from_env()

    assert settings == CoinbaseTimeSettings()


def test_coinbase_from_env_overrides(monkeypatch):
    monkeypatch.setenv("COINBASE_BASE_URL", "https://sandbox.test-exchange.com/v2/")
    monkeypatch.setenv("COINBASE_TIMEOUT_SECONDS", "20")
    monkeypatch.setenv("COINBASE_REQUIRE_AUTH", "Yes")

    settings = CoinbaseTimeSettings.from_env()

    # Base URL is kept verbatim, trailing slash included
    assert settings.base_url == "https://sandbox.test-exchange.com/v2/"
    assert settings.timeout_seconds == 20
    assert settings.require_auth is True


def test_coinbase_from_env_bad_timeout(monkeypatch):
    monkeypatch.setenv("COINBASE_TIMEOUT_SECONDS", "fifty")

    with pytest.raises(ValueError, match="COINBASE_TIMEOUT_SECONDS must be an integer"):
        CoinbaseTimeSettings.from_env()


def test_clock_check_from_env(monkeypatch):
    monkeypatch.setenv("CLOCK_MAX_SKEW_SECONDS", "5")

    assert ClockCheckSettings.from_env().max_skew_seconds == 5


def test_clock_check_negative_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        ClockCheckSettings(max_skew_seconds=-1)


def test_settings_aggregate_from_env(monkeypatch):
    monkeypatch.setenv("COINBASE_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("CLOCK_MAX_SKEW_SECONDS", "3")

    settings = Settings.from_env()

    assert settings.coinbase.timeout_seconds == 15
    assert settings.clock_check.max_skew_seconds == 3


def test_get_settings_caches_until_reset(monkeypatch):
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("COINBASE_TIMEOUT_SECONDS", "9")
    assert get_settings().coinbase.timeout_seconds == 50

    reset_settings()
    assert get_settings().coinbase.timeout_seconds == 9
    assert settings_module._default_settings is not first
