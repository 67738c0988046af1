"""
Configuration settings for the server-time client.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at construction, so a bad timeout or an empty base URL fails at startup rather
than halfway through a request.

**Why centralized config?**
  - Single source of truth for the exchange base URL and request timeout.
  - Easy to test (inject fake settings instead of reading from environment).
  - The client itself never reads the environment; only this module does.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op when the file is absent)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


_TRUE_VALUES = ("true", "1", "yes")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


@dataclass(frozen=True)
class CoinbaseTimeSettings:
    """
    Configuration for the exchange time endpoints.

    **Conceptual**: The time endpoints are public, so no API key lives here.
    Request signing belongs to whatever authenticated transport the caller
    injects into the client; this object only describes where to send
    unauthenticated requests and how long to wait for them.

    **Why require_auth?**
    Without an authenticated transport the brokerage time request silently
    falls back to an unauthenticated one. Setting require_auth=True turns that
    fallback into an explicit AuthenticationRequiredError instead.

    Attributes:
        base_url: Base URL prepended to endpoint paths (e.g. "https://api.coinbase.com/v2").
                 Used verbatim; no trailing-slash normalization.
        timeout_seconds: HTTP request timeout in seconds (default 50).
        require_auth: If True, fetching brokerage time without an authenticated
                     transport raises instead of degrading (default False).
    """
    base_url: str = "https://api.coinbase.com/v2"
    timeout_seconds: int = 50
    require_auth: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.base_url:
            raise ValueError(
                "COINBASE_BASE_URL is required but not set. "
                "Please set it in your .env file or environment variables."
            )
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )

    @classmethod
    def from_env(cls) -> "CoinbaseTimeSettings":
        """
        Load time-client settings from environment variables.

        **Environment variables**:
          - COINBASE_BASE_URL (optional): Defaults to "https://api.coinbase.com/v2".
          - COINBASE_TIMEOUT_SECONDS (optional): HTTP timeout in seconds. Defaults to 50.
          - COINBASE_REQUIRE_AUTH (optional): "true"/"1"/"yes" to forbid the
            unauthenticated fallback. Defaults to false.

        Returns:
            CoinbaseTimeSettings object with values loaded from environment.

        Raises:
            ValueError: If the timeout is not a positive integer or the base URL is empty.

        Usage example:
            >>> # In .env file:
            >>> # COINBASE_TIMEOUT_SECONDS=20
            >>>
            >>> settings = CoinbaseTimeSettings.from_env()
            >>> print(settings.timeout_seconds)  # 20
        """
        base_url = os.getenv("COINBASE_BASE_URL", "https://api.coinbase.com/v2")
        timeout_seconds = _parse_int(
            "COINBASE_TIMEOUT_SECONDS", os.getenv("COINBASE_TIMEOUT_SECONDS", "50")
        )
        require_auth = os.getenv("COINBASE_REQUIRE_AUTH", "false").lower() in _TRUE_VALUES

        return cls(
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            require_auth=require_auth,
        )


@dataclass(frozen=True)
class ClockCheckSettings:
    """
    Tolerance used by the server-time check action.

    Attributes:
        max_skew_seconds: Largest absolute skew (server minus local) that is
                         still considered healthy. Default 30 seconds.
    """
    max_skew_seconds: int = 30

    def __post_init__(self):
        if self.max_skew_seconds < 0:
            raise ValueError(
                f"max_skew_seconds must be non-negative, got: {self.max_skew_seconds}"
            )

    @classmethod
    def from_env(cls) -> "ClockCheckSettings":
        """Load from CLOCK_MAX_SKEW_SECONDS (default 30)."""
        return cls(
            max_skew_seconds=_parse_int(
                "CLOCK_MAX_SKEW_SECONDS", os.getenv("CLOCK_MAX_SKEW_SECONDS", "30")
            )
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings aggregate.

    **Usage pattern**:
      ```python
      from src.config.settings import get_settings

      settings = get_settings()
      client = CoinbaseTimeClient(settings.coinbase)
      ```

    Attributes:
        coinbase: Time endpoint settings.
        clock_check: Skew tolerance for the check action.
    """
    coinbase: CoinbaseTimeSettings = field(default_factory=CoinbaseTimeSettings)
    clock_check: ClockCheckSettings = field(default_factory=ClockCheckSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load all subsystem settings from the environment.

        Raises:
            ValueError: If any variable is present but invalid.
        """
        return cls(
            coinbase=CoinbaseTimeSettings.from_env(),
            clock_check=ClockCheckSettings.from_env(),
        )


# Lazily-populated singleton. Tests should build Settings(...) directly or call
# reset_settings() after patching the environment.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached for reuse.

    Returns:
        Global Settings singleton.
    """
    global _default_settings
    if _default_settings is None:
        _default_settings = Settings.from_env()
    return _default_settings


def reset_settings() -> None:
    """Drop the cached singleton so the next get_settings() re-reads the environment."""
    global _default_settings
    _default_settings = None
