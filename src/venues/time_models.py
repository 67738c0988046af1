"""
Value types for server time readings.

**Conceptual**: The two time endpoints return similar information in different
shapes. The public endpoint wraps its payload in a "data" envelope and reports
fractional epoch seconds; the brokerage endpoint returns a flat object with
integer milliseconds and seconds. Each shape gets its own frozen dataclass and
a from_payload() constructor that does the parsing and coercion in one place.

**Why coerce at the boundary?**
The public endpoint has been seen returning the epoch as a string
("1420674445.201") instead of a number. Coercing once during parsing means
everything downstream (skew arithmetic, logging) can rely on numeric fields.

**What is NOT validated**:
The ISO string is stored as received. It is only parsed when .timestamp is
read, so a server sending an odd-but-harmless ISO variant doesn't break
fetches that never look at it.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

import pandas as pd


class TimeClientError(Exception):
    """
    Base exception for time client errors.

    Transport failures (requests.Timeout, requests.ConnectionError,
    requests.HTTPError) are NOT wrapped in this hierarchy; they reach the
    caller as raised by requests.
    """
    pass


class MalformedResponseError(TimeClientError):
    """
    Raised when a response body lacks an expected field or holds a non-numeric epoch.

    **Recovery**: None locally. Usually means the endpoint changed shape or the
    base URL points at the wrong API version.
    """
    pass


def _require(body: Any, key: str, context: str) -> Any:
    if not isinstance(body, dict) or key not in body:
        keys = list(body.keys()) if isinstance(body, dict) else type(body).__name__
        raise MalformedResponseError(
            f"{context}: response missing '{key}' field. Got: {keys}"
        )
    return body[key]


def _to_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise MalformedResponseError(f"'{field_name}' must be numeric, got: {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise MalformedResponseError(f"'{field_name}' must be numeric, got: {value!r}")
    if not math.isfinite(result):
        raise MalformedResponseError(f"'{field_name}' must be finite, got: {value!r}")
    return result


def _to_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise MalformedResponseError(f"'{field_name}' must be an integer, got: {value!r}")
    try:
        number = Decimal(str(value))
        if number != number.to_integral_value():
            raise ValueError(value)
        return int(number)
    except (InvalidOperation, ValueError, OverflowError):
        raise MalformedResponseError(f"'{field_name}' must be an integer, got: {value!r}")


def _parse_iso(iso: str) -> pd.Timestamp:
    # Offset-less strings are read as UTC.
    try:
        ts = pd.Timestamp(iso)
    except ValueError as e:
        raise MalformedResponseError(f"Unparseable ISO timestamp: {iso!r}") from e
    if pd.isna(ts):
        raise MalformedResponseError(f"Unparseable ISO timestamp: {iso!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


@dataclass(frozen=True)
class PublicTimeReading:
    """
    Server time from the public ``/time`` endpoint.

    Attributes:
        epoch_seconds: Decimal seconds since the Unix epoch (e.g. 1420674445.201).
        iso_timestamp: ISO 8601 UTC string with milliseconds (e.g. "2015-01-07T23:47:25.201Z").
    """
    epoch_seconds: float
    iso_timestamp: str

    @classmethod
    def from_payload(cls, body: Dict[str, Any]) -> "PublicTimeReading":
        """
        Build a reading from the public endpoint's JSON body.

        Expects ``{"data": {"epoch": number|string, "iso": string}}``.

        Raises:
            MalformedResponseError: If the envelope or a field is missing, or
                the epoch cannot be read as a number.
        """
        data = _require(body, "data", "public time")
        epoch = _require(data, "epoch", "public time")
        iso = _require(data, "iso", "public time")
        return cls(
            epoch_seconds=_to_float(epoch, "data.epoch"),
            iso_timestamp=str(iso),
        )

    @property
    def timestamp(self) -> pd.Timestamp:
        """ISO timestamp parsed to a tz-aware UTC pd.Timestamp."""
        return _parse_iso(self.iso_timestamp)


@dataclass(frozen=True)
class AuthenticatedTimeReading:
    """
    Server time from the brokerage ``/brokerage/time`` endpoint.

    epoch_millis and epoch_seconds are taken from their own response fields;
    neither is derived from the other.

    Attributes:
        epoch_millis: Milliseconds since the Unix epoch.
        epoch_seconds: Whole seconds since the Unix epoch.
        iso_timestamp: ISO 8601 UTC string.
    """
    epoch_millis: int
    epoch_seconds: int
    iso_timestamp: str

    @classmethod
    def from_payload(cls, body: Dict[str, Any]) -> "AuthenticatedTimeReading":
        """
        Build a reading from the brokerage endpoint's flat JSON body.

        Expects ``{"epochMillis": ..., "epochSeconds": ..., "iso": ...}``.

        Raises:
            MalformedResponseError: If a field is missing or not an integer.
        """
        millis = _require(body, "epochMillis", "brokerage time")
        seconds = _require(body, "epochSeconds", "brokerage time")
        iso = _require(body, "iso", "brokerage time")
        return cls(
            epoch_millis=_to_int(millis, "epochMillis"),
            epoch_seconds=_to_int(seconds, "epochSeconds"),
            iso_timestamp=str(iso),
        )

    @property
    def timestamp(self) -> pd.Timestamp:
        """ISO timestamp parsed to a tz-aware UTC pd.Timestamp."""
        return _parse_iso(self.iso_timestamp)
