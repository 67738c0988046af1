"""
Clock abstractions for measuring skew against a server clock.

This module provides a simple, testable way to obtain "now" via a clock object
rather than calling time.time() directly. Clock-skew arithmetic compares a
server-reported epoch against the local one; freezing the local side makes
that comparison deterministic in tests.
"""

import math
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """
    Abstract local time source protocol.

    **Conceptual**: A Clock is any object that can answer the question "what time
    is it right now on this machine?" Skew computation depends on this abstraction
    instead of the system clock, so tests can pin the local side of the
    comparison to an exact second.

    **Usage**: Consumers accept a Clock instance (injected via constructor or
    function parameter) and call clock.now() whenever they need the current time.
    In production, pass a RealClock; in tests, pass a FrozenClock.

    **Example**:
        def skew(server_epoch: int, clock: Clock) -> int:
            return server_epoch - epoch_seconds(clock)

        skew(1420674445, RealClock())
        skew(1420674445, FrozenClock.from_epoch(1420674440))  # 5
    """

    def now(self) -> datetime:
        """
        Return the current time according to this clock.

        Returns:
            datetime object representing "now" (timezone-aware, UTC).
        """
        ...


class RealClock:
    """Clock backed by the system wall clock, in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Clock that always returns a fixed timestamp.

    **Usage**:
        clock = FrozenClock(datetime(2015, 1, 7, 23, 47, 25, tzinfo=timezone.utc))
        clock.now()  # Always 2015-01-07T23:47:25+00:00

        # Or directly from an epoch value, which is how skew tests think about time:
        clock = FrozenClock.from_epoch(1420674445)
    """

    def __init__(self, fixed_now: datetime):
        """
        Args:
            fixed_now: The datetime to return on every call to now().
                       Must be timezone-aware so epoch conversion is unambiguous.
        """
        if fixed_now.tzinfo is None:
            raise ValueError("FrozenClock requires a timezone-aware datetime")
        self._fixed_now = fixed_now

    @classmethod
    def from_epoch(cls, epoch_seconds: float) -> "FrozenClock":
        """Build a frozen clock pinned to the given Unix epoch seconds (UTC)."""
        return cls(datetime.fromtimestamp(epoch_seconds, tz=timezone.utc))

    def now(self) -> datetime:
        return self._fixed_now


def epoch_seconds(clock: Clock) -> int:
    """
    Whole seconds since the Unix epoch according to ``clock``.

    Fractional milliseconds are floored away, not rounded: 1420674445.999
    becomes 1420674445, matching how epoch-seconds values are usually reported.

    Args:
        clock: Local time source.

    Returns:
        Integer epoch seconds.
    """
    return math.floor(clock.now().timestamp())


def get_real_clock() -> Clock:
    """Factory for the production clock (used as the default wherever a Clock is optional)."""
    return RealClock()
