"""
HTTP client for the exchange's server time endpoints.

**Conceptual**: This module is a thin wrapper around two read-only GET requests
and one piece of arithmetic:
  1. fetch_public_time() - unauthenticated ``/time``, payload nested under "data".
  2. fetch_authenticated_time() - ``/brokerage/time``, flat payload, sent through
     a caller-supplied authenticated transport when there is one.
  3. compute_clock_skew() - server epoch seconds minus local epoch seconds.

**What this client does NOT do**:
  - Retry, back off, or cache. Every call is one request.
  - Translate transport errors. requests.Timeout, requests.ConnectionError and
    requests.HTTPError (non-2xx) reach the caller exactly as requests raised them.
  - Sign requests. Signing is the authenticated transport's business.

**Transport lifetime**: Each call that needs an unauthenticated transport builds
a brand-new PublicSession and closes it before returning. Nothing is shared
between calls, so concurrent callers on separate threads never touch the same
session.
"""

import logging
import math
from typing import Optional, Protocol

from src.config.settings import CoinbaseTimeSettings
from src.utils.time import Clock, epoch_seconds, get_real_clock
from src.venues.base import AuthenticatedTransport
from src.venues.time_models import (
    AuthenticatedTimeReading,
    MalformedResponseError,
    PublicTimeReading,
    TimeClientError,
)
from src.venues.transport import build_public_session

logger = logging.getLogger(__name__)

TIME_PATH = "/time"
BROKERAGE_TIME_PATH = f"/brokerage{TIME_PATH}"


class InvalidReadingError(TimeClientError, ValueError):
    """
    Raised when compute_clock_skew() receives no reading.

    **Conceptual**: A missing reading is a caller bug (e.g. a fetch that was
    skipped), so it fails loudly and recoverably instead of surfacing as an
    AttributeError from deep inside the arithmetic.
    """
    pass


class AuthenticationRequiredError(TimeClientError):
    """
    Raised when require_auth is set but no authenticated transport was injected.

    **Recovery**: Pass authenticated_transport=... to CoinbaseTimeClient, or
    unset COINBASE_REQUIRE_AUTH to allow the unauthenticated fallback.
    """
    pass


class HasEpochSeconds(Protocol):
    """Anything carrying a server epoch in seconds (both reading types qualify)."""

    epoch_seconds: float


def compute_clock_skew(reading: Optional[HasEpochSeconds], clock: Optional[Clock] = None) -> int:
    """
    Signed difference between server time and local time, in whole seconds.

    **Sign convention**: ``server - local``. Positive means the server clock is
    ahead of this machine; negative means it is behind.

    Both sides are floored to whole seconds before subtracting, so a fractional
    server epoch like 1420674445.201 compares as 1420674445.

    Args:
        reading: A PublicTimeReading, AuthenticatedTimeReading, or any object
                 with an ``epoch_seconds`` attribute.
        clock: Local time source. Defaults to the system clock.

    Returns:
        Skew in seconds.

    Raises:
        InvalidReadingError: If reading is None.

    Example:
        >>> from src.utils.time import FrozenClock
        >>> reading = PublicTimeReading(1420674440, "2015-01-07T23:47:20.000Z")
        >>> compute_clock_skew(reading, FrozenClock.from_epoch(1420674445))
        -5
    """
    if reading is None:
        raise InvalidReadingError("Cannot compute clock skew without a server time reading")
    clock = clock or get_real_clock()
    return math.floor(reading.epoch_seconds) - epoch_seconds(clock)


def _decode_json(response, path: str):
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Failed to parse JSON response from {path}: {e}"
        ) from e


class CoinbaseTimeClient:
    """
    Thin client for the exchange's server time endpoints.

    **Responsibilities**:
      - Build a fresh unauthenticated session per call that needs one
      - Pick the injected authenticated transport for the brokerage endpoint
      - Raise for non-2xx responses
      - Shape response bodies into reading dataclasses
      - Compute clock skew against an injectable local clock

    **Example usage**:
        >>> from src.config.settings import get_settings
        >>> client = CoinbaseTimeClient(get_settings().coinbase)
        >>> reading = client.fetch_public_time()
        >>> reading.epoch_seconds
        1420674445.201
        >>> client.compute_clock_skew(reading)
        0
    """

    def __init__(
        self,
        settings: CoinbaseTimeSettings,
        authenticated_transport: Optional[AuthenticatedTransport] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            settings: Base URL, timeout and require_auth flag.
            authenticated_transport: Optional signing client used for the
                brokerage endpoint. Used as-is; never inspected.
            clock: Local time source for skew computation. Defaults to the system clock.
        """
        self.settings = settings
        self.authenticated_transport = authenticated_transport
        self.clock = clock or get_real_clock()

    def _public_session(self):
        return build_public_session(
            self.settings.base_url,
            timeout_seconds=self.settings.timeout_seconds,
        )

    def fetch_public_time(self) -> PublicTimeReading:
        """
        Fetch server time from the public ``/time`` endpoint.

        **HTTP request details**:
          - Method: GET
          - URL: {base_url}/time
          - Headers: exactly Accept/Content-Type application/json
          - Timeout: settings.timeout_seconds (default 50)

        **Response format**:
            {"data": {"epoch": 1420674445.201, "iso": "2015-01-07T23:47:25.201Z"}}

        The epoch has been observed as a string ("1420674445.201"); both forms
        produce the same float.

        Returns:
            PublicTimeReading.

        Raises:
            requests.HTTPError: Non-2xx status.
            requests.Timeout: Request exceeded the timeout.
            requests.ConnectionError: Network/DNS failure.
            MalformedResponseError: Body is not JSON or lacks data.epoch / data.iso.
        """
        with self._public_session() as session:
            response = session.get(TIME_PATH)
            response.raise_for_status()
            body = _decode_json(response, TIME_PATH)
        return PublicTimeReading.from_payload(body)

    def fetch_authenticated_time(self) -> AuthenticatedTimeReading:
        """
        Fetch server time from the brokerage ``/brokerage/time`` endpoint.

        **Transport selection**:
          - Authenticated transport injected: ``transport.get("/brokerage/time")``.
          - None injected, require_auth False: a fresh public session requests
            ``{base_url}/brokerage/time`` unauthenticated.
          - None injected, require_auth True: AuthenticationRequiredError, no request made.

        **Response format**:
            {"epochMillis": 1420674445201, "epochSeconds": 1420674445,
             "iso": "2015-01-07T23:47:25.201Z"}

        Returns:
            AuthenticatedTimeReading.

        Raises:
            AuthenticationRequiredError: require_auth set and no transport injected.
            requests.RequestException: Any transport failure or non-2xx status.
            MalformedResponseError: Body is not JSON or lacks a field.
        """
        if self.authenticated_transport is not None:
            response = self.authenticated_transport.get(BROKERAGE_TIME_PATH)
            response.raise_for_status()
            body = _decode_json(response, BROKERAGE_TIME_PATH)
            return AuthenticatedTimeReading.from_payload(body)

        if self.settings.require_auth:
            raise AuthenticationRequiredError(
                f"No authenticated transport configured for {BROKERAGE_TIME_PATH} "
                f"and require_auth is set."
            )

        logger.debug(
            "No authenticated transport; requesting %s unauthenticated", BROKERAGE_TIME_PATH
        )
        with self._public_session() as session:
            response = session.get(BROKERAGE_TIME_PATH)
            response.raise_for_status()
            body = _decode_json(response, BROKERAGE_TIME_PATH)
        return AuthenticatedTimeReading.from_payload(body)

    def compute_clock_skew(self, reading: Optional[HasEpochSeconds]) -> int:
        """Server-minus-local skew using this client's clock. See compute_clock_skew()."""
        return compute_clock_skew(reading, self.clock)
