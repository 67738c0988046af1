#!/usr/bin/env python3
"""
Check the local clock against the exchange's server time.

**Conceptual**: Signed exchange requests are rejected when the local clock
drifts too far from the server's. This script fetches the public server time,
optionally the brokerage time too, prints both next to the measured skew, and
exits non-zero when the skew is outside tolerance, so it can gate a deploy or
run from cron.

**Usage**:
    # Public endpoint only, tolerance from CLOCK_MAX_SKEW_SECONDS (default 30)
    python actions/check_server_time.py

    # Tighter tolerance
    python actions/check_server_time.py --max-skew 5

    # Also query the brokerage endpoint (unauthenticated unless a signing
    # transport is wired in by the caller)
    python actions/check_server_time.py --authenticated

**Exit codes**:
    0 - skew within tolerance
    1 - skew outside tolerance
    2 - request or response error (nothing measured)
"""

import argparse
import logging
import sys
from pathlib import Path

import requests

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import get_settings
from src.venues.coinbase_time_client import CoinbaseTimeClient
from src.venues.time_models import TimeClientError

EXIT_OK = 0
EXIT_SKEW_EXCEEDED = 1
EXIT_ERROR = 2


def evaluate_skew(skew_seconds: int, max_skew_seconds: int) -> bool:
    """
    Return True when ``|skew_seconds|`` is within ``max_skew_seconds`` (inclusive).

    Server-ahead and server-behind are treated alike.
    """
    return abs(skew_seconds) <= max_skew_seconds


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare the local clock with the exchange server time."
    )
    parser.add_argument(
        "--max-skew",
        type=int,
        default=None,
        help="Tolerated absolute skew in seconds (default: CLOCK_MAX_SKEW_SECONDS or 30)",
    )
    parser.add_argument(
        "--authenticated",
        action="store_true",
        help="Also fetch /brokerage/time",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def run(client: CoinbaseTimeClient, max_skew_seconds: int, authenticated: bool = False) -> int:
    """
    Fetch, print, and judge the skew. Returns the process exit code.

    Errors from the client are reported and mapped to EXIT_ERROR here, at the
    outermost layer; the client itself never catches them.
    """
    try:
        public = client.fetch_public_time()
        print(f"Public server time:    {public.iso_timestamp} (epoch {public.epoch_seconds})")

        if authenticated:
            brokerage = client.fetch_authenticated_time()
            print(
                f"Brokerage server time: {brokerage.iso_timestamp} "
                f"(epoch {brokerage.epoch_seconds}, millis {brokerage.epoch_millis})"
            )

        skew = client.compute_clock_skew(public)
    except (requests.RequestException, TimeClientError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    direction = "ahead of" if skew > 0 else "behind" if skew < 0 else "in sync with"
    print(f"Clock skew:            {skew:+d}s (server {direction} local)")

    if evaluate_skew(skew, max_skew_seconds):
        print(f"OK: within {max_skew_seconds}s tolerance")
        return EXIT_OK

    print(f"FAIL: |skew| exceeds {max_skew_seconds}s tolerance")
    return EXIT_SKEW_EXCEEDED


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    max_skew = args.max_skew if args.max_skew is not None else settings.clock_check.max_skew_seconds

    client = CoinbaseTimeClient(settings.coinbase)
    return run(client, max_skew, authenticated=args.authenticated)


if __name__ == "__main__":
    sys.exit(main())
