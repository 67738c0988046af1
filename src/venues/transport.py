"""
Unauthenticated HTTP transport for public exchange endpoints.

**Conceptual**: The public time endpoints need no credentials, only a base URL,
a timeout, and JSON headers. PublicSession packages those three things into a
requests.Session so callers can write ``session.get("/time")``.

**Header policy**: requests normally merges session headers, per-request
headers and its own defaults (User-Agent, Accept-Encoding, ...). PublicSession
does not merge. Every prepared request leaves with exactly PUBLIC_HEADERS, no
matter what was set on the session or passed to get().

**Lifetime**: Sessions are cheap to build and are not shared. The time client
builds one per call and closes it when the call returns.
"""

import logging

import requests
from requests.structures import CaseInsensitiveDict

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 50

PUBLIC_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class PublicSession(requests.Session):
    """
    requests.Session bound to a base URL, a fixed timeout and fixed JSON headers.

    Relative paths (anything starting with "/") are appended to base_url by
    plain concatenation. Absolute URLs pass through untouched.
    """

    def __init__(self, base_url: str, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS):
        super().__init__()
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds

    def prepare_request(self, request):
        prepared = super().prepare_request(request)
        # Replace wholesale: no session defaults, no caller headers.
        prepared.headers = CaseInsensitiveDict(PUBLIC_HEADERS)
        return prepared

    def request(self, method, url, *args, **kwargs):
        if url.startswith("/"):
            url = f"{self.base_url}{url}"
        # The configured timeout is the only cancellation mechanism.
        kwargs["timeout"] = self.timeout_seconds
        logger.debug("%s %s (timeout=%ss)", method, url, self.timeout_seconds)
        return super().request(method, url, *args, **kwargs)


def build_public_session(
    base_url: str,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> PublicSession:
    """
    Build a fresh unauthenticated session.

    Pure factory: nothing is cached, so every call returns a new instance.

    Args:
        base_url: Base URL prepended to relative paths.
        timeout_seconds: Request timeout applied to every request (default 50).

    Returns:
        New PublicSession.

    Example:
        >>> with build_public_session("https://api.coinbase.com/v2") as session:
        ...     response = session.get("/time")
    """
    return PublicSession(base_url, timeout_seconds=timeout_seconds)
