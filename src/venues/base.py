"""
Base abstractions for exchange transports.

**Conceptual**: This module defines the AuthenticatedTransport protocol, the
only shape the time client expects from an externally built, credential-signing
HTTP client. The client never inspects how signing works; it just calls get().

**Why protocols over inheritance?**
  - Protocols are structural typing (duck typing) - no need to inherit from a base class.
  - Any SDK client that exposes a matching get() is usable as-is.
  - Better for testing - a Mock with a get() method is a valid transport.
"""

from typing import Protocol

import requests


class AuthenticatedTransport(Protocol):
    """
    Protocol for a caller-supplied HTTP client that signs its own requests.

    **Contract**:
      1. get() receives a path relative to the transport's own base URL
         (e.g. "/brokerage/time"); the transport decides the host.
      2. get() returns a requests.Response (or something with the same
         raise_for_status() and json() methods).
      3. Auth state is owned by the transport; the time client never reads or
         refreshes it.

    **Example**:
        >>> class SignedSession(requests.Session):
        ...     def __init__(self, base_url, signer):
        ...         super().__init__()
        ...         self.base_url = base_url
        ...         self.auth = signer
        ...
        ...     def get(self, path, **kwargs):
        ...         return super().get(self.base_url + path, **kwargs)
        >>>
        >>> client = CoinbaseTimeClient(settings, authenticated_transport=SignedSession(...))
    """

    def get(self, path: str) -> requests.Response:
        """
        Issue a signed GET request.

        Args:
            path: Endpoint path relative to the transport's base URL.

        Returns:
            The HTTP response, not yet checked for status.
        """
        ...
