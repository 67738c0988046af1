"""
Exchange-facing clients and transports.

Defines the authenticated transport protocol, the unauthenticated public
session, server time readings, and the time client built on top of them.
"""
