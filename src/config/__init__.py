"""
Configuration loading and validation.

Provides strongly typed settings objects for the exchange time endpoints and
the skew check, loaded from environment variables with upfront validation.
"""
