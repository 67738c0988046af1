"""
Generic utility functions shared across modules.

Includes the local clock abstraction used for skew measurement.
"""
