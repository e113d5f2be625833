"""
Exceptions raised by the coin-flip engine.

All of them are contract violations (a bad call, a bad config), not
transient failures, so nothing in the package retries on them.
"""

from __future__ import annotations


class CoinFlipError(Exception):
    """Base class for all coinflip errors."""


class InvalidStateError(CoinFlipError, ValueError):
    """A game state was used in a way its rules do not allow."""


class EmptyTreeError(CoinFlipError, RuntimeError):
    """A child was requested from a node that has none."""


class ConfigurationError(CoinFlipError, ValueError):
    """A search, match or config file has invalid parameters."""
