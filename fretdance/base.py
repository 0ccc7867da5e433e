"""Exceptions shared across the fingering search.

Legality failures never raise: generators return None or an empty list
and the search moves on. Only the conditions below are errors.
"""

from __future__ import annotations

from typing import Any


class FretDanceError(Exception):
    """Base class for errors raised to callers of the search."""

    pass


class ConfigError(FretDanceError):
    """Raised when an instrument, cost or search configuration is invalid."""

    pass


class EmptyPoolError(FretDanceError):
    """Raised when a finished search has no beam to report."""

    pass


class MatchException(Exception):
    """Exception raised when pattern matching fails."""

    def __init__(self, value: Any) -> None:
        """Initialize a MatchException with the unmatched value.

        Args:
            value: The value that failed to match any pattern.
        """
        super().__init__(f"Failed to match value: {value}")
