# src/daily_track/core/errors.py

from __future__ import annotations


class DailyTrackError(Exception):
    """Base class for errors raised by daily_track."""


class ValidationError(DailyTrackError, ValueError):
    """Input rejected before it reached the store. The message names the reason."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class StorageError(DailyTrackError, RuntimeError):
    """
    The SQLite store is unreachable or corrupt.

    Never used to signal "no rows": empty results are returned as empty lists.
    """
