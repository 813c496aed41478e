from __future__ import annotations

"""Typed errors raised by the session classifier and column annotator."""

__all__ = [
    "TradingSessionError",
    "SchemaError",
    "TimestampOverflowError",
    "BoundaryTableError",
]


class TradingSessionError(Exception):
    """Base class for all errors raised by :mod:`trading_sessions`."""


class SchemaError(TradingSessionError):
    """Raised when a dataset lacks a usable timestamp column."""

    def __init__(self, column: str, reason: str) -> None:
        super().__init__(f"Column '{column}' {reason}")
        self.column = column
        self.reason = reason


class TimestampOverflowError(TradingSessionError, ValueError):
    """Raised when a timestamp does not fit in a signed 64-bit integer."""

    def __init__(self, timestamp: int) -> None:
        super().__init__(f"Timestamp {timestamp} is outside the supported int64 range")
        self.timestamp = timestamp


class BoundaryTableError(TradingSessionError, ValueError):
    """Raised when a session boundary table does not cover each hour exactly once."""
