from __future__ import annotations

"""Utilities related to trading session bucketing."""

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Sequence, Tuple

from .errors import BoundaryTableError, TimestampOverflowError

__all__ = [
    "SECONDS_PER_HOUR",
    "HOURS_PER_DAY",
    "MIN_TIMESTAMP",
    "MAX_TIMESTAMP",
    "SessionLabel",
    "SessionBoundary",
    "DEFAULT_SESSION_TABLE",
    "SessionClassifier",
    "validate_boundary_table",
    "hour_of_day",
    "identify_session",
    "verify_session",
]

SECONDS_PER_HOUR = 3_600
HOURS_PER_DAY = 24

# Range of the int64 columns the annotator works on.
MIN_TIMESTAMP = -(2**63)
MAX_TIMESTAMP = 2**63 - 1


class SessionLabel(str, Enum):
    TOKYO = "Tokyo"
    TOKYO_LONDON = "Tokyo_London"
    LONDON = "London"
    LONDON_NEW_YORK = "London_NewYork"
    NEW_YORK = "NewYork"
    UNDEFINED = "Undefined"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SessionBoundary:
    """Half-open ``[start, end)`` range of UTC hours assigned to a session."""

    start: int
    end: int
    label: SessionLabel

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


# UK and US standard time; daylight saving is not modelled.
DEFAULT_SESSION_TABLE: Tuple[SessionBoundary, ...] = (
    SessionBoundary(0, 7, SessionLabel.TOKYO),
    SessionBoundary(7, 9, SessionLabel.TOKYO_LONDON),
    SessionBoundary(9, 13, SessionLabel.LONDON),
    SessionBoundary(13, 16, SessionLabel.LONDON_NEW_YORK),
    SessionBoundary(16, 22, SessionLabel.NEW_YORK),
    SessionBoundary(22, 24, SessionLabel.UNDEFINED),
)


def validate_boundary_table(table: Iterable[SessionBoundary]) -> Tuple[SessionBoundary, ...]:
    """Check that ``table`` maps every hour 0-23 to exactly one label.

    Rows must be ordered, non-empty and contiguous, starting at hour 0 and
    ending at hour 24.

    Returns:
        The table as a tuple.

    Raises:
        BoundaryTableError: Describing the first violation found.
    """

    rows = tuple(table)
    if not rows:
        raise BoundaryTableError("Session boundary table is empty")

    expected_start = 0
    for row in rows:
        if row.start != expected_start:
            kind = "overlap" if row.start < expected_start else "gap"
            raise BoundaryTableError(
                f"Session boundary {kind} at hour {min(row.start, expected_start)} "
                f"(row {row.label!s} starts at {row.start}, expected {expected_start})"
            )
        if row.end <= row.start:
            raise BoundaryTableError(
                f"Session boundary for {row.label!s} is empty ({row.start}-{row.end})"
            )
        if row.end > HOURS_PER_DAY:
            raise BoundaryTableError(
                f"Session boundary for {row.label!s} ends past hour {HOURS_PER_DAY} ({row.end})"
            )
        expected_start = row.end

    if expected_start != HOURS_PER_DAY:
        raise BoundaryTableError(
            f"Session boundary table stops at hour {expected_start}, expected {HOURS_PER_DAY}"
        )
    return rows


def _as_timestamp(timestamp: object) -> int:
    if isinstance(timestamp, bool):
        raise TypeError("Timestamp must be an integer, not bool")
    try:
        value = operator.index(timestamp)
    except TypeError:
        raise TypeError(
            f"Timestamp must be an integer, got {type(timestamp).__name__}"
        ) from None
    if not MIN_TIMESTAMP <= value <= MAX_TIMESTAMP:
        raise TimestampOverflowError(value)
    return value


def hour_of_day(timestamp: int) -> int:
    """Return the UTC hour (0-23) of a Unix timestamp in seconds.

    Floor division and modulo keep pre-epoch timestamps in range, so ``-3600``
    is hour 23 of 31 December 1969.

    Raises:
        TypeError: If ``timestamp`` is not an integer.
        TimestampOverflowError: If ``timestamp`` is outside the int64 range.
    """

    value = _as_timestamp(timestamp)
    return (value // SECONDS_PER_HOUR) % HOURS_PER_DAY


class SessionClassifier:
    """Maps timestamps to session labels using a validated boundary table."""

    def __init__(self, table: Sequence[SessionBoundary] = DEFAULT_SESSION_TABLE) -> None:
        self._table = validate_boundary_table(table)
        self._hour_labels: Tuple[SessionLabel, ...] = tuple(
            next(row.label for row in self._table if row.contains(hour))
            for hour in range(HOURS_PER_DAY)
        )

    @property
    def table(self) -> Tuple[SessionBoundary, ...]:
        return self._table

    @property
    def hour_labels(self) -> Tuple[SessionLabel, ...]:
        """Label for each hour of the day, indexed by hour."""

        return self._hour_labels

    @property
    def labels(self) -> Tuple[SessionLabel, ...]:
        seen: Dict[SessionLabel, None] = {}
        for row in self._table:
            seen.setdefault(row.label)
        return tuple(seen)

    def label_for_hour(self, hour: int) -> SessionLabel:
        if not 0 <= hour < HOURS_PER_DAY:
            raise ValueError(f"Hour must be within 0-{HOURS_PER_DAY - 1}, got {hour}")
        return self._hour_labels[hour]

    def identify(self, timestamp: int) -> SessionLabel:
        return self._hour_labels[hour_of_day(timestamp)]

    def verify(self, timestamp: int, claimed: object) -> bool:
        if not isinstance(claimed, str):
            return False
        return self.identify(timestamp).value == claimed


_DEFAULT_CLASSIFIER = SessionClassifier()


def identify_session(timestamp: int) -> SessionLabel:
    """Return the trading session label for a Unix timestamp in seconds.

    Sessions are bucketed by UTC hour using UK and US standard time:

    * ``Tokyo``          - 00:00 <= hour < 07:00
    * ``Tokyo_London``   - 07:00 <= hour < 09:00
    * ``London``         - 09:00 <= hour < 13:00
    * ``London_NewYork`` - 13:00 <= hour < 16:00
    * ``NewYork``        - 16:00 <= hour < 22:00
    * ``Undefined``      - remaining hours

    Args:
        timestamp: Seconds since the Unix epoch, interpreted as UTC. Negative
            values are pre-epoch times.

    Returns:
        Session label. Compares equal to the plain string value.

    Raises:
        TypeError: If ``timestamp`` is not an integer.
        TimestampOverflowError: If ``timestamp`` is outside the int64 range.
    """

    return _DEFAULT_CLASSIFIER.identify(timestamp)


def verify_session(timestamp: int, claimed: str) -> bool:
    """Return ``True`` when ``claimed`` is exactly the session of ``timestamp``."""

    return _DEFAULT_CLASSIFIER.verify(timestamp, claimed)
