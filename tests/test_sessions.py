from __future__ import annotations

import numpy as np
import pytest

from trading_sessions.errors import BoundaryTableError, TimestampOverflowError
from trading_sessions.sessions import (
    DEFAULT_SESSION_TABLE,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    SessionBoundary,
    SessionClassifier,
    SessionLabel,
    hour_of_day,
    identify_session,
    validate_boundary_table,
    verify_session,
)

# 2024-02-22 00:00:00 UTC
DAY_START = 1708560000


def _ts(hour: int, minute: int = 0, day: int = 0) -> int:
    return DAY_START + day * 86_400 + hour * 3_600 + minute * 60


EXPECTED_BY_HOUR = (
    ["Tokyo"] * 7
    + ["Tokyo_London"] * 2
    + ["London"] * 4
    + ["London_NewYork"] * 3
    + ["NewYork"] * 6
    + ["Undefined"] * 2
)


def test_default_table_covers_every_hour_exactly_once() -> None:
    validate_boundary_table(DEFAULT_SESSION_TABLE)

    for hour in range(24):
        matches = [row for row in DEFAULT_SESSION_TABLE if row.contains(hour)]
        assert len(matches) == 1


def test_reference_timestamps() -> None:
    assert identify_session(1708574400) == "Tokyo"
    assert identify_session(1708574400 + 8 * 3600) == "London"
    assert identify_session(1708596000) == "London"
    assert identify_session(1708696800) == "London_NewYork"


@pytest.mark.parametrize("hour", range(24))
def test_identify_session_maps_each_hour(hour: int) -> None:
    assert identify_session(_ts(hour)) == EXPECTED_BY_HOUR[hour]
    assert identify_session(_ts(hour, minute=59)) == EXPECTED_BY_HOUR[hour]


def test_identify_session_ignores_the_date() -> None:
    for day in (-20000, -1, 1, 365, 10_000):
        assert identify_session(_ts(10, day=day)) == "London"
        assert identify_session(_ts(23, day=day)) == "Undefined"


def test_identify_session_returns_plain_string_compatible_label() -> None:
    label = identify_session(_ts(3))

    assert label is SessionLabel.TOKYO
    assert isinstance(label, str)
    assert str(label) == "Tokyo"
    assert f"{label}" == "Tokyo"


@pytest.mark.parametrize(
    ("timestamp", "hour", "label"),
    [
        (-1, 23, "Undefined"),
        (-3600, 23, "Undefined"),
        (-3601, 22, "Undefined"),
        (-7 * 3600, 17, "NewYork"),
        (-86_400, 0, "Tokyo"),
        (0, 0, "Tokyo"),
    ],
)
def test_negative_timestamps_use_floor_modulo(timestamp: int, hour: int, label: str) -> None:
    assert hour_of_day(timestamp) == hour
    assert identify_session(timestamp) == label


def test_int64_bounds_are_accepted() -> None:
    assert 0 <= hour_of_day(MAX_TIMESTAMP) < 24
    assert 0 <= hour_of_day(MIN_TIMESTAMP) < 24
    assert identify_session(MAX_TIMESTAMP) in set(SessionLabel)


@pytest.mark.parametrize("timestamp", [MAX_TIMESTAMP + 1, MIN_TIMESTAMP - 1, 10**30])
def test_out_of_range_timestamps_are_rejected(timestamp: int) -> None:
    with pytest.raises(TimestampOverflowError) as excinfo:
        identify_session(timestamp)

    assert excinfo.value.timestamp == timestamp
    with pytest.raises(ValueError):
        hour_of_day(timestamp)


@pytest.mark.parametrize("value", [1.5, "1708574400", None, True])
def test_non_integer_timestamps_raise_type_error(value: object) -> None:
    with pytest.raises(TypeError):
        identify_session(value)  # type: ignore[arg-type]


def test_numpy_integer_scalars_are_accepted() -> None:
    assert identify_session(np.int64(1708574400)) == "Tokyo"
    assert identify_session(np.int32(-3600)) == "Undefined"


def test_verify_session_matches_identified_label() -> None:
    assert verify_session(1708574400, "Tokyo") is True
    assert verify_session(1708574400, "London") is False
    assert verify_session(1708696800, "London_NewYork") is True
    assert verify_session(1708596000, "Tokyo") is False


@pytest.mark.parametrize("hour", range(24))
def test_verify_session_accepts_only_the_identified_label(hour: int) -> None:
    timestamp = _ts(hour)
    identified = identify_session(timestamp)

    assert verify_session(timestamp, identified)
    for label in SessionLabel:
        assert verify_session(timestamp, label.value) is (label is identified)


@pytest.mark.parametrize("claimed", ["tokyo", "TOKYO", " Tokyo", "Tokyo ", "", None, 0])
def test_verify_session_is_exact_and_case_sensitive(claimed: object) -> None:
    assert verify_session(1708574400, claimed) is False  # type: ignore[arg-type]


def test_classifier_exposes_hour_lookup_and_labels() -> None:
    classifier = SessionClassifier()

    assert [label.value for label in classifier.hour_labels] == EXPECTED_BY_HOUR
    assert classifier.labels == tuple(SessionLabel)
    assert classifier.label_for_hour(8) is SessionLabel.TOKYO_LONDON
    with pytest.raises(ValueError):
        classifier.label_for_hour(24)


def test_classifier_accepts_custom_complete_table() -> None:
    table = (
        SessionBoundary(0, 8, SessionLabel.TOKYO),
        SessionBoundary(8, 16, SessionLabel.LONDON),
        SessionBoundary(16, 24, SessionLabel.NEW_YORK),
    )
    classifier = SessionClassifier(table)

    assert classifier.identify(_ts(7)) == "Tokyo"
    assert classifier.identify(_ts(8)) == "London"
    assert classifier.identify(_ts(23)) == "NewYork"
    assert classifier.verify(_ts(23), "NewYork")
    assert classifier.labels == (SessionLabel.TOKYO, SessionLabel.LONDON, SessionLabel.NEW_YORK)


@pytest.mark.parametrize(
    ("table", "message"),
    [
        ((), "empty"),
        (
            (SessionBoundary(0, 8, SessionLabel.TOKYO), SessionBoundary(9, 24, SessionLabel.LONDON)),
            "gap",
        ),
        (
            (SessionBoundary(0, 8, SessionLabel.TOKYO), SessionBoundary(7, 24, SessionLabel.LONDON)),
            "overlap",
        ),
        ((SessionBoundary(1, 24, SessionLabel.TOKYO),), "gap"),
        ((SessionBoundary(0, 20, SessionLabel.TOKYO),), "stops at hour 20"),
        ((SessionBoundary(0, 25, SessionLabel.TOKYO),), "ends past hour 24"),
        (
            (SessionBoundary(0, 0, SessionLabel.TOKYO), SessionBoundary(0, 24, SessionLabel.LONDON)),
            "is empty",
        ),
    ],
)
def test_invalid_boundary_tables_are_rejected(table: tuple, message: str) -> None:
    with pytest.raises(BoundaryTableError, match=message):
        validate_boundary_table(table)
    with pytest.raises(BoundaryTableError):
        SessionClassifier(table)
