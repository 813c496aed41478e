"""Trading session classification for Unix timestamps."""

from .annotate import ColumnAnnotator, PandasDataset, RecordsDataset, TabularDataset, annotate
from .errors import BoundaryTableError, SchemaError, TimestampOverflowError, TradingSessionError
from .sessions import (
    DEFAULT_SESSION_TABLE,
    SessionBoundary,
    SessionClassifier,
    SessionLabel,
    hour_of_day,
    identify_session,
    validate_boundary_table,
    verify_session,
)

__all__ = [
    "identify_session",
    "verify_session",
    "annotate",
    "hour_of_day",
    "validate_boundary_table",
    "SessionLabel",
    "SessionBoundary",
    "SessionClassifier",
    "DEFAULT_SESSION_TABLE",
    "ColumnAnnotator",
    "TabularDataset",
    "PandasDataset",
    "RecordsDataset",
    "TradingSessionError",
    "SchemaError",
    "TimestampOverflowError",
    "BoundaryTableError",
]
