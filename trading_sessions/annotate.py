from __future__ import annotations

"""Columnar application of the session classifier."""

import logging
import operator
from collections.abc import Mapping, Sequence
from typing import Any, Callable, List, Optional, Protocol, Tuple, Union, runtime_checkable

import numpy as np
import pandas as pd

from .config import get_settings
from .errors import SchemaError, TimestampOverflowError
from .sessions import HOURS_PER_DAY, MAX_TIMESTAMP, MIN_TIMESTAMP, SECONDS_PER_HOUR, SessionClassifier

__all__ = [
    "TabularDataset",
    "PandasDataset",
    "RecordsDataset",
    "ColumnAnnotator",
    "annotate",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class TabularDataset(Protocol):
    """Ordered row set supporting named column reads and writes."""

    def read_column(self, name: str) -> np.ndarray:
        """Return the integer values of ``name`` in row order.

        Raises:
            SchemaError: If the column is missing or not integer typed.
        """

    def with_column(self, name: str, values: Sequence[str]) -> "TabularDataset":
        """Return a dataset with ``name`` appended, or replaced in place."""


class PandasDataset:
    """:class:`TabularDataset` backed by a :class:`pandas.DataFrame`."""

    def __init__(self, frame: pd.DataFrame) -> None:
        self.frame = frame

    def read_column(self, name: str) -> np.ndarray:
        if name not in self.frame.columns:
            raise SchemaError(name, "is missing")
        series = self.frame[name]
        if isinstance(series, pd.DataFrame):
            raise SchemaError(name, "appears more than once")
        dtype = series.dtype
        if pd.api.types.is_bool_dtype(dtype) or not pd.api.types.is_integer_dtype(dtype):
            raise SchemaError(name, f"must be integer typed, got {dtype}")
        if series.isna().any():
            raise SchemaError(name, "contains missing values")
        target = np.uint64 if pd.api.types.is_unsigned_integer_dtype(dtype) else np.int64
        return series.to_numpy(dtype=target)

    def with_column(self, name: str, values: Sequence[str]) -> "PandasDataset":
        frame = self.frame.copy()
        frame[name] = np.asarray(values, dtype=object)
        return PandasDataset(frame)


class RecordsDataset:
    """:class:`TabularDataset` backed by a sequence of row mappings."""

    def __init__(self, rows: Sequence[Mapping[str, Any]]) -> None:
        self.rows = rows

    def read_column(self, name: str) -> np.ndarray:
        values: List[int] = []
        for index, row in enumerate(self.rows):
            if name not in row:
                raise SchemaError(name, f"is missing from row {index}")
            value = row[name]
            if isinstance(value, bool):
                raise SchemaError(name, f"must hold integers, row {index} holds bool")
            try:
                timestamp = operator.index(value)
            except TypeError:
                raise SchemaError(
                    name, f"must hold integers, row {index} holds {type(value).__name__}"
                ) from None
            if not MIN_TIMESTAMP <= timestamp <= MAX_TIMESTAMP:
                raise TimestampOverflowError(timestamp)
            values.append(timestamp)
        return np.array(values, dtype=np.int64)

    def with_column(self, name: str, values: Sequence[str]) -> "RecordsDataset":
        return RecordsDataset(
            [{**row, name: value} for row, value in zip(self.rows, values)]
        )


DatasetLike = Union[pd.DataFrame, Sequence[Mapping[str, Any]], TabularDataset]


def _wrap(dataset: DatasetLike) -> Tuple[TabularDataset, Callable[[TabularDataset], Any]]:
    if isinstance(dataset, pd.DataFrame):
        return PandasDataset(dataset), lambda result: result.frame
    if isinstance(dataset, TabularDataset):
        return dataset, lambda result: result
    if isinstance(dataset, Sequence) and not isinstance(dataset, (str, bytes)):
        return RecordsDataset(dataset), lambda result: result.rows
    raise TypeError(f"Unsupported dataset type: {type(dataset).__name__}")


class ColumnAnnotator:
    """Adds a session label column derived from a Unix timestamp column."""

    def __init__(
        self,
        classifier: Optional[SessionClassifier] = None,
        time_column: Optional[str] = None,
        session_column: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        self._classifier = classifier or SessionClassifier()
        self.time_column = time_column if time_column is not None else settings.time_column
        self.session_column = (
            session_column if session_column is not None else settings.session_column
        )
        self._lookup = np.array(
            [label.value for label in self._classifier.hour_labels], dtype=object
        )

    def labels_for(self, timestamps: np.ndarray) -> np.ndarray:
        """Return the session label of each timestamp, vectorised over the array.

        Raises:
            SchemaError: If the array is not integer typed. Bool counts as non-integer.
            TimestampOverflowError: If an unsigned value is outside the int64 range.
        """

        values = np.asarray(timestamps)
        if values.dtype.kind not in "iu":
            raise SchemaError(self.time_column, f"must be integer typed, got {values.dtype}")
        if values.dtype.kind == "u":
            if values.size and int(values.max()) > MAX_TIMESTAMP:
                raise TimestampOverflowError(int(values.max()))
            values = values.astype(np.int64)
        # numpy integer floor division and modulo round toward negative infinity like Python's.
        hours = (values // SECONDS_PER_HOUR) % HOURS_PER_DAY
        return self._lookup[hours]

    def annotate(self, dataset: DatasetLike) -> Any:
        """Return ``dataset`` with the session column set from the time column.

        The result has the same kind as the input: a DataFrame for a DataFrame,
        a list of dicts for a sequence of rows. Row count, row order and every
        other column are preserved; an existing session column is overwritten.

        Raises:
            SchemaError: If the time column is missing or not integer typed.
            TimestampOverflowError: If a timestamp is outside the int64 range.
        """

        wrapped, unwrap = _wrap(dataset)
        try:
            labels = self.labels_for(wrapped.read_column(self.time_column))
        except SchemaError as exc:
            logger.warning("Cannot annotate sessions: %s", exc)
            raise

        logger.debug(
            "Annotated %d rows with column '%s' from '%s'",
            len(labels),
            self.session_column,
            self.time_column,
        )
        return unwrap(wrapped.with_column(self.session_column, list(labels)))


def annotate(dataset: DatasetLike, classifier: Optional[SessionClassifier] = None) -> Any:
    """Add a ``Session`` column derived from the ``time`` column of ``dataset``."""

    return ColumnAnnotator(classifier=classifier).annotate(dataset)
