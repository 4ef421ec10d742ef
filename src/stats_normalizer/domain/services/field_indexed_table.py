# src/stats_normalizer/domain/services/field_indexed_table.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Field-indexed tabular decoding.

Purpose:
    Decode the ``{"fields": [...], "data": [[...], ...]}`` format into
    ordered :class:`TimeSeriesPoint` rows.

Layer:
    domain/services

Design:
    - Column names are resolved to indices once per payload (first occurrence
      wins). The period column is mandatory; without a time axis no row can
      exist, so its absence is a structural failure.
    - A metric whose column is absent is "not reported" for the whole
      payload: every point omits it. It is never defaulted to zero.
    - Rows are independent. A row whose date cell is missing or does not
      parse is dropped; a cell holding an unexpected JSON kind leaves that
      metric absent for that row only.
    - The timezone and the date pattern are explicit parameters; there is no
      process-wide formatter state.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from enum import Enum
from typing import Final

from stats_normalizer.domain.entities.dynamic_value import (
    DynamicValue,
    as_array,
    as_float,
    as_int,
    as_object,
    as_str,
)
from stats_normalizer.domain.entities.time_series import TimeSeriesPoint
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.enums.stats_metric import ColumnKind
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError

__all__ = [
    "DecodedTable",
    "date_pattern_for",
    "decode_table",
    "parse_period_date",
]

PERIOD_COLUMN: Final[str] = "period"

_HOUR_PATTERN: Final[str] = "%Y-%m-%d %H:%M:%S"
_DATE_PATTERN: Final[str] = "%Y-%m-%d"
# Literal "W" separators: 2024W01W15 is the week starting 2024-01-15.
_WEEK_PATTERN: Final[str] = "%YW%mW%d"


@dataclass(frozen=True)
class DecodedTable:
    """Result of decoding one tabular payload.

    Attributes:
        points: Decoded rows in source order.
        dropped_rows: Number of source rows skipped (bad shape or date).
        missing_columns: Requested metrics whose column was not present.
    """

    points: tuple[TimeSeriesPoint, ...]
    dropped_rows: int
    missing_columns: frozenset[str]


def date_pattern_for(unit: PeriodUnit, *, week_pattern: bool = False) -> str:
    """Return the ``strptime`` pattern for the period column of ``unit``.

    Args:
        unit: Requested granularity.
        week_pattern: Use the ``YYYYWmmWdd`` pattern for weekly rows. Only the
            site visits endpoint emits it; other endpoints send plain dates.
    """
    match unit:
        case PeriodUnit.HOUR:
            return _HOUR_PATTERN
        case PeriodUnit.WEEK if week_pattern:
            return _WEEK_PATTERN
        case _:
            return _DATE_PATTERN


def parse_period_date(value: DynamicValue, pattern: str, tz: tzinfo = UTC) -> datetime | None:
    """Parse a period cell, returning ``None`` if it is not a matching string."""
    raw = as_str(value)
    if raw is None:
        return None
    try:
        parsed = datetime.strptime(raw, pattern)
    except ValueError:
        return None
    return parsed.replace(tzinfo=tz)


def _column_key(metric: str | Enum) -> str:
    return str(metric.value) if isinstance(metric, Enum) else metric


def _read_cell(row: Sequence[DynamicValue], index: int, kind: ColumnKind) -> int | float | None:
    if index >= len(row):
        return None
    cell = row[index]
    if kind is ColumnKind.INT:
        return as_int(cell)
    return as_float(cell)


def decode_table(
    payload: DynamicValue,
    *,
    unit: PeriodUnit,
    columns: Mapping[str, ColumnKind] | Mapping[Enum, ColumnKind],
    period_column: str = PERIOD_COLUMN,
    tz: tzinfo = UTC,
    week_pattern: bool = False,
) -> DecodedTable:
    """Decode a field-indexed table.

    Args:
        payload: Response root holding ``fields`` and ``data``.
        unit: Requested granularity; selects the date pattern.
        columns: Metrics of interest and the numeric kind of their column.
        period_column: Name of the date column.
        tz: Timezone the backend reports period dates in.
        week_pattern: See :func:`date_pattern_for`.

    Returns:
        A :class:`DecodedTable`.

    Raises:
        StructuralDecodeError: If ``fields``/``data`` are missing or
            mistyped, or the period column is absent.
    """
    root = as_object(payload)
    if root is None:
        raise StructuralDecodeError("expected an object root", details={"shape": "table"})

    fields = as_array(root.get("fields"))
    rows = as_array(root.get("data"))
    if fields is None or rows is None:
        raise StructuralDecodeError(
            "missing fields/data pair", details={"expected": "fields:list, data:list"}
        )

    lookup: dict[str, int] = {}
    for index, name in enumerate(fields):
        if isinstance(name, str):
            lookup.setdefault(name, index)

    period_index = lookup.get(period_column)
    if period_index is None:
        raise StructuralDecodeError(
            "period column absent", details={"column": period_column, "fields": list(lookup)}
        )

    resolved: list[tuple[str, int, ColumnKind]] = []
    missing: set[str] = set()
    for metric, kind in columns.items():
        key = _column_key(metric)
        index = lookup.get(key)
        if index is None:
            missing.add(key)
        else:
            resolved.append((key, index, kind))

    pattern = date_pattern_for(unit, week_pattern=week_pattern)
    points: list[TimeSeriesPoint] = []
    for raw_row in rows:
        row = as_array(raw_row)
        if row is None or period_index >= len(row):
            continue
        date = parse_period_date(row[period_index], pattern, tz)
        if date is None:
            continue
        values: dict[str, int | float] = {}
        for key, index, kind in resolved:
            value = _read_cell(row, index, kind)
            if value is not None:
                values[key] = value
        points.append(TimeSeriesPoint(date=date, values=values))

    return DecodedTable(
        points=tuple(points),
        dropped_rows=len(rows) - len(points),
        missing_columns=frozenset(missing),
    )
