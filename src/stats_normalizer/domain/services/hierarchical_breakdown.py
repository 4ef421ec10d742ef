# src/stats_normalizer/domain/services/hierarchical_breakdown.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Year-keyed breakdown flattening and weekly summaries.

Purpose:
    Post statistics interleave detail and aggregate data under the same year
    key::

        {"2024": {"months": {"1": 120, "2": 95}, "total": 215}}
        {"2024": {"months": {"1": 4, "2": 3}, "overall": 3}}

    :func:`aggregate_years` walks such a tree once and fills two outputs at
    the same time: a flat list of per-month counts and a ``year → aggregate``
    mapping read from the sibling aggregate key.

    :func:`collapse_week` turns one ``{total, average, change, days}`` week
    into a :class:`WeeklyBreakdown`.

Layer:
    domain/services

Notes:
    - A year key that is not an integer is skipped for both outputs.
    - A month key outside ``1..12`` is skipped for the flat output only; the
      year's aggregate is read independently.
    - ``change`` is either a number or ``{"isInfinity": bool}``. When the flag
      is present it is authoritative, whatever number accompanies it.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Final

from stats_normalizer.domain.entities.dynamic_value import (
    DynamicValue,
    as_array,
    as_bool,
    as_int,
    as_object,
    as_str,
)
from stats_normalizer.domain.entities.period import MAX_YEAR, MIN_YEAR, Period, PeriodCount
from stats_normalizer.domain.entities.post_details import DailyViews, WeeklyBreakdown
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError

__all__ = [
    "YearlyBreakdown",
    "aggregate_years",
    "collapse_week",
    "collapse_weeks",
    "decode_change",
    "parse_day",
]

_INT_KEY_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
_DAY_PATTERN: Final[str] = "%Y-%m-%d"


@dataclass(frozen=True)
class YearlyBreakdown:
    """Both outputs of one pass over a year-keyed tree.

    Attributes:
        entries: Per-month counts in encounter order.
        aggregates: Year to the value of its aggregate sub-key.
    """

    entries: tuple[PeriodCount, ...] = ()
    aggregates: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))


def _parse_int_key(key: str) -> int | None:
    if _INT_KEY_RE.fullmatch(key) is None:
        return None
    return int(key)


def aggregate_years(
    tree: DynamicValue,
    *,
    aggregate_key: str,
    detail_key: str = "months",
) -> YearlyBreakdown:
    """Flatten a year → month tree and collect the per-year aggregates.

    Args:
        tree: Object keyed by year strings.
        aggregate_key: Sibling key holding the yearly aggregate
            (``"total"`` or ``"overall"``).
        detail_key: Key holding the month → count object.

    Returns:
        A :class:`YearlyBreakdown`.

    Raises:
        StructuralDecodeError: If ``tree`` is not an object.
    """
    root = as_object(tree)
    if root is None:
        raise StructuralDecodeError("expected a year-keyed object")

    entries: list[PeriodCount] = []
    aggregates: dict[int, int] = {}

    for year_key, year_node in root.items():
        year = _parse_int_key(year_key)
        year_obj = as_object(year_node)
        if year is None or year_obj is None or not MIN_YEAR <= year <= MAX_YEAR:
            continue

        aggregate = as_int(year_obj.get(aggregate_key))
        if aggregate is not None:
            aggregates[year] = aggregate

        months = as_object(year_obj.get(detail_key))
        if months is None:
            continue
        for month_key, count_node in months.items():
            month = _parse_int_key(month_key)
            count = as_int(count_node)
            if month is None or not 1 <= month <= 12 or count is None:
                continue
            entries.append(PeriodCount(period=Period(year=year, month=month), count=count))

    return YearlyBreakdown(entries=tuple(entries), aggregates=MappingProxyType(aggregates))


def parse_day(value: DynamicValue) -> date | None:
    """Parse a ``YYYY-MM-DD`` day string, returning ``None`` on any mismatch."""
    raw = as_str(value)
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, _DAY_PATTERN).date()
    except ValueError:
        return None


def decode_change(value: DynamicValue) -> tuple[float, bool]:
    """Decode a week-over-week change.

    Returns:
        ``(change_ratio, is_unbounded)``. A flagged infinite change yields
        ``(math.inf, True)``; a missing or unreadable change yields
        ``(0.0, False)``.
    """
    match value:
        case Mapping():
            flag = as_bool(value.get("isInfinity"))
            if flag is True:
                return math.inf, True
            return 0.0, False
        case bool():
            return 0.0, False
        case int() | float():
            return float(value), False
        case _:
            return 0.0, False


def _decode_day_entry(value: DynamicValue) -> DailyViews | None:
    obj = as_object(value)
    if obj is None:
        return None
    day = parse_day(obj.get("day"))
    count = as_int(obj.get("count"))
    if day is None or count is None:
        return None
    return DailyViews(day=day, count=count)


def collapse_week(value: DynamicValue) -> WeeklyBreakdown | None:
    """Collapse one week object into a :class:`WeeklyBreakdown`.

    Returns:
        ``None`` when ``total``, ``average`` or ``days`` is missing, or when
        no day decodes.
    """
    week = as_object(value)
    if week is None:
        return None
    total = as_int(week.get("total"))
    average = as_int(week.get("average"))
    raw_days = as_array(week.get("days"))
    if total is None or average is None or raw_days is None:
        return None

    days = tuple(d for d in (_decode_day_entry(raw) for raw in raw_days) if d is not None)
    if not days:
        return None

    change_ratio, unbounded = decode_change(week.get("change"))
    return WeeklyBreakdown(
        start_day=days[0].day,
        end_day=days[-1].day,
        total_count=total,
        average_count=average,
        change_ratio=change_ratio,
        is_change_unbounded=unbounded,
        days=days,
    )


def collapse_weeks(values: Iterable[DynamicValue]) -> tuple[WeeklyBreakdown, ...]:
    """Collapse every week, dropping those that carry no usable day."""
    return tuple(w for w in (collapse_week(v) for v in values) if w is not None)
