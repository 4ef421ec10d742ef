# src/stats_normalizer/domain/services/series_aggregation.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Time series re-bucketing.

Purpose:
    Combine decoded points into coarser buckets (hour → day, day → month,
    ...) for one metric. Counts are summed; ratio-like metrics are averaged.

Layer:
    domain/services

Notes:
    - Points that do not report the metric are ignored; they neither add
      zero nor count towards an average.
    - Weeks start on Monday.
    - Averages of integer values use floor division so integer metrics stay
      integers.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from enum import Enum

from stats_normalizer.domain.entities.time_series import TimeSeriesPoint
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.enums.stats_metric import AggregationStrategy

__all__ = ["aggregate_series", "bucket_start"]


def bucket_start(moment: datetime, granularity: PeriodUnit) -> datetime:
    """Return the start of the ``granularity`` bucket containing ``moment``."""
    match granularity:
        case PeriodUnit.HOUR:
            return moment.replace(minute=0, second=0, microsecond=0)
        case PeriodUnit.DAY:
            return moment.replace(hour=0, minute=0, second=0, microsecond=0)
        case PeriodUnit.WEEK:
            day = moment.replace(hour=0, minute=0, second=0, microsecond=0)
            return day - timedelta(days=day.weekday())
        case PeriodUnit.MONTH:
            return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        case PeriodUnit.YEAR:
            return moment.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        case _:
            raise ValueError(f"unsupported granularity: {granularity!r}")


def _combine(values: list[int | float], strategy: AggregationStrategy) -> int | float:
    total = sum(values)
    if strategy is AggregationStrategy.SUM:
        return total
    if all(isinstance(v, int) for v in values):
        return int(total) // len(values)
    return total / len(values)


def aggregate_series(
    points: Iterable[TimeSeriesPoint],
    metric: str | Enum,
    granularity: PeriodUnit,
    strategy: AggregationStrategy = AggregationStrategy.SUM,
) -> tuple[TimeSeriesPoint, ...]:
    """Re-bucket ``points`` for a single metric.

    Args:
        points: Decoded points, any order.
        metric: Metric to aggregate.
        granularity: Target bucket size.
        strategy: How values in one bucket are combined.

    Returns:
        One point per non-empty bucket, ordered by bucket start, each holding
        only ``metric``.
    """
    key = str(metric.value) if isinstance(metric, Enum) else metric
    buckets: dict[datetime, list[int | float]] = {}
    for point in points:
        value = point.get(key)
        if value is None:
            continue
        buckets.setdefault(bucket_start(point.date, granularity), []).append(value)

    return tuple(
        TimeSeriesPoint(date=start, values={key: _combine(values, strategy)})
        for start, values in sorted(buckets.items())
    )
