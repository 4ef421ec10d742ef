# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Time Series Entities

Purpose:
    Immutable per-period rows decoded from field-indexed tabular payloads.

Layer: domain/entities

Notes:
    - ``TimeSeriesPoint.values`` only holds metrics whose column was present
      in the payload and whose cell carried the expected numeric kind. A
      metric that was not reported is *absent*, never zero.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType

from stats_normalizer.domain.enums.period_unit import PeriodUnit

from .base import BaseEntity


def _metric_key(metric: str | Enum) -> str:
    if isinstance(metric, Enum):
        return str(metric.value)
    return metric


@dataclass(frozen=True, slots=True)
class TimeSeriesPoint(BaseEntity):
    """One row of a tabular statistics response.

    Args:
        date: Period start, timezone-aware.
        values: Metric column name to reported value.
    """

    date: datetime
    values: Mapping[str, int | float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, metric: str | Enum) -> int | float | None:
        """Return the reported value for ``metric`` or ``None`` when absent."""
        return self.values.get(_metric_key(metric))

    def __getitem__(self, metric: str | Enum) -> int | float | None:
        return self.get(metric)

    def has(self, metric: str | Enum) -> bool:
        return _metric_key(metric) in self.values


@dataclass(frozen=True, slots=True)
class TimeSeriesResponse(BaseEntity):
    """Tabular response decoded into ordered points.

    Args:
        unit: Granularity the caller requested.
        period_end_date: Anchor date supplied by the caller.
        points: Points in source row order.
    """

    unit: PeriodUnit
    period_end_date: date
    points: tuple[TimeSeriesPoint, ...]


@dataclass(frozen=True, slots=True)
class SiteMetricsResponse(TimeSeriesResponse):
    """Views, visitors, likes, comments and posts per period."""


@dataclass(frozen=True, slots=True)
class AdRevenueResponse(TimeSeriesResponse):
    """Impressions, revenue and CPM per period."""
