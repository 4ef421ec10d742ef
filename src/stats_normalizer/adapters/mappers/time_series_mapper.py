# src/stats_normalizer/adapters/mappers/time_series_mapper.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Tabular response mappers: site metrics and ad revenue.

Both endpoints return the field-indexed table format::

    {"fields": ["period", "views", "visitors"], "data": [["2024-01-01", 120, 45]]}

and delegate entirely to :func:`decode_table`. Points keep source row order.
"""

from __future__ import annotations

from collections.abc import Mapping

from stats_normalizer.adapters.mappers.base import DecodeContext, report_dropped
from stats_normalizer.domain.entities.dynamic_value import DynamicValue
from stats_normalizer.domain.entities.time_series import (
    AdRevenueResponse,
    SiteMetricsResponse,
)
from stats_normalizer.domain.enums.stats_metric import AdMetric, ColumnKind, SiteMetric
from stats_normalizer.domain.services.field_indexed_table import DecodedTable, decode_table

_SITE_COLUMNS: Mapping[str, ColumnKind] = {m.value: m.column_kind for m in SiteMetric}
_AD_COLUMNS: Mapping[str, ColumnKind] = {m.value: m.column_kind for m in AdMetric}


def _decode(
    family: str,
    payload: DynamicValue,
    context: DecodeContext,
    columns: Mapping[str, ColumnKind],
    *,
    week_pattern: bool,
) -> DecodedTable:
    table = decode_table(
        payload,
        unit=context.unit,
        columns=columns,
        tz=context.tz,
        week_pattern=week_pattern,
    )
    report_dropped(family, "row", table.dropped_rows, context)
    return table


class SiteMetricsMapper:
    """Site visits table (views, visitors, likes, comments, posts)."""

    family = "site_metrics"

    def map(self, payload: DynamicValue, context: DecodeContext) -> SiteMetricsResponse:
        table = _decode(self.family, payload, context, _SITE_COLUMNS, week_pattern=True)
        return SiteMetricsResponse(
            unit=context.unit,
            period_end_date=context.anchor_date,
            points=table.points,
        )


class AdRevenueMapper:
    """Ad stats table (impressions, revenue, CPM)."""

    family = "ad_revenue"

    def map(self, payload: DynamicValue, context: DecodeContext) -> AdRevenueResponse:
        table = _decode(self.family, payload, context, _AD_COLUMNS, week_pattern=False)
        return AdRevenueResponse(
            unit=context.unit,
            period_end_date=context.anchor_date,
            points=table.points,
        )
