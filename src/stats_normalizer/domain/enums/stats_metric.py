# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Statistics metric enumerations.

Purpose:
    Named columns of the field-indexed tabular responses, together with the
    numeric kind each column carries on the wire.

Layer:
    domain

Notes:
    - Values are the exact, case-sensitive column names used by the backend.
    - ``ColumnKind.INT`` columns are counts; ``ColumnKind.FLOAT`` columns are
      ratios or currency and accept integer cells as well.
"""

from __future__ import annotations

from enum import Enum


class ColumnKind(str, Enum):
    """Numeric kind expected in a tabular column."""

    INT = "int"
    FLOAT = "float"


class SiteMetric(str, Enum):
    """Metrics reported by the site visits endpoint."""

    VIEWS = "views"
    VISITORS = "visitors"
    LIKES = "likes"
    COMMENTS = "comments"
    POSTS = "posts"

    @property
    def column_kind(self) -> ColumnKind:
        return ColumnKind.INT


class AdMetric(str, Enum):
    """Metrics reported by the ad revenue endpoint."""

    IMPRESSIONS = "impressions"
    REVENUE = "revenue"
    CPM = "cpm"

    @property
    def column_kind(self) -> ColumnKind:
        if self is AdMetric.IMPRESSIONS:
            return ColumnKind.INT
        return ColumnKind.FLOAT


class AggregationStrategy(str, Enum):
    """How values falling into the same bucket are combined."""

    SUM = "sum"
    AVERAGE = "average"
