# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Post Details Entities

Purpose:
    Per-post statistics: a daily views series, recent weekly summaries,
    monthly totals and averages with their yearly aggregates, and optional
    post metadata.

Layer: domain/entities
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType

from .base import BaseEntity
from .period import PeriodCount


@dataclass(frozen=True, slots=True)
class DailyViews(BaseEntity):
    """Views recorded on one calendar day."""

    day: date
    count: int


@dataclass(frozen=True, slots=True)
class WeeklyBreakdown(BaseEntity):
    """Summary of one week of daily views.

    Args:
        start_day: First day present in ``days``.
        end_day: Last day present in ``days``.
        total_count: Total views reported for the week.
        average_count: Average daily views reported for the week.
        change_ratio: Change versus the previous week; ``math.inf`` when
            unbounded.
        is_change_unbounded: True when the backend flagged the change as
            infinite (growth from zero).
        days: Decoded days, never empty.

    Raises:
        ValueError: If ``days`` is empty.
    """

    start_day: date
    end_day: date
    total_count: int
    average_count: int
    change_ratio: float
    is_change_unbounded: bool
    days: tuple[DailyViews, ...]

    def __post_init__(self) -> None:
        if not self.days:
            raise ValueError("days must not be empty")


@dataclass(frozen=True, slots=True)
class PostMetadata(BaseEntity):
    """Post object embedded in a post details response."""

    post_id: int
    title: str
    author_id: str | None = None
    date_gmt: datetime | None = None
    content: str | None = None
    excerpt: str | None = None
    status: str | None = None
    comment_status: str | None = None
    password: str | None = None
    name: str | None = None
    modified_gmt: datetime | None = None
    content_filtered: str | None = None
    parent: int | None = None
    guid: str | None = None
    type: str | None = None
    mime_type: str | None = None
    comment_count: str | None = None
    permalink: str | None = None


@dataclass(frozen=True, slots=True)
class PostDetails(BaseEntity):
    """Decoded post details response.

    Args:
        fetched_date: Date the backend computed the stats for.
        total_views: Lifetime views of the post.
        data: Daily views in source order.
        last_two_weeks: Daily views built from the last 14 source rows.
        recent_weeks: Weekly summaries; weeks without valid days are omitted.
        monthly_breakdown: Views per month.
        daily_averages_per_month: Average daily views per month.
        yearly_totals: Year to total views.
        overall_averages: Year to overall average daily views.
        highest_month: Highest monthly views, when reported.
        highest_day_average: Highest daily average, when reported.
        highest_week_average: Highest weekly average, when reported.
        fields: Column names of ``data``, when reported.
        post: Post metadata; absent for deleted or unavailable posts.
    """

    fetched_date: date
    total_views: int
    data: tuple[DailyViews, ...]
    last_two_weeks: tuple[DailyViews, ...]
    recent_weeks: tuple[WeeklyBreakdown, ...]
    monthly_breakdown: tuple[PeriodCount, ...]
    daily_averages_per_month: tuple[PeriodCount, ...]
    yearly_totals: Mapping[int, int]
    overall_averages: Mapping[int, int]
    highest_month: int | None = None
    highest_day_average: int | None = None
    highest_week_average: int | None = None
    fields: tuple[str, ...] | None = None
    post: PostMetadata | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "yearly_totals", MappingProxyType(dict(self.yearly_totals)))
        object.__setattr__(
            self, "overall_averages", MappingProxyType(dict(self.overall_averages))
        )
