# src/stats_normalizer/adapters/mappers/post_details_mapper.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Post details mapper.

Purpose:
    Decode the per-post statistics response. Its shape is the least regular
    of all families::

        {
          "date": "2024-03-01",
          "views": 1234,
          "fields": ["period", "views"],
          "data": [["2024-02-28", 10], ["2024-02-29", 12]],
          "weeks": [{"total": 70, "average": 10, "change": 4.5, "days": [...]}],
          "years": {"2024": {"months": {"1": 120, "2": 95}, "total": 215}},
          "averages": {"2024": {"months": {"1": 4, "2": 3}, "overall": 3}},
          "highest_month": 120,
          "post": {"ID": 42, "post_title": "Hello", ...}
        }

Layer:
    adapters/mappers

Notes:
    - ``date``, ``views``, ``years``, ``averages``, ``weeks`` and ``data`` are
      required; everything else is optional.
    - ``years`` and ``averages`` are each walked once, yielding the monthly
      series and the yearly aggregate together.
    - A missing or malformed ``post`` leaves :attr:`PostDetails.post` absent;
      stats for deleted posts carry no post object.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Final

from stats_normalizer.adapters.mappers.base import (
    DecodeContext,
    report_dropped,
    require_array,
    require_object,
    require_root,
)
from stats_normalizer.domain.entities.dynamic_value import (
    DynamicValue,
    as_array,
    as_int,
    as_object,
    as_str,
)
from stats_normalizer.domain.entities.post_details import (
    DailyViews,
    PostDetails,
    PostMetadata,
)
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.enums.stats_metric import ColumnKind
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError
from stats_normalizer.domain.services.field_indexed_table import decode_table
from stats_normalizer.domain.services.hierarchical_breakdown import (
    aggregate_years,
    collapse_weeks,
    parse_day,
)

_VIEWS: Final[str] = "views"
_DEFAULT_FIELDS: Final[tuple[str, str]] = ("period", _VIEWS)
_LAST_TWO_WEEKS_ROWS: Final[int] = 14
_GMT_PATTERN: Final[str] = "%Y-%m-%d %H:%M:%S"


def _parse_gmt(value: DynamicValue) -> datetime | None:
    raw = as_str(value)
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, _GMT_PATTERN).replace(tzinfo=UTC)
    except ValueError:
        return None


def decode_post_metadata(value: DynamicValue) -> PostMetadata | None:
    """Decode the embedded post object; ``ID`` and ``post_title`` are required."""
    post = as_object(value)
    if post is None:
        return None
    post_id = as_int(post.get("ID"))
    title = as_str(post.get("post_title"))
    if post_id is None or title is None:
        return None

    return PostMetadata(
        post_id=post_id,
        title=title,
        author_id=as_str(post.get("post_author")),
        date_gmt=_parse_gmt(post.get("post_date_gmt")),
        content=as_str(post.get("post_content")),
        excerpt=as_str(post.get("post_excerpt")),
        status=as_str(post.get("post_status")),
        comment_status=as_str(post.get("comment_status")),
        password=as_str(post.get("post_password")),
        name=as_str(post.get("post_name")),
        modified_gmt=_parse_gmt(post.get("post_modified_gmt")),
        content_filtered=as_str(post.get("post_content_filtered")),
        parent=as_int(post.get("post_parent")),
        guid=as_str(post.get("guid")),
        type=as_str(post.get("post_type")),
        mime_type=as_str(post.get("post_mime_type")),
        comment_count=as_str(post.get("comment_count")),
        permalink=as_str(post.get("permalink")),
    )


class PostDetailsMapper:
    """Post details response."""

    family = "post_details"

    def map(self, payload: DynamicValue, context: DecodeContext) -> PostDetails:
        root = require_root(payload, family=self.family)

        fetched_date = parse_day(root.get("date"))
        total_views = as_int(root.get("views"))
        if fetched_date is None or total_views is None:
            raise StructuralDecodeError(
                "missing date/views", details={"family": self.family}
            )
        years = require_object(root, "years", family=self.family)
        averages = require_object(root, "averages", family=self.family)
        weeks = require_array(root, "weeks", family=self.family)
        rows = require_array(root, "data", family=self.family)

        fields = self._fields(root.get("fields"))
        table_fields = fields if fields is not None and "period" in fields else _DEFAULT_FIELDS
        data = self._daily(table_fields, rows, context)
        last_two_weeks = self._daily(table_fields, rows[-_LAST_TWO_WEEKS_ROWS:], context)
        report_dropped(self.family, "day", len(rows) - len(data), context)

        recent_weeks = collapse_weeks(weeks)
        report_dropped(self.family, "week", len(weeks) - len(recent_weeks), context)

        monthly = aggregate_years(years, aggregate_key="total")
        monthly_averages = aggregate_years(averages, aggregate_key="overall")

        post_node = root.get("post")
        post = decode_post_metadata(post_node)
        if post is None and post_node is not None:
            report_dropped(self.family, "post", 1, context)

        return PostDetails(
            fetched_date=fetched_date,
            total_views=total_views,
            data=data,
            last_two_weeks=last_two_weeks,
            recent_weeks=recent_weeks,
            monthly_breakdown=monthly.entries,
            daily_averages_per_month=monthly_averages.entries,
            yearly_totals=monthly.aggregates,
            overall_averages=monthly_averages.aggregates,
            highest_month=as_int(root.get("highest_month")),
            highest_day_average=as_int(root.get("highest_day_average")),
            highest_week_average=as_int(root.get("highest_week_average")),
            fields=fields,
            post=post,
        )

    @staticmethod
    def _fields(value: DynamicValue) -> tuple[str, ...] | None:
        names = as_array(value)
        if names is None:
            return None
        return tuple(n for n in names if isinstance(n, str))

    @staticmethod
    def _daily(
        fields: Sequence[str],
        rows: Sequence[DynamicValue],
        context: DecodeContext,
    ) -> tuple[DailyViews, ...]:
        table: Mapping[str, DynamicValue] = {"fields": tuple(fields), "data": tuple(rows)}
        decoded = decode_table(
            table,
            unit=PeriodUnit.DAY,
            columns={_VIEWS: ColumnKind.INT},
            tz=context.tz,
        )
        return tuple(
            DailyViews(day=point.date.date(), count=int(point.values[_VIEWS]))
            for point in decoded.points
            if point.has(_VIEWS)
        )
