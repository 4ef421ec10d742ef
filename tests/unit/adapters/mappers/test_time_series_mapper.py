from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

import pytest

from stats_normalizer.adapters.mappers.base import DecodeContext
from stats_normalizer.adapters.mappers.time_series_mapper import AdRevenueMapper, SiteMetricsMapper
from stats_normalizer.domain.entities.dynamic_value import DynamicValue
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.enums.stats_metric import AdMetric, SiteMetric
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError


def test_site_metrics_weekly_rows(
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    body = payload(
        {
            "date": "2024-01-22",
            "unit": "week",
            "fields": ["period", "views", "visitors", "likes", "comments", "posts"],
            "data": [["2024W01W08", 70, 30, 2, 1, 1], ["2024W01W15", 90, 35, 4, 0, 2]],
        }
    )

    out = SiteMetricsMapper().map(body, make_context(PeriodUnit.WEEK))

    assert out.unit is PeriodUnit.WEEK
    assert out.period_end_date == date(2024, 3, 1)
    assert [p.date for p in out.points] == [
        datetime(2024, 1, 8, tzinfo=UTC),
        datetime(2024, 1, 15, tzinfo=UTC),
    ]
    assert out.points[1][SiteMetric.POSTS] == 2


def test_site_metrics_missing_visitors_column(
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    body = payload({"fields": ["period", "views"], "data": [["2024-01-01", 5]]})

    out = SiteMetricsMapper().map(body, make_context())

    assert out.points[0][SiteMetric.VIEWS] == 5
    assert out.points[0][SiteMetric.VISITORS] is None


def test_ad_revenue_kinds(
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    body = payload(
        {
            "fields": ["period", "impressions", "revenue", "cpm"],
            "data": [["2024-01-01", 1200, 3, 2.5], ["2024-01-02", 10.5, 0.75, 1]],
        }
    )

    out = AdRevenueMapper().map(body, make_context())

    first, second = out.points
    assert first[AdMetric.IMPRESSIONS] == 1200
    assert first[AdMetric.REVENUE] == 3.0
    assert second[AdMetric.IMPRESSIONS] is None
    assert second[AdMetric.CPM] == 1.0


def test_decoding_twice_is_structurally_equal(
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    body = payload({"fields": ["period", "views"], "data": [["2024-01-01", 5], ["bad", 1]]})
    mapper = SiteMetricsMapper()

    assert mapper.map(body, make_context()) == mapper.map(body, make_context())


@pytest.mark.parametrize("body", [{"data": []}, {"fields": [], "data": []}, []])
def test_missing_table_is_structural(
    body: Any,
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    with pytest.raises(StructuralDecodeError):
        AdRevenueMapper().map(payload(body), make_context())
