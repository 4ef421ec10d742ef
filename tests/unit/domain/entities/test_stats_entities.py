from __future__ import annotations

import dataclasses
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from stats_normalizer.domain.entities.ad_earnings import AdEarnings, MonthlyEarning
from stats_normalizer.domain.entities.breakdown import BreakdownItem, Coordinates
from stats_normalizer.domain.entities.composite_metric import CompositeMetric
from stats_normalizer.domain.entities.period import Period
from stats_normalizer.domain.entities.post_details import WeeklyBreakdown
from stats_normalizer.domain.entities.time_series import TimeSeriesPoint
from stats_normalizer.domain.enums.payment_status import PaymentStatus
from stats_normalizer.domain.enums.stats_metric import SiteMetric


def test_period_orders_by_year_then_month() -> None:
    periods = [Period(2024, 1), Period(2023, 12), Period(2024, 11)]

    assert sorted(periods) == [Period(2023, 12), Period(2024, 1), Period(2024, 11)]
    assert str(Period(2024, 3)) == "2024-03"
    assert Period(987, 1).format() == "0987-01"


@pytest.mark.parametrize("month", [0, 13, -1])
def test_period_rejects_out_of_range_month(month: int) -> None:
    with pytest.raises(ValueError, match="month must be within 1..12"):
        Period(2024, month)


def test_time_series_point_absent_metric_is_none_not_zero() -> None:
    point = TimeSeriesPoint(date=datetime(2024, 1, 1, tzinfo=UTC), values={"views": 5})

    assert point[SiteMetric.VIEWS] == 5
    assert point.get("visitors") is None
    assert point.has(SiteMetric.VIEWS)
    assert not point.has(SiteMetric.VISITORS)


def test_time_series_point_values_are_read_only() -> None:
    source = {"views": 5}
    point = TimeSeriesPoint(date=datetime(2024, 1, 1, tzinfo=UTC), values=source)
    source["views"] = 99

    assert point.values["views"] == 5
    with pytest.raises(TypeError):
        point.values["views"] = 1  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        point.date = datetime(2025, 1, 1, tzinfo=UTC)  # type: ignore[misc]


def test_composite_metric_label_and_invariants() -> None:
    metric = CompositeMetric(dimension_values=("spring-sale", "google", "cpc"), count=3)

    assert metric.label == "spring-sale / google / cpc"
    assert CompositeMetric(("a", "b"), 1, separator=" | ").label == "a | b"

    with pytest.raises(ValueError, match="dimension_values must not be empty"):
        CompositeMetric(dimension_values=(), count=1)
    with pytest.raises(ValueError, match="count must be >= 0"):
        CompositeMetric(dimension_values=("a",), count=-1)


def test_breakdown_item_exposes_coordinates() -> None:
    coords = Coordinates(latitude="38.7", longitude="-9.1")
    item = BreakdownItem(label="Lisbon", count=4, secondary_key="PT", extra={"coordinates": coords})

    assert item.coordinates == coords
    assert BreakdownItem(label="Porto", count=1).coordinates is None


def test_ad_earnings_total_paid_sums_paid_lines_only() -> None:
    ledger = AdEarnings(
        total_earnings=Decimal("10.00"),
        total_amount_owed=Decimal("4.00"),
        earnings=(
            MonthlyEarning(Period(2024, 2), Decimal("4.00"), PaymentStatus.OUTSTANDING, "10"),
            MonthlyEarning(Period(2024, 1), Decimal("6.00"), PaymentStatus.PAID, "20"),
        ),
    )

    assert ledger.total_paid == Decimal("6.00")


def test_weekly_breakdown_requires_days() -> None:
    with pytest.raises(ValueError, match="days must not be empty"):
        WeeklyBreakdown(
            start_day=date(2024, 1, 1),
            end_day=date(2024, 1, 7),
            total_count=0,
            average_count=0,
            change_ratio=0.0,
            is_change_unbounded=False,
            days=(),
        )
