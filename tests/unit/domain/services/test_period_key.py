from __future__ import annotations

import pytest

from stats_normalizer.domain.entities.period import Period
from stats_normalizer.domain.exceptions.decoding import PeriodKeyError
from stats_normalizer.domain.services.period_key import (
    format_period_key,
    parse_period_key,
    try_parse_period_key,
)


@pytest.mark.parametrize(
    "period",
    [
        Period(2024, 1),
        Period(1999, 12),
        Period(2030, 7),
        Period(1, 1),
        Period(0, 1),
        Period(9999, 12),
    ],
)
def test_parse_format_round_trip(period: Period) -> None:
    assert parse_period_key(format_period_key(period)) == period


@pytest.mark.parametrize("key", ["2024-01", "1999-12", "0042-06"])
def test_format_parse_round_trip_for_canonical_keys(key: str) -> None:
    assert format_period_key(parse_period_key(key)) == key


@pytest.mark.parametrize(
    "key",
    [
        "2024-13",
        "2024-00",
        "2024",
        "2024-01-01",
        "2024/01",
        "20a4-01",
        "",
        "-01",
        " 2024-01",
        "-005-01",
        "10000-01",
    ],
)
def test_invalid_keys_rejected(key: str) -> None:
    with pytest.raises(PeriodKeyError):
        parse_period_key(key)
    assert try_parse_period_key(key) is None


def test_unpadded_key_parses() -> None:
    assert parse_period_key("2024-3") == Period(2024, 3)


@pytest.mark.parametrize("year", [-5, -1, 10000, 12345])
def test_period_outside_four_digit_years_cannot_be_built(year: int) -> None:
    with pytest.raises(ValueError, match="year must be within 0..9999"):
        Period(year, 1)


def test_five_digit_year_reports_year_out_of_range() -> None:
    with pytest.raises(PeriodKeyError, match="year out of range"):
        parse_period_key("10000-01")
