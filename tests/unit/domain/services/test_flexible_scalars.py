from __future__ import annotations

from decimal import Decimal

import pytest

from stats_normalizer.domain.enums.payment_status import PaymentStatus
from stats_normalizer.domain.exceptions.decoding import ScalarDecodeError
from stats_normalizer.domain.services.flexible_scalars import (
    decode_decimal,
    decode_payment_status,
    try_decode_decimal,
)


def test_decode_decimal_string_keeps_exact_digits() -> None:
    value = decode_decimal("12.50")

    assert value == Decimal("12.5")
    assert str(value) == "12.50"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (12.5, Decimal("12.5")),
        (12, Decimal("12")),
        (" 7.25 ", Decimal("7.25")),
        (0.1, Decimal("0.1")),
        ("-3", Decimal("-3")),
    ],
)
def test_decode_decimal_accepts_strings_and_numbers(raw: object, expected: Decimal) -> None:
    assert decode_decimal(raw) == expected  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        True,
        False,
        "",
        "abc",
        "NaN",
        "Infinity",
        "1_000",
        "12_50.00",
        float("nan"),
        float("inf"),
        {},
        [],
    ],
)
def test_decode_decimal_rejects_non_numeric(raw: object) -> None:
    with pytest.raises(ScalarDecodeError):
        decode_decimal(raw)  # type: ignore[arg-type]
    assert try_decode_decimal(raw) is None  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["1", 1])
def test_payment_status_paid(raw: object) -> None:
    assert decode_payment_status(raw) is PaymentStatus.PAID  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["0", 0, "paid", True, 2, None, 1.0])
def test_payment_status_outstanding(raw: object) -> None:
    assert decode_payment_status(raw) is PaymentStatus.OUTSTANDING  # type: ignore[arg-type]


def test_payment_status_defaults_to_outstanding() -> None:
    assert decode_payment_status() is PaymentStatus.OUTSTANDING
