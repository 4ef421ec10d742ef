# src/stats_normalizer/domain/services/flexible_scalars.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Flexible scalar decoding.

Purpose:
    Decode scalars whose wire encoding varies between responses (or between
    backend versions) into one canonical typed value.

    * Monetary amounts arrive as numeric strings (``"12.50"``), integers or
      floats. They are decoded to :class:`decimal.Decimal`; string input is
      never routed through binary floating point.
    * Payment status arrives as ``"1"``/``"0"`` or ``1``/``0``. Only the
      value one means paid; every other value, including a missing field,
      means outstanding.

Layer:
    domain/services
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from stats_normalizer.domain.entities.dynamic_value import DynamicValue
from stats_normalizer.domain.enums.payment_status import PaymentStatus
from stats_normalizer.domain.exceptions.decoding import ScalarDecodeError

__all__ = ["decode_decimal", "decode_payment_status", "try_decode_decimal"]


def _decimal_from_string(raw: str) -> Decimal | None:
    # Plain decimal text only; Decimal() alone would accept "1_000".
    if "_" in raw:
        return None
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def decode_decimal(value: DynamicValue) -> Decimal:
    """Decode a monetary amount from a string or a number.

    Args:
        value: JSON node holding the amount.

    Returns:
        The amount as a ``Decimal``. Strings keep their exact digits
        (``"12.50"`` stays ``Decimal("12.50")``); integers convert exactly;
        floats convert through their shortest ``repr``.

    Raises:
        ScalarDecodeError: If the node is neither a numeric string nor a
            finite number.
    """
    match value:
        case str():
            parsed = _decimal_from_string(value)
            if parsed is not None:
                return parsed
        case bool():
            pass
        case int():
            return Decimal(value)
        case float():
            parsed = _decimal_from_string(repr(value))
            if parsed is not None:
                return parsed
    raise ScalarDecodeError(
        "expected a numeric string or number",
        details={"kind": type(value).__name__},
    )


def try_decode_decimal(value: DynamicValue) -> Decimal | None:
    """Like :func:`decode_decimal` but returns ``None`` instead of raising."""
    try:
        return decode_decimal(value)
    except ScalarDecodeError:
        return None


def decode_payment_status(value: DynamicValue = None) -> PaymentStatus:
    """Decode a paid/outstanding flag; never fails."""
    match value:
        case "1":
            return PaymentStatus.PAID
        case bool():
            return PaymentStatus.OUTSTANDING
        case int() if value == 1:
            return PaymentStatus.PAID
        case _:
            return PaymentStatus.OUTSTANDING
