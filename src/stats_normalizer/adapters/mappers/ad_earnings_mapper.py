# src/stats_normalizer/adapters/mappers/ad_earnings_mapper.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Ad earnings ledger mapper.

Purpose:
    Decode::

        {"earnings": {
            "total_earnings": "123.45",
            "total_amount_owed": 10,
            "wordads": {"2024-01": {"amount": "3.50", "status": "1", "pageviews": "120"}}
        }}

    into an :class:`AdEarnings` ledger sorted newest period first.

Layer:
    adapters/mappers

Notes:
    - Totals are required; a ledger without them is not renderable.
    - Each line is decoded independently: a bad period key or amount drops
      that line only.
    - Amounts go through :func:`decode_decimal` and are never converted to
      float.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from stats_normalizer.adapters.mappers.base import (
    DecodeContext,
    report_dropped,
    require_object,
    require_root,
)
from stats_normalizer.domain.entities.ad_earnings import AdEarnings, MonthlyEarning
from stats_normalizer.domain.entities.dynamic_value import DynamicValue, as_int, as_object, as_str
from stats_normalizer.domain.enums.payment_status import PaymentStatus
from stats_normalizer.domain.exceptions.decoding import (
    ScalarDecodeError,
    StructuralDecodeError,
)
from stats_normalizer.domain.services.collection_shape import normalize_mapping
from stats_normalizer.domain.services.flexible_scalars import (
    decode_decimal,
    decode_payment_status,
    try_decode_decimal,
)
from stats_normalizer.domain.services.period_key import try_parse_period_key


@dataclass(frozen=True)
class _LedgerLine:
    amount: Decimal
    status: PaymentStatus
    pageviews: str


def _decode_pageviews(value: DynamicValue) -> str:
    text = as_str(value)
    if text is not None:
        return text
    number = as_int(value)
    return str(number) if number is not None else "0"


def _decode_line(value: DynamicValue) -> _LedgerLine:
    line = as_object(value)
    if line is None:
        raise ScalarDecodeError("expected a ledger line object")
    return _LedgerLine(
        amount=decode_decimal(line.get("amount")),
        status=decode_payment_status(line.get("status")),
        pageviews=_decode_pageviews(line.get("pageviews")),
    )


class AdEarningsMapper:
    """Monthly ad earnings ledger."""

    family = "ad_earnings"

    def map(self, payload: DynamicValue, context: DecodeContext) -> AdEarnings:
        root = require_root(payload, family=self.family)
        earnings = require_object(root, "earnings", family=self.family)

        total_earnings = try_decode_decimal(earnings.get("total_earnings"))
        total_owed = try_decode_decimal(earnings.get("total_amount_owed"))
        if total_earnings is None or total_owed is None:
            raise StructuralDecodeError(
                "missing earnings totals", details={"family": self.family}
            )

        lines = normalize_mapping(earnings.get("wordads"), _decode_line, on_element_error="skip")

        ledger: list[MonthlyEarning] = []
        for key, line in lines.items():
            period = try_parse_period_key(key)
            if period is None:
                continue
            ledger.append(
                MonthlyEarning(
                    period=period,
                    amount=line.amount,
                    status=line.status,
                    pageviews=line.pageviews,
                )
            )

        wordads = as_object(earnings.get("wordads"))
        raw_count = len(wordads) if wordads is not None else 0
        report_dropped(self.family, "ledger_line", raw_count - len(ledger), context)

        ledger.sort(key=lambda e: e.period, reverse=True)
        return AdEarnings(
            total_earnings=total_earnings,
            total_amount_owed=total_owed,
            earnings=tuple(ledger),
        )
