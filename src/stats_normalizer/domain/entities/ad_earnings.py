# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Ad Earnings Entities

Purpose:
    Monetary ledger of monthly ad earnings. Amounts are ``Decimal`` end to
    end; nothing here is routed through binary floating point.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from stats_normalizer.domain.enums.payment_status import PaymentStatus

from .base import BaseEntity
from .period import Period


@dataclass(frozen=True, slots=True)
class MonthlyEarning(BaseEntity):
    """Earnings for one calendar month.

    Args:
        period: Month the line refers to.
        amount: Earned amount.
        status: Whether the amount has been paid out.
        pageviews: Ad-eligible pageviews, as reported (a string on the wire).
    """

    period: Period
    amount: Decimal
    status: PaymentStatus
    pageviews: str


@dataclass(frozen=True, slots=True)
class AdEarnings(BaseEntity):
    """Earnings ledger, newest period first."""

    total_earnings: Decimal
    total_amount_owed: Decimal
    earnings: tuple[MonthlyEarning, ...]

    @property
    def total_paid(self) -> Decimal:
        return sum(
            (e.amount for e in self.earnings if e.status is PaymentStatus.PAID),
            Decimal(0),
        )
