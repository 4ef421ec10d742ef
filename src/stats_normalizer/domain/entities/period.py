# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Period Entity

Purpose:
    Calendar year+month pair used as a sortable key for monthly aggregates
    and monetary ledger lines.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .base import BaseEntity

MIN_YEAR: Final[int] = 0
MAX_YEAR: Final[int] = 9999


@dataclass(frozen=True, slots=True, order=True)
class Period(BaseEntity):
    """Year and month, totally ordered by ``(year, month)``.

    Args:
        year: Calendar year in ``0..9999`` so the key stays four digits.
        month: Calendar month in ``1..12``.

    Raises:
        ValueError: If ``year`` is outside ``0..9999`` or ``month`` is
            outside ``1..12``.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError("year must be within 0..9999")
        if not 1 <= self.month <= 12:
            raise ValueError("month must be within 1..12")

    def format(self) -> str:
        """Zero-padded ``"YYYY-MM"`` form."""
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, slots=True)
class PeriodCount(BaseEntity):
    """A count attached to one year/month period."""

    period: Period
    count: int
