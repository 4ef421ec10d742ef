# src/stats_normalizer/domain/services/period_key.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""``YYYY-MM`` period key codec.

Purpose:
    Parse and format the period keys used by monthly ledgers. A key is
    exactly two ASCII-digit components separated by a single hyphen, with the
    month in ``1..12`` and the year in ``0..9999``. Formatting always zero-pads (4-digit year, 2-digit
    month), so ``format_period_key(parse_period_key(s)) == s`` for every
    canonical key.

Layer:
    domain/services
"""

from __future__ import annotations

import re
from typing import Final

from stats_normalizer.domain.entities.period import MAX_YEAR, MIN_YEAR, Period
from stats_normalizer.domain.exceptions.decoding import PeriodKeyError

__all__ = ["format_period_key", "parse_period_key", "try_parse_period_key"]

_PERIOD_KEY_RE: Final[re.Pattern[str]] = re.compile(r"([0-9]+)-([0-9]+)")


def parse_period_key(raw: str) -> Period:
    """Parse ``"YYYY-MM"`` into a :class:`Period`.

    Raises:
        PeriodKeyError: If the key is malformed or the year or month is out of
            range.
    """
    match = _PERIOD_KEY_RE.fullmatch(raw)
    if match is None:
        raise PeriodKeyError("malformed period key", details={"key": raw})
    year, month = int(match.group(1)), int(match.group(2))
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise PeriodKeyError("year out of range", details={"key": raw, "year": year})
    if not 1 <= month <= 12:
        raise PeriodKeyError("month out of range", details={"key": raw, "month": month})
    return Period(year=year, month=month)


def try_parse_period_key(raw: str) -> Period | None:
    """Return the parsed period, or ``None`` for an invalid key."""
    try:
        return parse_period_key(raw)
    except PeriodKeyError:
        return None


def format_period_key(period: Period) -> str:
    """Format a period as a zero-padded ``"YYYY-MM"`` key."""
    return f"{period.year:04d}-{period.month:02d}"
