# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Period unit enumeration.

Purpose:
    Granularity of a statistics request. Supplied by the caller alongside
    every payload; never read from the payload itself. Selects the date
    pattern used for the period column of tabular responses.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class PeriodUnit(str, Enum):
    """Requested period granularity (values match the backend ``unit`` parameter)."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
