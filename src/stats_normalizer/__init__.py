# src/stats_normalizer/__init__.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Stats Normalizer.

Decodes loosely-typed analytics API payloads into immutable, typed records.

Typical usage:
    from stats_normalizer import PeriodUnit, decode_site_metrics

    response = decode_site_metrics(raw_json, PeriodUnit.DAY)
    if response is None:
        ...  # render an empty state
"""

from __future__ import annotations

from stats_normalizer.application.use_cases.normalize_stats_response import (
    NormalizeStatsRequest,
    NormalizeStatsResponseUseCase,
    decode_ad_earnings,
    decode_ad_revenue,
    decode_archive,
    decode_city_views,
    decode_post_details,
    decode_region_views,
    decode_site_metrics,
    decode_utm_metrics,
)
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.enums.response_family import ResponseFamily

__all__ = [
    "NormalizeStatsRequest",
    "NormalizeStatsResponseUseCase",
    "PeriodUnit",
    "ResponseFamily",
    "decode_ad_earnings",
    "decode_ad_revenue",
    "decode_archive",
    "decode_city_views",
    "decode_post_details",
    "decode_region_views",
    "decode_site_metrics",
    "decode_utm_metrics",
]
