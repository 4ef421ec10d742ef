# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Response family enumeration.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class ResponseFamily(str, Enum):
    """Statistics endpoints whose payloads can be normalized.

    Values double as the ``family`` label on logs and metrics.
    """

    SITE_METRICS = "site_metrics"
    AD_REVENUE = "ad_revenue"
    POST_DETAILS = "post_details"
    UTM_METRICS = "utm_metrics"
    AD_EARNINGS = "ad_earnings"
    CITY_VIEWS = "city_views"
    REGION_VIEWS = "region_views"
    ARCHIVE = "archive"
