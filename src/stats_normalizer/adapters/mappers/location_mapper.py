# src/stats_normalizer/adapters/mappers/location_mapper.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Location breakdown mapper (top cities and top regions).

Purpose:
    Decode::

        {"summary": {
            "total_views": 500, "other_views": 20,
            "views": [{"location": "Lisbon", "views": 40, "country_code": "PT",
                       "coordinates": {"latitude": "38.72", "longitude": "-9.13"}}]
        }}

    into a :class:`LocationBreakdown`. Cities and regions share the shape and
    differ only in the family name they report under.

Layer:
    adapters/mappers
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from stats_normalizer.adapters.mappers.base import (
    DecodeContext,
    report_dropped,
    require_array,
    require_object,
    require_root,
)
from stats_normalizer.domain.entities.breakdown import (
    BreakdownItem,
    Coordinates,
    LocationBreakdown,
)
from stats_normalizer.domain.entities.dynamic_value import (
    DynamicKind,
    DynamicValue,
    as_int,
    as_object,
    as_str,
    kind_of,
)

CITY_FAMILY: Final[str] = "city_views"
REGION_FAMILY: Final[str] = "region_views"


def _coordinate(value: DynamicValue) -> str | None:
    match kind_of(value):
        case DynamicKind.STRING:
            return as_str(value)
        case DynamicKind.NUMBER:
            return repr(value)
        case _:
            return None


def decode_coordinates(value: DynamicValue) -> Coordinates | None:
    """Both ``latitude`` and ``longitude`` or nothing."""
    node = as_object(value)
    if node is None:
        return None
    latitude = _coordinate(node.get("latitude"))
    longitude = _coordinate(node.get("longitude"))
    if latitude is None or longitude is None:
        return None
    return Coordinates(latitude=latitude, longitude=longitude)


def decode_location(value: DynamicValue) -> BreakdownItem | None:
    entry = as_object(value)
    if entry is None:
        return None
    location = as_str(entry.get("location"))
    views = as_int(entry.get("views"))
    country_code = as_str(entry.get("country_code"))
    if location is None or views is None or country_code is None:
        return None

    extra: Mapping[str, Coordinates] | None = None
    coordinates = decode_coordinates(entry.get("coordinates"))
    if coordinates is not None:
        extra = {"coordinates": coordinates}
    return BreakdownItem(label=location, count=views, secondary_key=country_code, extra=extra)


class LocationBreakdownMapper:
    """Top locations by views."""

    def __init__(self, family: str = CITY_FAMILY) -> None:
        self.family = family

    def map(self, payload: DynamicValue, context: DecodeContext) -> LocationBreakdown:
        root = require_root(payload, family=self.family)
        summary = require_object(root, "summary", family=self.family)
        entries = require_array(summary, "views", family=self.family)

        items = tuple(i for i in map(decode_location, entries) if i is not None)
        report_dropped(self.family, "location", len(entries) - len(items), context)

        return LocationBreakdown(
            unit=context.unit,
            period_end_date=context.anchor_date,
            total_count=as_int(summary.get("total_views")) or 0,
            other_count=as_int(summary.get("other_views")) or 0,
            items=items,
        )
