# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Breakdown Entities

Purpose:
    Ranked, named items carrying a count (top cities, top regions, archive
    links, related posts) and the responses built from them.

Layer: domain/entities
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any

from stats_normalizer.domain.enums.period_unit import PeriodUnit

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Coordinates(BaseEntity):
    """Latitude/longitude pair, kept as the backend's decimal strings."""

    latitude: str
    longitude: str


@dataclass(frozen=True, slots=True)
class BreakdownItem(BaseEntity):
    """A named item with a count.

    Args:
        label: Display name (city, archive value, post title).
        count: Reported count (views, plays).
        secondary_key: Optional second identifier, e.g. a country code or URL.
        extra: Optional structured payload, e.g. ``{"coordinates": Coordinates}``.
    """

    label: str
    count: int
    secondary_key: str | None = None
    extra: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.extra is not None:
            object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def coordinates(self) -> Coordinates | None:
        if self.extra is None:
            return None
        value = self.extra.get("coordinates")
        return value if isinstance(value, Coordinates) else None


@dataclass(frozen=True, slots=True)
class LocationBreakdown(BaseEntity):
    """Top locations (cities or regions) for one period.

    Args:
        unit: Granularity the caller requested.
        period_end_date: Anchor date supplied by the caller.
        total_count: Total views across all locations.
        other_count: Views not attributed to a listed location.
        items: Locations in encounter order; ``secondary_key`` is the country code.
    """

    unit: PeriodUnit
    period_end_date: date
    total_count: int
    other_count: int
    items: tuple[BreakdownItem, ...]


@dataclass(frozen=True, slots=True)
class ArchiveSection(BaseEntity):
    """One archive section (e.g. ``"pages"``) with its links.

    ``count`` is the sum of the item counts.
    """

    name: str
    count: int
    items: tuple[BreakdownItem, ...]


@dataclass(frozen=True, slots=True)
class ArchiveBreakdown(BaseEntity):
    """Archive sections sorted by total count, highest first."""

    unit: PeriodUnit
    period_end_date: date
    sections: tuple[ArchiveSection, ...]
