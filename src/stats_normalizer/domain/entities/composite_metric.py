# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Composite Metric Entities

Purpose:
    Metrics keyed by a tuple of dimension values (e.g. UTM campaign, source,
    medium). The display label is a pure function of the tuple.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from .base import BaseEntity
from .breakdown import BreakdownItem

DEFAULT_LABEL_SEPARATOR = " / "


@dataclass(frozen=True, slots=True)
class CompositeMetric(BaseEntity):
    """A count attributed to an ordered tuple of dimension values.

    Args:
        dimension_values: Ordered dimension values, e.g. ``("spring-sale", "google", "cpc")``.
        count: Reported count.
        related_items: Items associated with this key (top posts).
        separator: Separator used to build :attr:`label`.

    Raises:
        ValueError: If ``dimension_values`` is empty or the count is negative.
    """

    dimension_values: tuple[str, ...]
    count: int
    related_items: tuple[BreakdownItem, ...] = ()
    separator: str = DEFAULT_LABEL_SEPARATOR

    def __post_init__(self) -> None:
        if not self.dimension_values:
            raise ValueError("dimension_values must not be empty")
        if self.count < 0:
            raise ValueError("count must be >= 0")

    @property
    def label(self) -> str:
        return self.separator.join(self.dimension_values)


@dataclass(frozen=True, slots=True)
class UTMMetrics(BaseEntity):
    """UTM breakdown sorted by count, highest first."""

    metrics: tuple[CompositeMetric, ...]
