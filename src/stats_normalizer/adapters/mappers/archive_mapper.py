# src/stats_normalizer/adapters/mappers/archive_mapper.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Archive breakdown mapper.

Decodes ``{"summary": {"pages": [{"href": ..., "value": ..., "views": 3}], ...}}``
into sections sorted by total views, highest first. A section whose value is
not a list, or that has no decodable items, is left out.
"""

from __future__ import annotations

from stats_normalizer.adapters.mappers.base import (
    DecodeContext,
    report_dropped,
    require_object,
    require_root,
)
from stats_normalizer.domain.entities.breakdown import (
    ArchiveBreakdown,
    ArchiveSection,
    BreakdownItem,
)
from stats_normalizer.domain.entities.dynamic_value import (
    DynamicValue,
    as_array,
    as_int,
    as_object,
    as_str,
)


def decode_archive_item(value: DynamicValue) -> BreakdownItem | None:
    item = as_object(value)
    if item is None:
        return None
    href = as_str(item.get("href"))
    label = as_str(item.get("value"))
    views = as_int(item.get("views"))
    if href is None or label is None or views is None:
        return None
    return BreakdownItem(label=label, count=views, secondary_key=href)


class ArchiveBreakdownMapper:
    """Archive sections (pages, categories, tags, ...)."""

    family = "archive"

    def map(self, payload: DynamicValue, context: DecodeContext) -> ArchiveBreakdown:
        root = require_root(payload, family=self.family)
        summary = require_object(root, "summary", family=self.family)

        sections: list[ArchiveSection] = []
        dropped_items = 0
        dropped_sections = 0
        for name, raw in summary.items():
            entries = as_array(raw)
            if entries is None:
                dropped_sections += 1
                continue
            items = tuple(i for i in map(decode_archive_item, entries) if i is not None)
            dropped_items += len(entries) - len(items)
            if not items:
                dropped_sections += 1
                continue
            sections.append(
                ArchiveSection(name=name, count=sum(i.count for i in items), items=items)
            )

        report_dropped(self.family, "item", dropped_items, context)
        report_dropped(self.family, "section", dropped_sections, context)

        sections.sort(key=lambda s: s.count, reverse=True)
        return ArchiveBreakdown(
            unit=context.unit,
            period_end_date=context.anchor_date,
            sections=tuple(sections),
        )
