# src/stats_normalizer/adapters/mappers/utm_metrics_mapper.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""UTM metrics mapper.

Purpose:
    Decode ``{"top_utm_values": {...}, "top_posts": {...}}`` into composite
    metrics sorted by count, highest first (ties keep encounter order).

Layer:
    adapters/mappers

Notes:
    - Object keys are composite keys serialized as JSON text
      (``["spring-sale","google","cpc"]``) or a single value.
    - ``top_utm_values`` may be ``[]`` when empty; anything else that is not
      an object fails the response.
    - ``top_posts`` is independently tolerant: missing, ``null`` or ``[]``
      mean "no related posts". Not every key has top posts.
    - Keys that parse to no dimension values are left out; a metric without
      dimensions has nothing to render.
"""

from __future__ import annotations

from stats_normalizer.adapters.mappers.base import (
    DecodeContext,
    report_dropped,
    require_root,
)
from stats_normalizer.domain.entities.breakdown import BreakdownItem
from stats_normalizer.domain.entities.composite_metric import CompositeMetric, UTMMetrics
from stats_normalizer.domain.entities.dynamic_value import (
    DynamicValue,
    as_array,
    as_int,
    as_object,
    as_str,
)
from stats_normalizer.domain.exceptions.decoding import (
    ScalarDecodeError,
    ShapeViolationError,
)
from stats_normalizer.domain.services.collection_shape import (
    normalize_mapping,
    normalize_optional_mapping,
)
from stats_normalizer.domain.services.key_encoded_tuple import parse_composite_key


def _decode_count(value: DynamicValue) -> int:
    count = as_int(value)
    if count is None or count < 0:
        raise ScalarDecodeError("expected a non-negative integer count")
    return count


def decode_related_post(value: DynamicValue) -> BreakdownItem | None:
    """Decode one ``{id, title, views, href}`` post; ``None`` if incomplete."""
    post = as_object(value)
    if post is None:
        return None
    post_id = as_int(post.get("id"))
    title = as_str(post.get("title"))
    views = as_int(post.get("views"))
    href = as_str(post.get("href"))
    if post_id is None or title is None or views is None or href is None:
        return None
    return BreakdownItem(label=title, count=views, secondary_key=href, extra={"post_id": post_id})


def _decode_posts(value: DynamicValue) -> tuple[DynamicValue, ...]:
    posts = as_array(value)
    if posts is None:
        raise ShapeViolationError("expected a list of posts")
    return tuple(posts)


class UTMMetricsMapper:
    """Top UTM values with their related posts."""

    family = "utm_metrics"

    def map(self, payload: DynamicValue, context: DecodeContext) -> UTMMetrics:
        root = require_root(payload, family=self.family)

        values = normalize_mapping(
            root.get("top_utm_values"), _decode_count, on_element_error="skip"
        )

        try:
            posts_by_key = normalize_optional_mapping(
                root.get("top_posts"), _decode_posts, on_element_error="skip"
            )
        except ShapeViolationError:
            report_dropped(self.family, "top_posts", 1, context)
            posts_by_key = {}

        metrics: list[CompositeMetric] = []
        dropped_keys = 0
        dropped_posts = 0
        for key, count in values.items():
            dimensions = parse_composite_key(key)
            if not dimensions:
                dropped_keys += 1
                continue
            raw_posts = posts_by_key.get(key, ())
            related = tuple(p for p in map(decode_related_post, raw_posts) if p is not None)
            dropped_posts += len(raw_posts) - len(related)
            metrics.append(
                CompositeMetric(
                    dimension_values=dimensions,
                    count=count,
                    related_items=related,
                    separator=context.label_separator,
                )
            )

        report_dropped(self.family, "key", dropped_keys, context)
        report_dropped(self.family, "post", dropped_posts, context)

        # sorted() is stable, so equal counts keep encounter order.
        return UTMMetrics(metrics=tuple(sorted(metrics, key=lambda m: m.count, reverse=True)))
