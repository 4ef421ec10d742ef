# src/stats_normalizer/adapters/mappers/base.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Shared mapper plumbing.

Purpose:
    Caller-supplied decode context, the mapper protocol every response family
    implements, and small helpers for structural checks and dropped-item
    reporting.

Layer:
    adapters/mappers

Notes:
    - ``map()`` raises :class:`StructuralDecodeError` when the payload does
      not have the minimum shape of its family. Item-level misses are
      absorbed inside the mapper and only reported (debug log + counter).
    - Mappers keep no state between calls; one instance may serve any number
      of concurrent decodes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, tzinfo
from typing import Protocol, TypeVar

from stats_normalizer.domain.entities.composite_metric import DEFAULT_LABEL_SEPARATOR
from stats_normalizer.domain.entities.dynamic_value import (
    DynamicValue,
    as_array,
    as_object,
    kind_of,
)
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError
from stats_normalizer.infrastructure.observability.metrics import record_dropped_items

logger = logging.getLogger(__name__)

TRecord_co = TypeVar("TRecord_co", covariant=True)


@dataclass(frozen=True)
class DecodeContext:
    """Parameters supplied by the caller alongside a payload.

    Attributes:
        unit: Requested granularity; selects date patterns.
        anchor_date: Nominal end date of the request, reported as
            ``period_end_date`` where the payload has none.
        tz: Timezone the backend reports period dates in.
        label_separator: Separator for composite-key labels.
        metrics_enabled: Record dropped-item counters.
    """

    unit: PeriodUnit
    anchor_date: date
    tz: tzinfo = UTC
    label_separator: str = DEFAULT_LABEL_SEPARATOR
    metrics_enabled: bool = False


class ResponseMapper(Protocol[TRecord_co]):
    """Decoder for one response family."""

    family: str

    def map(self, payload: DynamicValue, context: DecodeContext) -> TRecord_co:
        """Decode ``payload`` into the family's record.

        Raises:
            StructuralDecodeError: If the payload lacks the family's shape.
        """
        ...


def require_object(
    parent: Mapping[str, DynamicValue] | None, key: str, *, family: str
) -> Mapping[str, DynamicValue]:
    """Return ``parent[key]`` as an object or fail the response."""
    value = parent.get(key) if parent is not None else None
    obj = as_object(value)
    if obj is None:
        raise StructuralDecodeError(
            f"missing object {key!r}",
            details={"family": family, "key": key, "kind": kind_of(value).value},
        )
    return obj


def require_array(
    parent: Mapping[str, DynamicValue], key: str, *, family: str
) -> tuple[DynamicValue, ...]:
    """Return ``parent[key]`` as an array or fail the response."""
    value = parent.get(key)
    arr = as_array(value)
    if arr is None:
        raise StructuralDecodeError(
            f"missing array {key!r}",
            details={"family": family, "key": key, "kind": kind_of(value).value},
        )
    return tuple(arr)


def require_root(payload: DynamicValue, *, family: str) -> Mapping[str, DynamicValue]:
    """Return the payload root as an object or fail the response."""
    root = as_object(payload)
    if root is None:
        raise StructuralDecodeError(
            "expected an object root",
            details={"family": family, "kind": kind_of(payload).value},
        )
    return root


def report_dropped(family: str, reason: str, count: int, context: DecodeContext) -> None:
    """Log and count item-level misses absorbed by a mapper."""
    if count <= 0:
        return
    logger.debug(
        "Dropped undecodable items",
        extra={"extra": {"family": family, "reason": reason, "count": count}},
    )
    if context.metrics_enabled:
        record_dropped_items(family, reason, count)
