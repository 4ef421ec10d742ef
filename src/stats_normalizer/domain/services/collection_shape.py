# src/stats_normalizer/domain/services/collection_shape.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Mapping-or-empty-array normalization.

Purpose:
    Several endpoints encode an empty mapping as ``[]`` instead of ``{}``.
    This module owns that policy so call sites do not re-derive it:

    * JSON object        → decode every entry.
    * empty JSON array   → empty mapping.
    * anything else      → :class:`ShapeViolationError` (never guess).

Layer:
    domain/services
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal, TypeVar

from stats_normalizer.domain.entities.dynamic_value import (
    DynamicKind,
    DynamicValue,
    kind_of,
)
from stats_normalizer.domain.exceptions.decoding import (
    ScalarDecodeError,
    ShapeViolationError,
)

logger = logging.getLogger(__name__)

__all__ = ["ElementErrorPolicy", "normalize_mapping", "normalize_optional_mapping"]

T = TypeVar("T")

ElementErrorPolicy = Literal["raise", "skip"]


def normalize_mapping(
    value: DynamicValue,
    decode_element: Callable[[DynamicValue], T],
    *,
    on_element_error: ElementErrorPolicy = "raise",
) -> dict[str, T]:
    """Decode a field that is semantically ``mapping(str → T)``.

    Args:
        value: The field's JSON node.
        decode_element: Decoder for one mapping value. It signals a bad
            element by raising :class:`ScalarDecodeError` or
            :class:`ShapeViolationError`.
        on_element_error: ``"raise"`` propagates an element failure;
            ``"skip"`` drops the offending entry.

    Returns:
        Decoded entries in the payload's key order.

    Raises:
        ShapeViolationError: If the node is a non-empty array or not a
            collection at all.
        ScalarDecodeError: If an element fails and the policy is ``"raise"``.
    """
    kind = kind_of(value)
    if kind is DynamicKind.ARRAY:
        if len(value) == 0:  # type: ignore[arg-type]
            return {}
        raise ShapeViolationError(
            "expected an object or an empty array",
            details={"kind": kind.value, "length": len(value)},  # type: ignore[arg-type]
        )
    if kind is not DynamicKind.OBJECT:
        raise ShapeViolationError(
            "expected an object or an empty array", details={"kind": kind.value}
        )

    out: dict[str, T] = {}
    for key, element in value.items():  # type: ignore[union-attr]
        try:
            out[key] = decode_element(element)
        except (ScalarDecodeError, ShapeViolationError):
            if on_element_error == "raise":
                raise
            logger.debug("Dropping undecodable mapping entry", extra={"extra": {"key": key}})
    return out


def normalize_optional_mapping(
    value: DynamicValue,
    decode_element: Callable[[DynamicValue], T],
    *,
    on_element_error: ElementErrorPolicy = "raise",
) -> dict[str, T]:
    """Like :func:`normalize_mapping`, but a missing (``None``) field is empty."""
    if value is None:
        return {}
    return normalize_mapping(value, decode_element, on_element_error=on_element_error)
