# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Dynamic Value

Purpose:
    Read-only representation of an already-parsed JSON tree and the typed
    accessors every decoder uses to pull fields out of it.

    A node is one of: object (``Mapping[str, DynamicValue]``), array
    (``Sequence[DynamicValue]``, never ``str``), string, number (``int`` or
    ``float``, never ``bool``), bool, or null (``None``). Accessors return
    ``None`` on a kind mismatch so callers decide, at the call site, whether a
    miss drops the item or fails the response.

Layer: domain/entities
"""
from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias

from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError

DynamicValue: TypeAlias = (
    None | bool | int | float | str | Sequence["DynamicValue"] | Mapping[str, "DynamicValue"]
)

__all__ = [
    "DynamicKind",
    "DynamicValue",
    "as_array",
    "as_bool",
    "as_float",
    "as_int",
    "as_object",
    "as_str",
    "freeze",
    "kind_of",
    "parse_json",
]


class DynamicKind(str, Enum):
    """Kind tag for a JSON node."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


def kind_of(value: Any) -> DynamicKind:
    """Classify a node of a parsed JSON tree.

    Raises:
        TypeError: If ``value`` is not something a JSON parser can produce.
    """
    match value:
        case None:
            return DynamicKind.NULL
        case bool():
            return DynamicKind.BOOL
        case int() | float():
            return DynamicKind.NUMBER
        case str():
            return DynamicKind.STRING
        case Mapping():
            return DynamicKind.OBJECT
        case bytes() | bytearray():
            raise TypeError("bytes are not a JSON value")
        case Sequence():
            return DynamicKind.ARRAY
        case _:
            raise TypeError(f"not a JSON value: {type(value).__name__}")


def freeze(value: Any) -> DynamicValue:
    """Return a read-only copy of a parsed JSON tree.

    Objects become ``MappingProxyType`` views over fresh dicts and arrays
    become tuples. Scalars are returned unchanged.
    """
    match kind_of(value):
        case DynamicKind.OBJECT:
            return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
        case DynamicKind.ARRAY:
            return tuple(freeze(v) for v in value)
        case _:
            return value


def parse_json(raw: str | bytes | bytearray) -> DynamicValue:
    """Parse JSON text into a frozen :data:`DynamicValue` tree.

    Raises:
        StructuralDecodeError: If the text is not valid JSON or nests too
            deeply to parse.
    """
    try:
        return freeze(json.loads(raw))
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise StructuralDecodeError("invalid_json", details={"error": str(exc)}) from exc


def as_object(value: DynamicValue) -> Mapping[str, DynamicValue] | None:
    """Return ``value`` if it is a JSON object, else ``None``."""
    if isinstance(value, Mapping):
        return value
    return None


def as_array(value: DynamicValue) -> Sequence[DynamicValue] | None:
    """Return ``value`` if it is a JSON array, else ``None``."""
    if isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray):
        return value
    return None


def as_str(value: DynamicValue) -> str | None:
    """Return ``value`` if it is a JSON string, else ``None``."""
    return value if isinstance(value, str) else None


def as_bool(value: DynamicValue) -> bool | None:
    """Return ``value`` if it is a JSON boolean, else ``None``."""
    return value if isinstance(value, bool) else None


def as_int(value: DynamicValue) -> int | None:
    """Return an integral JSON number as ``int``.

    Integral floats (``3.0``) are accepted since JSON does not distinguish
    them; fractional or non-finite floats and booleans are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def as_float(value: DynamicValue) -> float | None:
    """Return a JSON number as ``float``, widening integers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    return None
