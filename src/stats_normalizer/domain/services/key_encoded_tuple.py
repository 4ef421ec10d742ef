# src/stats_normalizer/domain/services/key_encoded_tuple.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Composite key parsing.

Purpose:
    Some breakdowns key their values by a dimension tuple serialized as JSON
    text, and the encoding depends on how many dimensions the breakdown has:

        "google"                         -> ("google",)
        ["google","cpc"]                 -> ("google", "cpc")
        ["spring-sale","google","cpc"]   -> ("spring-sale", "google", "cpc")

    Backends that skip the JSON encoding for single-dimension breakdowns send
    the bare value (google); such a key is taken as one dimension. Anything
    else (malformed JSON, numbers, objects, mixed arrays) decodes to an empty
    tuple. Parsing never raises: one bad key must not fail the response it
    belongs to.

Layer:
    domain/services
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Final

from stats_normalizer.domain.entities.composite_metric import DEFAULT_LABEL_SEPARATOR

__all__ = ["join_label", "parse_composite_key"]

_JSON_OPENERS: Final[frozenset[str]] = frozenset({"[", "{", "\""})


def _bare_key(raw: str) -> tuple[str, ...]:
    text = raw.strip()
    if not text or text[0] in _JSON_OPENERS:
        return ()
    return (text,)


def parse_composite_key(raw: str) -> tuple[str, ...]:
    """Decode a JSON-encoded composite key into its dimension values."""
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return _bare_key(raw)

    if isinstance(decoded, list) and all(isinstance(v, str) for v in decoded):
        return tuple(decoded)
    if isinstance(decoded, str):
        return (decoded,)
    return ()


def join_label(values: Sequence[str], separator: str = DEFAULT_LABEL_SEPARATOR) -> str:
    """Join dimension values into a display label."""
    return separator.join(values)
