# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Statistics Decoding Exceptions

Purpose:
    Error taxonomy for the statistics normalization layer.

    * ``StructuralDecodeError``: the payload lacks the minimum shape a whole
      response family requires. Mappers raise it; the decode boundary turns it
      into an explicit "nothing usable" result.
    * ``ShapeViolationError``: a field that is semantically a mapping arrived
      as a non-empty array (or another unexpected kind). Structural for that
      field.
    * ``ScalarDecodeError``: a single scalar could not be decoded. Item-level;
      callers recover locally by dropping the item or leaving a field absent.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class StatsDecodingError(DomainError):
    """Base class for statistics payload decoding failures."""

    code = "STATS_DECODING_ERROR"


class StructuralDecodeError(StatsDecodingError):
    """Payload root does not have the shape the response family requires."""

    code = "STRUCTURAL_DECODE_ERROR"


class ShapeViolationError(StructuralDecodeError):
    """Expected a mapping (or the empty-array placeholder) and got something else."""

    code = "SHAPE_VIOLATION"


class ScalarDecodeError(StatsDecodingError):
    """A single scalar value could not be decoded into its canonical type."""

    code = "SCALAR_DECODE_ERROR"


class PeriodKeyError(ScalarDecodeError):
    """A ``YYYY-MM`` period key is malformed or has an out-of-range month."""

    code = "PERIOD_KEY_ERROR"
