# src/stats_normalizer/infrastructure/observability/metrics.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Decode observability helpers and Prometheus metrics.

Exports
-------
Core collectors (names are part of the public contract and must remain stable):

* ``stats_normalizer_decode_total`` (Counter; ``family``, ``outcome``)
* ``stats_normalizer_decode_latency_seconds`` (Histogram; ``family``)
* ``stats_normalizer_dropped_items_total`` (Counter; ``family``, ``reason``)

Helpers:

* :func:`observe_decode` – context manager timing one decode and recording
  its outcome.
* :func:`record_dropped_items` – count item-level misses absorbed by a mapper.

Design
------
Collectors are resolved lazily against the *current* default registry
(:data:`prometheus_client.REGISTRY`). If a collector with the same name is
already registered there, the existing instance is reused instead of
registering a duplicate, which keeps tests that swap the registry and module
re-imports safe.
"""

from __future__ import annotations

from collections.abc import Generator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry

__all__ = [
    "DecodeObservation",
    "get_decode_latency_seconds",
    "get_decode_total",
    "get_dropped_items_total",
    "observe_decode",
    "record_dropped_items",
]

_BUCKETS: Final[tuple[float, ...]] = (
    0.0005,
    0.001,
    0.0025,
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    1.000,
)


def _get_or_create_histogram(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Histogram:
    """Return a histogram bound to the current default registry.

    Args:
        name: Metric name.
        doc: Human-readable metric description.
        labelnames: Optional iterable of label names.

    Returns:
        A :class:`Histogram` bound to the current :data:`prom.REGISTRY`.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})  # internal but stable
    existing = mapping.get(name)
    if isinstance(existing, Histogram):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Histogram(name, doc, labels, buckets=_BUCKETS, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = getattr(registry, "_names_to_collectors", {}).get(name)
            if isinstance(again, Histogram):
                return again
        raise


def _get_or_create_counter(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Counter:
    """Return a counter bound to the current default registry.

    Mirrors :func:`_get_or_create_histogram` for :class:`Counter` collectors.
    Counter series are registered under the ``_total`` suffix, so both names
    are checked.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    base = name.removesuffix("_total")
    for candidate in (name, base, f"{base}_total"):
        existing = mapping.get(candidate)
        if isinstance(existing, Counter):
            return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Counter(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = getattr(registry, "_names_to_collectors", {}).get(name)
            if isinstance(again, Counter):
                return again
        raise


def get_decode_total() -> Counter:
    """Counter of decode attempts by response family and outcome."""
    return _get_or_create_counter(
        "stats_normalizer_decode_total",
        "Statistics payload decodes by family and outcome.",
        labelnames=("family", "outcome"),
    )


def get_decode_latency_seconds() -> Histogram:
    """Histogram of decode latency by response family."""
    return _get_or_create_histogram(
        "stats_normalizer_decode_latency_seconds",
        "Latency of statistics payload decodes (seconds).",
        labelnames=("family",),
    )


def get_dropped_items_total() -> Counter:
    """Counter of item-level misses absorbed during decode."""
    return _get_or_create_counter(
        "stats_normalizer_dropped_items_total",
        "Items dropped or left absent while decoding statistics payloads.",
        labelnames=("family", "reason"),
    )


def record_dropped_items(family: str, reason: str, count: int) -> None:
    """Increment the dropped-items counter when ``count`` is positive."""
    if count > 0:
        get_dropped_items_total().labels(family=family, reason=reason).inc(count)


@dataclass
class DecodeObservation:
    """Mutable outcome holder yielded by :func:`observe_decode`.

    Attributes:
        outcome: ``"success"`` unless the caller marks the decode otherwise.
    """

    outcome: str = "success"


@contextmanager
def observe_decode(family: str) -> Generator[DecodeObservation, None, None]:
    """Time one decode and record its outcome.

    Usage::

        with observe_decode("site_metrics") as obs:
            try:
                ...
            except StructuralDecodeError:
                obs.outcome = "structural_failure"

    An exception escaping the block is recorded as ``"error"`` and re-raised.

    Args:
        family: Response family label.

    Yields:
        A :class:`DecodeObservation` whose ``outcome`` the caller may update.
    """
    obs = DecodeObservation()
    start = perf_counter()
    try:
        yield obs
    except Exception:
        obs.outcome = "error"
        raise
    finally:
        get_decode_latency_seconds().labels(family=family).observe(
            max(perf_counter() - start, 0.0)
        )
        get_decode_total().labels(family=family, outcome=obs.outcome).inc()
