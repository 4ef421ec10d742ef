# tests/conftest.py
from __future__ import annotations

import json
from collections.abc import Callable, Generator
from datetime import date
from typing import Any

import prometheus_client as prom
import pytest

from stats_normalizer.adapters.mappers.base import DecodeContext
from stats_normalizer.config.settings import Settings, get_settings
from stats_normalizer.domain.entities.dynamic_value import DynamicValue, freeze
from stats_normalizer.domain.enums.period_unit import PeriodUnit

_ENV_KEYS = (
    "STATS_NORMALIZER_ENVIRONMENT",
    "STATS_NORMALIZER_LOG_LEVEL",
    "STATS_NORMALIZER_TIMEZONE",
    "STATS_NORMALIZER_LABEL_SEPARATOR",
    "STATS_NORMALIZER_METRICS_ENABLED",
)


@pytest.fixture(autouse=True)
def _settings_env_isolated(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear STATS_NORMALIZER_* env and the settings cache around every test."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def registry(monkeypatch: pytest.MonkeyPatch) -> prom.CollectorRegistry:
    """Fresh Prometheus default registry for the duration of one test."""
    fresh = prom.CollectorRegistry()
    monkeypatch.setattr(prom, "REGISTRY", fresh)
    return fresh


@pytest.fixture()
def settings() -> Settings:
    """Deterministic settings with metrics off."""
    return Settings(timezone="UTC", label_separator=" / ", metrics_enabled=False)


@pytest.fixture()
def make_context() -> Callable[..., DecodeContext]:
    """Factory for decode contexts anchored at 2024-03-01."""

    def _make(unit: PeriodUnit = PeriodUnit.DAY, **kwargs: Any) -> DecodeContext:
        kwargs.setdefault("anchor_date", date(2024, 3, 1))
        return DecodeContext(unit=unit, **kwargs)

    return _make


@pytest.fixture()
def payload() -> Callable[[Any], DynamicValue]:
    """Round-trip a Python literal through JSON so tests see parser output."""

    def _build(value: Any) -> DynamicValue:
        return freeze(json.loads(json.dumps(value)))

    return _build
