from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import date
from pathlib import Path

import prometheus_client as prom
import pytest

from stats_normalizer import (
    NormalizeStatsRequest,
    NormalizeStatsResponseUseCase,
    PeriodUnit,
    ResponseFamily,
    decode_ad_earnings,
    decode_archive,
    decode_city_views,
    decode_post_details,
    decode_region_views,
    decode_site_metrics,
    decode_utm_metrics,
)
from stats_normalizer.config.settings import Settings
from stats_normalizer.domain.entities.composite_metric import UTMMetrics
from stats_normalizer.domain.entities.time_series import SiteMetricsResponse

_SITE_BODY = json.dumps({"fields": ["period", "views"], "data": [["2024-01-01", 3]]})


def test_decodes_json_text(settings: Settings) -> None:
    out = decode_site_metrics(_SITE_BODY, PeriodUnit.DAY, date(2024, 1, 31), settings=settings)

    assert isinstance(out, SiteMetricsResponse)
    assert out.period_end_date == date(2024, 1, 31)
    assert out.points[0].get("views") == 3


def test_accepts_parsed_tree(settings: Settings) -> None:
    out = decode_utm_metrics({"top_utm_values": {"google": 50, "bing": 10}}, settings=settings)

    assert isinstance(out, UTMMetrics)
    assert [m.count for m in out.metrics] == [50, 10]


@pytest.mark.parametrize(
    "raw",
    ["{not json", b"\xff\xfe", "[]", "null", '{"fields": ["views"], "data": []}'],
)
def test_structural_failure_returns_none(
    raw: str | bytes, settings: Settings, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        out = decode_site_metrics(raw, PeriodUnit.DAY, settings=settings)

    assert out is None
    record = next(r for r in caplog.records if r.getMessage() == "Unusable stats payload")
    assert record.levelno == logging.WARNING
    assert record.extra["family"] == "site_metrics"  # type: ignore[attr-defined]
    assert record.extra["reason"]  # type: ignore[attr-defined]


def test_unsupported_python_object_is_structural(settings: Settings) -> None:
    assert decode_archive({"summary": {"pages": [object()]}}, PeriodUnit.DAY, settings=settings) is None


def test_deeply_nested_text_is_structural(settings: Settings, caplog: pytest.LogCaptureFixture) -> None:
    raw = "[" * 100_000 + "]" * 100_000

    with caplog.at_level(logging.WARNING):
        out = decode_site_metrics(raw, PeriodUnit.DAY, settings=settings)

    assert out is None
    record = next(r for r in caplog.records if r.getMessage() == "Unusable stats payload")
    assert record.extra["reason"] == "invalid_json"  # type: ignore[attr-defined]


def test_deeply_nested_tree_is_structural(settings: Settings) -> None:
    nested: list[object] = []
    for _ in range(100_000):
        nested = [nested]

    assert decode_archive({"summary": {"pages": nested}}, PeriodUnit.DAY, settings=settings) is None


def test_foreign_dotenv_keys_do_not_break_default_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / ".env").write_text(
        "DATABASE_URL=postgres://localhost/app\nSECRET_KEY=s3cret\n"
        "STATS_NORMALIZER_METRICS_ENABLED=false\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    out = decode_site_metrics(_SITE_BODY, PeriodUnit.DAY, date(2024, 1, 31))

    assert isinstance(out, SiteMetricsResponse)
    assert out.points[0].get("views") == 3


@pytest.mark.parametrize(
    "decode",
    [decode_post_details, decode_ad_earnings, decode_utm_metrics],
)
def test_every_family_rejects_an_empty_object(
    decode: Callable[..., object], settings: Settings
) -> None:
    assert decode("{}", settings=settings) is None


def test_location_families_share_shape(settings: Settings) -> None:
    body = {"summary": {"views": [{"location": "Oslo", "views": 2, "country_code": "NO"}]}}

    city = decode_city_views(body, PeriodUnit.DAY, settings=settings)
    region = decode_region_views(body, PeriodUnit.DAY, settings=settings)

    assert city == region
    assert city is not None
    assert city.items[0].label == "Oslo"


def test_anchor_defaults_to_today_in_configured_zone(settings: Settings) -> None:
    out = decode_site_metrics(_SITE_BODY, PeriodUnit.DAY, settings=settings)

    assert out is not None
    assert isinstance(out.period_end_date, date)


def test_separator_from_settings() -> None:
    settings = Settings(label_separator=" > ", metrics_enabled=False)

    out = decode_utm_metrics({"top_utm_values": {'["a","b"]': 1}}, settings=settings)

    assert out is not None
    assert out.metrics[0].label == "a > b"


def test_records_outcome_metrics(registry: prom.CollectorRegistry) -> None:
    use_case = NormalizeStatsResponseUseCase(settings=Settings(metrics_enabled=True))

    ok = use_case.execute(
        NormalizeStatsRequest(family=ResponseFamily.SITE_METRICS, payload=_SITE_BODY)
    )
    bad = use_case.execute(
        NormalizeStatsRequest(
            family=ResponseFamily.SITE_METRICS,
            payload='{"fields": ["period", "views"], "data": [["bad", 1]], "x": 1}',
        )
    )
    failed = use_case.execute(NormalizeStatsRequest(family=ResponseFamily.SITE_METRICS, payload="[]"))

    assert ok is not None
    assert bad is not None and bad.points == ()
    assert failed is None

    def sample(name: str, **labels: str) -> float | None:
        return registry.get_sample_value(name, labels)

    assert sample("stats_normalizer_decode_total", family="site_metrics", outcome="success") == 2.0
    assert (
        sample(
            "stats_normalizer_decode_total",
            family="site_metrics",
            outcome="structural_failure",
        )
        == 1.0
    )
    assert sample("stats_normalizer_decode_latency_seconds_count", family="site_metrics") == 3.0
    assert (
        sample("stats_normalizer_dropped_items_total", family="site_metrics", reason="row") == 1.0
    )


def test_metrics_disabled_records_nothing(registry: prom.CollectorRegistry, settings: Settings) -> None:
    decode_site_metrics(_SITE_BODY, PeriodUnit.DAY, settings=settings)

    assert (
        registry.get_sample_value(
            "stats_normalizer_decode_total", {"family": "site_metrics", "outcome": "success"}
        )
        is None
    )


def test_unknown_family_raises_key_error(settings: Settings) -> None:
    use_case = NormalizeStatsResponseUseCase(settings=settings, mappers={})

    with pytest.raises(KeyError):
        use_case.execute(NormalizeStatsRequest(family=ResponseFamily.ARCHIVE, payload="{}"))
