# src/stats_normalizer/application/use_cases/normalize_stats_response.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Use Case: Normalize Stats Response

Purpose:
    Single decode boundary for every statistics response family. Accepts raw
    JSON text (or an already-parsed tree), resolves the decode context from
    settings, runs the family's mapper and converts structural failure into
    ``None``.

Layer: application/use_cases

Notes:
    - ``None`` means "this response is unusable"; callers render an empty
      state. Item-level misses never surface here.
    - Structural failures are logged at WARNING with the family and reason.
    - Decode outcome and latency are recorded when metrics are enabled.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, TypeAlias

from stats_normalizer.adapters.mappers.ad_earnings_mapper import AdEarningsMapper
from stats_normalizer.adapters.mappers.archive_mapper import ArchiveBreakdownMapper
from stats_normalizer.adapters.mappers.base import DecodeContext, ResponseMapper
from stats_normalizer.adapters.mappers.location_mapper import (
    CITY_FAMILY,
    REGION_FAMILY,
    LocationBreakdownMapper,
)
from stats_normalizer.adapters.mappers.post_details_mapper import PostDetailsMapper
from stats_normalizer.adapters.mappers.time_series_mapper import (
    AdRevenueMapper,
    SiteMetricsMapper,
)
from stats_normalizer.adapters.mappers.utm_metrics_mapper import UTMMetricsMapper
from stats_normalizer.config.settings import Settings, get_settings
from stats_normalizer.domain.entities.ad_earnings import AdEarnings
from stats_normalizer.domain.entities.breakdown import ArchiveBreakdown, LocationBreakdown
from stats_normalizer.domain.entities.composite_metric import UTMMetrics
from stats_normalizer.domain.entities.dynamic_value import DynamicValue, freeze, parse_json
from stats_normalizer.domain.entities.post_details import PostDetails
from stats_normalizer.domain.entities.time_series import (
    AdRevenueResponse,
    SiteMetricsResponse,
)
from stats_normalizer.domain.enums.period_unit import PeriodUnit
from stats_normalizer.domain.enums.response_family import ResponseFamily
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError
from stats_normalizer.infrastructure.observability.metrics import (
    DecodeObservation,
    observe_decode,
)

logger = logging.getLogger(__name__)

RawPayload: TypeAlias = str | bytes | bytearray | Mapping[str, Any] | list[Any] | None


def default_mappers() -> dict[ResponseFamily, ResponseMapper[Any]]:
    """Return one stateless mapper per response family."""
    return {
        ResponseFamily.SITE_METRICS: SiteMetricsMapper(),
        ResponseFamily.AD_REVENUE: AdRevenueMapper(),
        ResponseFamily.POST_DETAILS: PostDetailsMapper(),
        ResponseFamily.UTM_METRICS: UTMMetricsMapper(),
        ResponseFamily.AD_EARNINGS: AdEarningsMapper(),
        ResponseFamily.CITY_VIEWS: LocationBreakdownMapper(CITY_FAMILY),
        ResponseFamily.REGION_VIEWS: LocationBreakdownMapper(REGION_FAMILY),
        ResponseFamily.ARCHIVE: ArchiveBreakdownMapper(),
    }


@dataclass(frozen=True)
class NormalizeStatsRequest:
    """Input to :class:`NormalizeStatsResponseUseCase`.

    Args:
        family: Response family the payload belongs to.
        payload: JSON text/bytes, or a tree already produced by a JSON parser.
        unit: Granularity the payload was requested with.
        anchor_date: Nominal end date of the request. Defaults to today in
            the configured timezone.
    """

    family: ResponseFamily
    payload: RawPayload
    unit: PeriodUnit = PeriodUnit.DAY
    anchor_date: date | None = None


class NormalizeStatsResponseUseCase:
    """Decode one statistics payload into its family's record.

    Args:
        settings: Configuration; defaults to :func:`get_settings`.
        mappers: Mapper registry; defaults to :func:`default_mappers`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        mappers: Mapping[ResponseFamily, ResponseMapper[Any]] | None = None,
    ) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._mappers = dict(mappers) if mappers is not None else default_mappers()

    def execute(self, request: NormalizeStatsRequest) -> Any | None:
        """Decode ``request.payload``.

        Returns:
            The family's record, or ``None`` if the payload lacks the
            family's minimum shape.

        Raises:
            KeyError: If no mapper is registered for ``request.family``.
        """
        mapper = self._mappers[request.family]
        context = self._context(request)

        if not self._settings.metrics_enabled:
            return self._decode(mapper, request, context, DecodeObservation())

        with observe_decode(request.family.value) as obs:
            return self._decode(mapper, request, context, obs)

    def _context(self, request: NormalizeStatsRequest) -> DecodeContext:
        tz = self._settings.tzinfo
        anchor = request.anchor_date or datetime.now(tz).date()
        return DecodeContext(
            unit=request.unit,
            anchor_date=anchor,
            tz=tz,
            label_separator=self._settings.label_separator,
            metrics_enabled=self._settings.metrics_enabled,
        )

    @staticmethod
    def _decode(
        mapper: ResponseMapper[Any],
        request: NormalizeStatsRequest,
        context: DecodeContext,
        obs: DecodeObservation,
    ) -> Any | None:
        try:
            tree = _load(request.payload)
            return mapper.map(tree, context)
        except StructuralDecodeError as exc:
            obs.outcome = "structural_failure"
            logger.warning(
                "Unusable stats payload",
                extra={
                    "extra": {
                        "family": request.family.value,
                        "reason": str(exc),
                        "code": exc.code,
                        **exc.details,
                    }
                },
            )
            return None


def _load(payload: RawPayload) -> DynamicValue:
    if isinstance(payload, str | bytes | bytearray):
        return parse_json(payload)
    try:
        return freeze(payload)
    except TypeError as exc:
        raise StructuralDecodeError("unsupported_payload", details={"error": str(exc)}) from exc
    except RecursionError as exc:
        raise StructuralDecodeError("invalid_json", details={"error": str(exc)}) from exc


def _run(
    family: ResponseFamily,
    payload: RawPayload,
    unit: PeriodUnit,
    anchor_date: date | None,
    settings: Settings | None,
) -> Any | None:
    use_case = NormalizeStatsResponseUseCase(settings=settings)
    return use_case.execute(
        NormalizeStatsRequest(family=family, payload=payload, unit=unit, anchor_date=anchor_date)
    )


def decode_site_metrics(
    payload: RawPayload,
    unit: PeriodUnit,
    anchor_date: date | None = None,
    *,
    settings: Settings | None = None,
) -> SiteMetricsResponse | None:
    return _run(ResponseFamily.SITE_METRICS, payload, unit, anchor_date, settings)


def decode_ad_revenue(
    payload: RawPayload,
    unit: PeriodUnit,
    anchor_date: date | None = None,
    *,
    settings: Settings | None = None,
) -> AdRevenueResponse | None:
    return _run(ResponseFamily.AD_REVENUE, payload, unit, anchor_date, settings)


def decode_post_details(
    payload: RawPayload, *, settings: Settings | None = None
) -> PostDetails | None:
    return _run(ResponseFamily.POST_DETAILS, payload, PeriodUnit.DAY, None, settings)


def decode_utm_metrics(
    payload: RawPayload, *, settings: Settings | None = None
) -> UTMMetrics | None:
    return _run(ResponseFamily.UTM_METRICS, payload, PeriodUnit.DAY, None, settings)


def decode_ad_earnings(
    payload: RawPayload, *, settings: Settings | None = None
) -> AdEarnings | None:
    return _run(ResponseFamily.AD_EARNINGS, payload, PeriodUnit.MONTH, None, settings)


def decode_city_views(
    payload: RawPayload,
    unit: PeriodUnit,
    anchor_date: date | None = None,
    *,
    settings: Settings | None = None,
) -> LocationBreakdown | None:
    return _run(ResponseFamily.CITY_VIEWS, payload, unit, anchor_date, settings)


def decode_region_views(
    payload: RawPayload,
    unit: PeriodUnit,
    anchor_date: date | None = None,
    *,
    settings: Settings | None = None,
) -> LocationBreakdown | None:
    return _run(ResponseFamily.REGION_VIEWS, payload, unit, anchor_date, settings)


def decode_archive(
    payload: RawPayload,
    unit: PeriodUnit,
    anchor_date: date | None = None,
    *,
    settings: Settings | None = None,
) -> ArchiveBreakdown | None:
    return _run(ResponseFamily.ARCHIVE, payload, unit, anchor_date, settings)
