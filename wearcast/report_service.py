"""Sequence location lookup, data fetch and derivation into a temperature report."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Sequence

from wearcast import config
from wearcast.advisor import DEFAULT_ADVICE, clothing_advice
from wearcast.comparison_engine import (
    average_daily_high_low,
    build_comparisons,
    latest_daily_high_low,
    latest_hourly,
)
from wearcast.data_sources import TemperatureDataSource, build_data_source
from wearcast.domain import (
    ADVICE_REFERENCE_DAYS,
    COMPARISON_PERIODS,
    ComparisonPeriod,
    TemperatureReport,
    WeatherSeries,
)
from wearcast.location import (
    Coordinates,
    LocationError,
    LocationErrorReason,
    LocationProvider,
    ResolvedLocation,
)
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="report_service")

CURRENT_LOCATION_LABEL = "current location"


@dataclass(frozen=True)
class LocatedReport:
    """A report together with the location it was computed for."""
    location: ResolvedLocation
    report: TemperatureReport


def build_temperature_report(
    series: WeatherSeries,
    periods: Sequence[ComparisonPeriod] = COMPARISON_PERIODS,
) -> TemperatureReport:
    """Derive current reading, comparisons and advice from one series.

    Pure and idempotent; EmptySeries/EmptyWindow propagate unchanged.
    Without daily data there is no "today", the daily averages are left
    empty and only the default advice is given.
    """
    current = latest_hourly(series)
    comparisons = build_comparisons(series, current, periods)
    if not series.has_daily_data:
        return TemperatureReport(current_temperature=current, today=None,
                                 comparisons=comparisons, advice=[DEFAULT_ADVICE])

    today = latest_daily_high_low(series)
    reference = average_daily_high_low(series, ADVICE_REFERENCE_DAYS)
    advice = clothing_advice(today, reference, current)
    return TemperatureReport(
        current_temperature=current,
        today=today,
        comparisons=comparisons,
        advice=advice,
    )


def default_location(settings: config.Settings | None = None) -> ResolvedLocation:
    """The configured fallback location."""
    settings = settings or config.settings
    return ResolvedLocation(
        label=f"{settings.default_location_name} (default)",
        coordinates=Coordinates(latitude=settings.default_latitude, longitude=settings.default_longitude),
        is_default=True,
    )


async def resolve_location(
    provider: LocationProvider,
    *,
    default: ResolvedLocation,
    timeout: float,
) -> ResolvedLocation:
    """Ask ``provider`` for coordinates, falling back to ``default`` on any location failure."""
    try:
        coords = await asyncio.wait_for(provider.get_location(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Location lookup timed out; using default location",
                       extra={"reason": LocationErrorReason.TIMEOUT.value, "default": default.label})
        return default
    except LocationError as exc:
        logger.warning("Location lookup failed; using default location",
                       extra={"reason": exc.reason.value, "default": default.label})
        return default
    except Exception as exc:
        logger.warning("Location provider error; using default location",
                       extra={"error": repr(exc), "default": default.label})
        return default

    return ResolvedLocation(label=CURRENT_LOCATION_LABEL, coordinates=coords, is_default=False)


async def load_temperature_report(
    provider: LocationProvider,
    data_source: TemperatureDataSource | None = None,
    *,
    settings: config.Settings | None = None,
) -> LocatedReport:
    """Resolve a location, fetch its temperature history and build the report.

    Nothing is cached between calls, so calling this again is a retry.
    Fetch and derivation errors propagate to the caller.
    """
    settings = settings or config.settings
    ds = data_source or build_data_source(settings)

    location = await resolve_location(
        provider,
        default=default_location(settings),
        timeout=settings.location_timeout_seconds,
    )
    coords = location.coordinates
    logger.info(
        "Loading temperature report",
        extra={"location": location.label, "latitude": coords.latitude, "longitude": coords.longitude},
    )

    # the fetch is blocking I/O
    series = await asyncio.to_thread(
        ds.fetch_temperature_series,
        coords.latitude,
        coords.longitude,
        timezone=settings.timezone,
        lookback_days=settings.lookback_days,
        timeout=settings.request_timeout_seconds,
    )

    report = build_temperature_report(series)
    logger.info(
        "Built temperature report",
        extra={"current": report.current_temperature, "advice_count": len(report.advice)},
    )
    return LocatedReport(location=location, report=report)
