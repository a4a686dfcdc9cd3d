"""Helpers for fetching temperature history from the Open-Meteo forecast API."""
from __future__ import annotations

import datetime as dt
from typing import Any, List, Mapping, Optional
from zoneinfo import ZoneInfo

import requests
import requests_cache
from retry_requests import retry

from wearcast.config import settings
from wearcast.domain import WeatherSeries
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag='open_meteo_client')

cache_session = requests_cache.CachedSession('.cache', expire_after=settings.http_cache_seconds)
session = retry(cache_session, retries=5, backoff_factor=0.2)

OPEN_METEO_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"

HOURLY_VARS = ["temperature_2m"]
DAILY_VARS = ["temperature_2m_max", "temperature_2m_min"]

EXPECTED_TEMPERATURE_UNIT = "°C"


class WeatherFetchError(RuntimeError):
    """Raised when weather data cannot be fetched or the payload is unusable."""


def _iso_to_dt_with_tz(s: str, tz_name: str) -> dt.datetime:
    """Interpret Open-Meteo local time string as being in tz_name."""
    naive = dt.datetime.fromisoformat(s)
    # Treat the given timestamp as local time in tz_name
    return naive.replace(tzinfo=ZoneInfo(tz_name))


def _warn_on_unexpected_units(units: Optional[Mapping[str, str]], fields: List[str], *, context: str) -> None:
    """Log a warning if Open-Meteo returns temperatures in anything but Celsius."""
    if not units:
        return
    for field in fields:
        actual = units.get(field)
        if actual and actual != EXPECTED_TEMPERATURE_UNIT:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "expected": EXPECTED_TEMPERATURE_UNIT},
            )


def _hourly_samples(hourly: Mapping[str, Any], tz_name: str, now: dt.datetime | None):
    """Return (times, temperatures) with null readings and future hours removed."""
    temps = hourly["temperature_2m"]
    raw_times = hourly.get("time") or []
    if len(raw_times) != len(temps):
        # No usable timestamps; keep the readings as they are.
        logger.debug("Hourly times missing or misaligned; skipping future trim",
                     extra={"times": len(raw_times), "temperatures": len(temps)})
        return None, tuple(float(t) for t in temps if t is not None)

    times: List[dt.datetime] = []
    values: List[float] = []
    dropped_future = 0
    for raw_time, temp in zip(raw_times, temps):
        if temp is None:
            continue
        stamp = _iso_to_dt_with_tz(raw_time, tz_name)
        if now is not None and stamp > now:
            dropped_future += 1
            continue
        times.append(stamp)
        values.append(float(temp))

    if dropped_future:
        logger.debug("Dropped forecast hours after now", extra={"dropped": dropped_future})
    return tuple(times), tuple(values)


def _daily_samples(daily: Mapping[str, Any]):
    """Return (dates, highs, lows), skipping days where either reading is null."""
    highs = daily["temperature_2m_max"]
    lows = daily["temperature_2m_min"]
    if len(highs) != len(lows):
        raise ValueError(f"daily max/min length mismatch: {len(highs)} != {len(lows)}")
    raw_dates = daily.get("time")
    if raw_dates and len(raw_dates) != len(highs):
        raise ValueError(f"daily time/temperature length mismatch: {len(raw_dates)} != {len(highs)}")
    raw_dates = raw_dates or [None] * len(highs)

    dates: List[dt.date] = []
    out_highs: List[float] = []
    out_lows: List[float] = []
    for raw_date, high, low in zip(raw_dates, highs, lows):
        if high is None or low is None:
            continue
        if raw_date is not None:
            dates.append(dt.date.fromisoformat(raw_date))
        out_highs.append(float(high))
        out_lows.append(float(low))

    return (tuple(dates) if len(dates) == len(out_highs) else None), tuple(out_highs), tuple(out_lows)


def parse_open_meteo_payload(payload: Mapping[str, Any], *, now: dt.datetime | None = None) -> WeatherSeries:
    """Convert an Open-Meteo forecast response into a WeatherSeries.

    Hourly samples stamped after ``now`` are discarded so that the latest
    hourly reading is the current one. When ``now`` is omitted the current
    wall-clock time in the payload's timezone is used.
    """
    tz_name = payload.get("timezone") or "UTC"
    if now is None:
        now = dt.datetime.now(ZoneInfo(tz_name))

    try:
        hourly = payload["hourly"]
        daily = payload["daily"]
        _warn_on_unexpected_units(payload.get("hourly_units"), HOURLY_VARS, context="hourly")
        _warn_on_unexpected_units(payload.get("daily_units"), DAILY_VARS, context="daily")
        hourly_times, hourly_temps = _hourly_samples(hourly, tz_name, now)
        daily_dates, daily_max, daily_min = _daily_samples(daily)
    except (KeyError, TypeError, ValueError) as exc:
        logger.error("Malformed Open-Meteo payload", extra={"error": repr(exc)})
        raise WeatherFetchError("failed to parse weather data") from exc

    return WeatherSeries(
        hourly_temperatures=hourly_temps,
        daily_max=daily_max,
        daily_min=daily_min,
        hourly_times=hourly_times,
        daily_dates=daily_dates,
        timezone=tz_name,
        latitude=payload.get("latitude"),
        longitude=payload.get("longitude"),
    )


def fetch_temperature_series(
    latitude: float,
    longitude: float,
    *,
    timezone: str = "Asia/Tokyo",
    lookback_days: int = 7,
    timeout: float = 10.0,
    now: dt.datetime | None = None,
) -> WeatherSeries:
    """Fetch `lookback_days` of history up to today (hourly and daily) for the given coordinates."""
    now = now or dt.datetime.now(ZoneInfo(timezone))
    end_date = now.date()
    start_date = end_date - dt.timedelta(days=lookback_days)

    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(HOURLY_VARS),
        "daily": ",".join(DAILY_VARS),
        "timezone": timezone,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
    }

    logger.info(
        "Fetching temperature history",
        extra={"latitude": latitude, "longitude": longitude, "start_date": params["start_date"],
               "end_date": params["end_date"], "timezone": timezone},
    )

    try:
        resp = session.get(OPEN_METEO_WEATHER_URL, params=params, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as exc:
        logger.error("Open-Meteo request failed", extra={"error": str(exc)})
        raise WeatherFetchError("failed to fetch weather data") from exc

    series = parse_open_meteo_payload(data, now=now)
    logger.info(
        "Fetched temperature history",
        extra={"hourly_count": len(series.hourly_temperatures), "daily_count": len(series.daily_max)},
    )
    return series
