"""Deterministic comparison logic over a weather series.

Converts a raw WeatherSeries into current/latest readings, trailing-window
averages and tiered change assessments. All functions are pure: they never
cache, never mutate their inputs and can be called repeatedly or from several
threads at once. Failures (EmptySeries, EmptyWindow) propagate to the caller.
"""

from __future__ import annotations

from typing import List, Sequence, TypeVar

from wearcast.domain import (
    COMPARISON_PERIODS,
    ChangeAssessment,
    ChangeTier,
    ComparisonPeriod,
    ComparisonRecord,
    HighLow,
    WeatherSeries,
)
from wearcast.exceptions import EmptySeries, EmptyWindow
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="comparison_engine")

T = TypeVar("T")

# (exclusive upper bound, tier, label when warmer, label when colder)
_CHANGE_TIERS = (
    (2.0, ChangeTier.MINIMAL, "about the same", "about the same"),
    (5.0, ChangeTier.MODERATE, "slightly warmer", "slightly colder"),
    (8.0, ChangeTier.SIGNIFICANT, "warmer", "colder"),
)
_EXTREME_LABELS = ("much warmer", "much colder")


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def latest_hourly(series: WeatherSeries) -> float:
    """Return the most recent hourly temperature (the current reading)."""
    temps = series.hourly_temperatures
    if not temps:
        raise EmptySeries("hourly_temperatures")
    return temps[-1]


def latest_daily_high_low(series: WeatherSeries) -> HighLow:
    """Return today's high/low, i.e. the last daily (max, min) pair."""
    if not series.daily_max:
        raise EmptySeries("daily_max")
    if not series.daily_min:
        raise EmptySeries("daily_min")
    return HighLow(high=series.daily_max[-1], low=series.daily_min[-1])


def window_slice(sequence: Sequence[T], count_back: int) -> Sequence[T]:
    """Return up to ``count_back`` samples immediately preceding the latest one.

    The latest sample itself is never included. When there is less history
    than requested the window starts at index 0.
    """
    if count_back < 0:
        raise ValueError(f"count_back must be >= 0, got {count_back}")
    current_index = max(0, len(sequence) - 1)
    start_index = max(0, current_index - count_back)
    return sequence[start_index:current_index]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def average(values: Sequence[float], *, name: str = "window", count_back: int | None = None) -> float:
    """Arithmetic mean of ``values``; raises EmptyWindow when there are none."""
    if len(values) == 0:
        raise EmptyWindow(name, count_back)
    return sum(values) / len(values)


def average_hourly(series: WeatherSeries, hours_ago: int) -> float:
    """Mean hourly temperature over the ``hours_ago`` samples before now."""
    window = window_slice(series.hourly_temperatures, hours_ago)
    return average(window, name="hourly_temperatures", count_back=hours_ago)


def average_daily_high_low(series: WeatherSeries, days_ago: int) -> HighLow:
    """Mean daily high and mean daily low over the ``days_ago`` days before today."""
    highs = window_slice(series.daily_max, days_ago)
    lows = window_slice(series.daily_min, days_ago)
    return HighLow(
        high=average(highs, name="daily_max", count_back=days_ago),
        low=average(lows, name="daily_min", count_back=days_ago),
    )


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def relative_change(current: float, past: float) -> float:
    """Signed change from ``past`` to ``current`` in Celsius."""
    return current - past


def classify_change(delta: float) -> ChangeAssessment:
    """Bucket a signed change into a tier using half-open [lower, upper) ranges."""
    magnitude = abs(delta)
    for upper, tier, warmer, colder in _CHANGE_TIERS:
        if magnitude < upper:
            label = warmer if delta > 0 else colder
            return ChangeAssessment(magnitude=delta, tier=tier, direction_label=label)
    warmer, colder = _EXTREME_LABELS
    return ChangeAssessment(
        magnitude=delta,
        tier=ChangeTier.EXTREME,
        direction_label=warmer if delta > 0 else colder,
    )


def compare_period(series: WeatherSeries, current: float, period: ComparisonPeriod) -> ComparisonRecord:
    """Compare ``current`` against the trailing averages of one period."""
    avg_temp = average_hourly(series, period.hours)
    has_days = period.days is not None and series.has_daily_data
    avg_high_low = average_daily_high_low(series, period.days) if has_days else None
    change = relative_change(current, avg_temp)
    assessment = classify_change(change)
    logger.debug(
        "Compared period",
        extra={"period": period.label, "average": avg_temp, "change": change, "tier": assessment.tier.value},
    )
    return ComparisonRecord(
        period_label=period.label,
        hours=period.hours,
        days=period.days,
        average_temperature=avg_temp,
        average_high=avg_high_low.high if avg_high_low else None,
        average_low=avg_high_low.low if avg_high_low else None,
        change=change,
        tier=assessment.tier,
        direction_label=assessment.direction_label,
    )


def build_comparisons(
    series: WeatherSeries,
    current: float | None = None,
    periods: Sequence[ComparisonPeriod] = COMPARISON_PERIODS,
) -> List[ComparisonRecord]:
    """Compare the current temperature against every period, in order."""
    if current is None:
        current = latest_hourly(series)
    return [compare_period(series, current, period) for period in periods]
