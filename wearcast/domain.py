"""Domain vocabulary and schemas for temperature comparisons and clothing advice.

This module defines the payloads that flow from the raw weather series through
the comparison engine and the advisor to the HTTP layer: the series itself,
high/low pairs, change tiers, comparison periods and the final report. No
derivation logic lives here.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict


class _FrozenModel(BaseModel):
    """Base model that is immutable and rejects unknown fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class WeatherSeries(_FrozenModel):
    """Hourly and daily Celsius temperatures for one location, oldest first.

    The last hourly sample is "now" and the last daily pair is "today". Lengths
    are not validated here; callers must supply enough history for the windows
    they ask for.
    """
    hourly_temperatures: Tuple[float, ...]
    daily_max: Tuple[float, ...]
    daily_min: Tuple[float, ...]
    hourly_times: Tuple[datetime, ...] | None = None
    daily_dates: Tuple[date, ...] | None = None
    timezone: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def has_daily_data(self) -> bool:
        """True when both daily sequences hold at least one reading."""
        return bool(self.daily_max) and bool(self.daily_min)


class HighLow(_FrozenModel):
    """A high/low pair, either for one day or averaged over several days.

    ``high >= low`` is expected but not enforced.
    """
    high: float
    low: float

    @property
    def spread(self) -> float:
        """Distance between the high and the low."""
        return self.high - self.low


class ChangeTier(str, Enum):
    """Severity bucket for a temperature change."""
    MINIMAL = "minimal"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"
    EXTREME = "extreme"


class ChangeAssessment(_FrozenModel):
    """Signed change in Celsius with its tier and a readable direction label."""
    magnitude: float
    tier: ChangeTier
    direction_label: str


class ComparisonPeriod(_FrozenModel):
    """Trailing window used to compare the current temperature against the past."""
    hours: int
    days: int | None = None
    label: str


COMPARISON_PERIODS: Tuple[ComparisonPeriod, ...] = (
    ComparisonPeriod(hours=24, days=1, label="yesterday"),
    ComparisonPeriod(hours=72, days=3, label="3 days ago"),
    ComparisonPeriod(hours=168, days=7, label="1 week ago"),
)

# clothing advice always compares today against the trailing 3-day average
ADVICE_REFERENCE_DAYS = 3


class ComparisonRecord(_FrozenModel):
    """Comparison of the current temperature against one trailing period."""
    period_label: str
    hours: int
    days: int | None = None
    average_temperature: float
    average_high: float | None = None
    average_low: float | None = None
    change: float
    tier: ChangeTier
    direction_label: str

    @staticmethod
    def _fmt(val: float | None) -> str:
        """Format a Celsius value to one decimal place or return an empty string."""
        if val is None:
            return ""
        return f"{val:.1f} °C"

    def to_display_strings(self) -> dict:
        """Return a display-friendly dict for API serialization."""
        return {
            "period": self.period_label,
            "average_temperature": self._fmt(self.average_temperature),
            "average_high": self._fmt(self.average_high),
            "average_low": self._fmt(self.average_low),
            "change": f"{self.change:+.1f} °C",
            "label": self.direction_label,
        }


class TemperatureReport(_FrozenModel):
    """Everything derived from one weather series."""
    current_temperature: float
    today: HighLow | None = None
    comparisons: List[ComparisonRecord]
    advice: List[str]
