"""Interfaces and helpers for temperature data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from wearcast.domain import WeatherSeries


class TemperatureDataSource(Protocol):
    """Interface for anything that can provide hourly and daily temperature history."""

    def fetch_temperature_series(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str = "Asia/Tokyo",
        lookback_days: int = 7,
        timeout: float = 10.0,
    ) -> WeatherSeries:
        """Return the temperature history ending now."""
        ...


@dataclass
class CallableTemperatureDataSource(TemperatureDataSource):
    """Wrap a fetch callable so it can be swapped for different backends."""

    temperature_series: Callable[..., WeatherSeries]

    def fetch_temperature_series(self, *args, **kwargs) -> WeatherSeries:
        """Delegate to the configured fetch callable."""
        return self.temperature_series(*args, **kwargs)
