"""Data source factories for plugging different temperature backends."""

from .base import CallableTemperatureDataSource, TemperatureDataSource
from .factory import build_data_source
from .fixture_source import FixtureTemperatureDataSource
from .open_meteo_client import (
    WeatherFetchError,
    fetch_temperature_series,
    parse_open_meteo_payload,
)

__all__ = [
    "build_data_source",
    "FixtureTemperatureDataSource",
    "TemperatureDataSource",
    "CallableTemperatureDataSource",
    "WeatherFetchError",
    "fetch_temperature_series",
    "parse_open_meteo_payload",
]
