"""Factory helpers for choosing a temperature data source at startup."""

from __future__ import annotations

from wearcast import config
from wearcast.data_sources.base import CallableTemperatureDataSource, TemperatureDataSource
from wearcast.data_sources.open_meteo_client import fetch_temperature_series
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "open_meteo"


def build_data_source(settings: config.Settings | None = None) -> TemperatureDataSource:
    """Instantiate the configured temperature data source."""
    settings = settings or config.settings
    source = (settings.data_source or DEFAULT_SOURCE_NAME).lower()

    if source == "open_meteo":
        logger.info("Using Open-Meteo data source")
        return CallableTemperatureDataSource(temperature_series=fetch_temperature_series)

    if source == "fixture":
        from .fixture_source import FixtureTemperatureDataSource

        path = settings.fixture_path
        if not path:
            raise ValueError("fixture_path must be set for the fixture data source")
        logger.info("Using fixture data source", extra={"path": path})
        return FixtureTemperatureDataSource.from_path(path)

    raise ValueError(f"Unknown data source '{source}'")
