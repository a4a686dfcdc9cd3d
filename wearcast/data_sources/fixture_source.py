"""Serve a saved Open-Meteo response from disk instead of calling the API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from wearcast.data_sources.base import TemperatureDataSource
from wearcast.data_sources.open_meteo_client import WeatherFetchError, parse_open_meteo_payload
from wearcast.domain import WeatherSeries
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/fixture")


@dataclass
class FixtureTemperatureDataSource(TemperatureDataSource):
    """Read one Open-Meteo JSON payload and ignore the requested coordinates.

    Useful for offline development and demos. The file is re-read on every
    call so edits show up on the next request.
    """

    path: Path

    @classmethod
    def from_path(cls, path: str | Path) -> "FixtureTemperatureDataSource":
        """Build a source for ``path``; fails early when the file is missing."""
        resolved = Path(path)
        if not resolved.is_file():
            raise ValueError(f"fixture file not found: {resolved}")
        return cls(path=resolved)

    def fetch_temperature_series(self, latitude: float, longitude: float, **_kwargs) -> WeatherSeries:
        """Parse the fixture payload into a WeatherSeries."""
        logger.info("Loading fixture payload", extra={"path": str(self.path)})
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise WeatherFetchError("failed to read weather fixture") from exc
        return parse_open_meteo_payload(payload)
