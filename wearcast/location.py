"""Location providers used by the report orchestrator.

A provider is anything with an awaitable ``get_location()`` that returns
Coordinates or raises LocationError with a typed reason. Falling back to a
default location is the orchestrator's job, not the provider's.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 position with optional accuracy in metres."""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class LocationErrorReason(str, Enum):
    """Why a location could not be obtained."""
    DENIED = "denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


class LocationError(Exception):
    """Raised by a provider when it cannot produce coordinates."""

    def __init__(self, reason: LocationErrorReason, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or f"location {reason.value}")


class LocationProvider(Protocol):
    """Interface for anything that can report where the user is."""

    async def get_location(self) -> Coordinates:
        """Return the user's coordinates or raise LocationError."""
        ...


@dataclass
class FixedLocationProvider(LocationProvider):
    """Return coordinates that are already known, e.g. sent by a browser client."""

    coordinates: Coordinates

    async def get_location(self) -> Coordinates:
        """Return the configured coordinates."""
        return self.coordinates


@dataclass
class NoLocationProvider(LocationProvider):
    """Always fail with the given reason; used when the client sent no position."""

    reason: LocationErrorReason = LocationErrorReason.UNAVAILABLE

    async def get_location(self) -> Coordinates:
        """Raise LocationError with the configured reason."""
        raise LocationError(self.reason)


@dataclass(frozen=True)
class ResolvedLocation:
    """Coordinates chosen for a report along with how they were obtained."""
    label: str
    coordinates: Coordinates
    is_default: bool
