"""HTTP API for temperature comparisons and clothing advice."""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel

from .config import settings
from .data_sources import WeatherFetchError, build_data_source
from .domain import ComparisonRecord, HighLow
from .exceptions import DerivationError
from .location import Coordinates, FixedLocationProvider, LocationProvider, NoLocationProvider
from .report_service import LocatedReport, load_temperature_report
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="wearcast/api")

FETCH_FAILED_MESSAGE = "Could not load temperature data. Please try again."


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header against the api_key setting, if one is configured."""
    if not settings.api_key:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)


class LocationInfo(BaseModel):
    """Where the report was computed for."""
    label: str
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    is_default: bool


class ReportResponse(BaseModel):
    """Temperature report with raw values and display strings."""
    location: LocationInfo
    current_temperature: float
    today: Optional[HighLow] = None
    comparisons: list[ComparisonRecord]
    advice: list[str]
    display: list[dict]


def _location_provider(latitude: float | None, longitude: float | None,
                       accuracy: float | None) -> LocationProvider:
    """Use client-sent coordinates when both are present."""
    if latitude is None or longitude is None:
        return NoLocationProvider()
    return FixedLocationProvider(Coordinates(latitude=latitude, longitude=longitude, accuracy=accuracy))


def _to_response(located: LocatedReport) -> ReportResponse:
    """Convert a LocatedReport into the serialized API shape."""
    coords = located.location.coordinates
    report = located.report
    return ReportResponse(
        location=LocationInfo(
            label=located.location.label,
            latitude=coords.latitude,
            longitude=coords.longitude,
            accuracy=coords.accuracy,
            is_default=located.location.is_default,
        ),
        current_temperature=report.current_temperature,
        today=report.today,
        comparisons=report.comparisons,
        advice=report.advice,
        display=[c.to_display_strings() for c in report.comparisons],
    )


@router.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/report", response_model=ReportResponse)
async def get_report(
    latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    longitude: Optional[float] = Query(default=None, ge=-180, le=180),
    accuracy: Optional[float] = Query(default=None, ge=0),
):
    """Compare the current temperature with recent days and suggest clothing."""
    provider = _location_provider(latitude, longitude, accuracy)
    try:
        located = await load_temperature_report(provider, DATA_SOURCE, settings=settings)
    except (WeatherFetchError, DerivationError) as exc:
        logger.error("Failed to build temperature report", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": FETCH_FAILED_MESSAGE, "retry": True},
        )
    return _to_response(located)
