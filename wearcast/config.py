"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wearcast.domain import COMPARISON_PERIODS
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")

MIN_LOOKBACK_DAYS = max(p.days or 0 for p in COMPARISON_PERIODS)


class Settings(BaseSettings):
    """Environment-driven configuration for the wearcast service."""
    model_config = SettingsConfigDict(env_prefix="WEARCAST_", extra="ignore")

    data_source: str = "open_meteo"  # options: open_meteo, fixture
    fixture_path: str | None = None
    timezone: str = "Asia/Tokyo"
    lookback_days: int = 7
    default_latitude: float = 35.6762
    default_longitude: float = 139.6503
    default_location_name: str = "Tokyo"
    location_timeout_seconds: float = 10.0
    request_timeout_seconds: float = 10.0
    http_cache_seconds: int = 900
    api_key: str | None = None
    log_level: str = "INFO"

    @field_validator("lookback_days", mode="after")
    @classmethod
    def require_history(cls, v: int) -> int:
        """The longest comparison period must fit in the fetched history."""
        if v < MIN_LOOKBACK_DAYS:
            raise ValueError(f"lookback_days must be at least {MIN_LOOKBACK_DAYS}")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return str(v).upper()


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
