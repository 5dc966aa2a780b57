"""Application configuration pulled from environment variables via pydantic."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")

VISUAL_CROSSING_TIMELINE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)


class Settings(BaseSettings):
    """Environment-driven configuration for the weather cache gateway."""
    model_config = SettingsConfigDict(env_prefix="WEATHER_", extra="ignore")

    environment: str = "development"
    log_level: str = "INFO"

    upstream_base_url: str = VISUAL_CROSSING_TIMELINE_URL
    api_key: str | None = None
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    cache_redis_url: str | None = None  # unset -> in-memory store
    cache_socket_timeout_seconds: float = Field(default=2.0, gt=0)
    cache_ttl_seconds: int = Field(default=43200, gt=0)  # 12h

    @field_validator("upstream_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()
