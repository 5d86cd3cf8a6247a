import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


class Settings(BaseModel):
    google_maps_api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_MAPS_API_KEY", "")
    )
    # Seconds to wait on any single Google Maps request
    maps_request_timeout: float = Field(
        default_factory=lambda: _env_float("MAPS_REQUEST_TIMEOUT", 10.0)
    )
    # Pause between sequential geocoding calls in a batch
    geocode_delay_seconds: float = Field(
        default_factory=lambda: _env_float("GEOCODE_DELAY_SECONDS", 0.1)
    )
    geocode_region_hint: str = Field(
        default_factory=lambda: os.getenv("GEOCODE_REGION_HINT", "")
    )
    photo_max_width: int = Field(
        default_factory=lambda: int(_env_float("PHOTO_MAX_WIDTH", 800))
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    frontend_url: str = Field(
        default_factory=lambda: os.getenv("FRONTEND_URL", "http://localhost:3000")
    )


def get_settings() -> Settings:
    return Settings()
