"""Application configuration and settings management."""

from pathlib import Path
from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROOFROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "RoofRoute Planner API"
    api_prefix: str = "/api"
    zip_centroids_file: Path = Field(
        default=PACKAGE_ROOT / "data" / "us_zip_centroids.csv",
        description="Postal code to centroid dataset (zip,latitude,longitude).",
    )
    nominatim_url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Address search endpoint of the external geocoding service.",
    )
    geocoder_user_agent: str = Field(
        default="RoofRoute/1.0 (roof-inspection-app)",
        description="Client identifier sent with every geocoding request.",
    )
    geocoder_country_codes: str = Field(default="us")
    geocode_delay_seconds: float = Field(
        default=1.1,
        ge=0.0,
        description="Minimum delay between outbound geocoding requests (service allows ~1 req/s).",
    )
    geocode_timeout_seconds: float = Field(default=10.0, gt=0.0)
    default_buildings_per_day: int = Field(default=5, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("zip_centroids_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
