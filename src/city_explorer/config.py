"""
Application configuration using Pydantic Settings.

All settings are loaded from environment variables or .env file.
Provider keys, staleness windows and the store URL are all configurable.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    url: str = "sqlite+aiosqlite:///./data/city_explorer.db"
    echo: bool = False

    model_config = SettingsConfigDict(env_prefix="DATABASE_")


class APISettings(BaseSettings):
    """FastAPI server settings."""

    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    allowed_origins: str = "*"

    model_config = SettingsConfigDict(env_prefix="API_")

    @property
    def cors_origins(self) -> list[str]:
        """Comma-separated ``API_ALLOWED_ORIGINS`` as a list."""
        if self.allowed_origins.strip() in ("", "*"):
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


class ProviderSettings(BaseSettings):
    """Remote data provider endpoints and credentials."""

    timeout: float = 10.0

    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    geocode_api_key: Optional[str] = None

    weather_url: str = "https://api.darksky.net"
    weather_api_key: Optional[str] = None

    eventbrite_url: str = "https://www.eventbriteapi.com"
    eventbrite_api_key: Optional[str] = None

    movie_url: str = "https://api.themoviedb.org"
    movie_api_key: Optional[str] = None
    movie_image_base: str = "https://image.tmdb.org/t/p/original"

    yelp_url: str = "https://api.yelp.com"
    yelp_api_key: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="PROVIDER_")


class CacheSettings(BaseSettings):
    """
    Staleness window overrides (seconds) per category and refetch policy.

    An unset window falls back to the record type's ``STALENESS_SECONDS``.
    """

    weather_ttl: Optional[float] = None
    events_ttl: Optional[float] = None
    movies_ttl: Optional[float] = None
    yelp_ttl: Optional[float] = None
    serialize_refetch: bool = True

    model_config = SettingsConfigDict(env_prefix="CACHE_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    file: str = "logs/city_explorer.log"
    max_bytes: int = 5_000_000
    backup_count: int = 3

    model_config = SettingsConfigDict(env_prefix="LOG_")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str | None) -> str:
        if not v:
            return "INFO"
        return str(v).strip().upper()


class Settings(BaseSettings):
    """Main application settings: aggregates all sub-settings."""

    database: DatabaseSettings = DatabaseSettings()
    api: APISettings = APISettings()
    providers: ProviderSettings = ProviderSettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Global settings instance: import this in other modules
settings = Settings()
