"""
core/config.py
──────────────
Application configuration loaded from environment variables via pydantic-settings.
The .env file in the backend root is parsed automatically.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings sourced from environment / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Logging ─────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── Database ────────────────────────────────────────────────────────
    MONGODB_URL: str = "mongodb://localhost:27017/randomtrip"
    MONGODB_DATABASE: str = "randomtrip"

    # "denormalized" → one document per (place, origin) in DESTINATIONS_COLLECTION
    # "split"        → PLACES_COLLECTION joined with TRAVEL_TIMES_COLLECTION by cluster
    STORE_LAYOUT: Literal["denormalized", "split"] = "denormalized"
    DESTINATIONS_COLLECTION: str = "destinations"
    PLACES_COLLECTION: str = "places"
    TRAVEL_TIMES_COLLECTION: str = "travel_times"

    # ── Island exclusion ────────────────────────────────────────────────
    ISLAND_CLUSTER: str = "제주특별자치도"
    ISLAND_REGION_NAME: str = "제주"
    ISLAND_CANDIDATE_CAP: int = 50

    # ── Sampling ────────────────────────────────────────────────────────
    RANDOM_SEED: Optional[int] = None

    # ── Rate Limiting ───────────────────────────────────────────────────
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # ── CORS ────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse the comma-separated CORS_ORIGINS string into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance (created once per process)."""
    return Settings()
