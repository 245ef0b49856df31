"""
Settings using pydantic-settings for type-safe configuration.

Values come from FIELDCHECK_* environment variables or a .env file and are
loaded once and cached.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .request import VALID_LOCATIONS, Location


class Settings(BaseSettings):
    """
    fieldcheck settings loaded from environment variables.

    Defaults reproduce the library's built-in behavior, so an empty
    environment changes nothing.
    """

    model_config = SettingsConfigDict(
        env_prefix="FIELDCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Schema compilation ===
    # Note: Use str type for env var parsing, convert to list via property
    default_locations_str: str = Field(
        default=",".join(VALID_LOCATIONS),
        alias="FIELDCHECK_DEFAULT_LOCATIONS",
        description="Locations searched when a field has no 'in' (comma-separated)",
    )
    strict_rules: bool = Field(
        default=False,
        description="Raise UnknownRuleError instead of warning on unknown rule names",
    )

    # === FastAPI integration ===
    error_status_code: int = Field(
        default=422,
        description="HTTP status code returned when a request fails validation",
    )

    @property
    def default_locations(self) -> list[Location]:
        """Parse comma-separated locations string into list.

        Unknown names are kept here; the location resolver drops them.
        """
        return [loc.strip() for loc in self.default_locations_str.split(",") if loc.strip()]  # type: ignore[misc]

    @field_validator("error_status_code", mode="after")
    @classmethod
    def validate_error_status_code(cls, v: int) -> int:
        """Only client error codes make sense for validation failures."""
        if not 400 <= v < 500:
            raise ValueError(f"Invalid FIELDCHECK_ERROR_STATUS_CODE: {v}. Must be a 4xx status")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Tests that patch the environment must call ``get_settings.cache_clear()``.
    """
    return Settings()
