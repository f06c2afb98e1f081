"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from skyglow.config.defaults import (
    DEFAULT_BASE_URL,
    DEFAULT_CITY,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_RECENT_SEARCHES_KEY,
)


class Units(StrEnum):
    METRIC = "metric"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    units: Units = Units.METRIC
    timeout_seconds: float = Field(default=10.0, gt=0.0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class SuggestionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=DEFAULT_DEBOUNCE_MS, ge=0)
    min_query_length: int = Field(default=3, ge=1)
    limit: int = Field(default=5, ge=1, le=10)


class RecentSearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    capacity: int = Field(default=5, ge=1)
    storage_key: str = DEFAULT_RECENT_SEARCHES_KEY


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_city: str = DEFAULT_CITY
    use_ip_geolocation: bool = True

    @field_validator("default_city")
    @classmethod
    def validate_default_city(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("location.default_city must not be empty")
        return text


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_days: int = Field(default=5, ge=1, le=5)
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    suggestions: SuggestionConfig = SuggestionConfig()
    recent_searches: RecentSearchConfig = RecentSearchConfig()
    location: LocationConfig = LocationConfig()
    display: DisplayConfig = DisplayConfig()
