"""Display models produced by the forecast normalizer."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class CurrentConditions:
    location: str
    country: str
    temperature: int  # °C
    condition: str  # "Clear", "Clouds", "Rain", "Snow", ...
    description: str
    humidity: int  # %
    wind_speed: int  # km/h
    visibility: int  # km
    feels_like: int  # °C
    icon: str = ""


@dataclass(frozen=True)
class ForecastDay:
    date: date
    day: str  # short weekday label, e.g. "Mon"
    high: int
    low: int
    condition: str
    icon: str = ""


@dataclass(frozen=True)
class WeatherReport:
    current: CurrentConditions
    forecast: tuple[ForecastDay, ...] = ()


@dataclass(frozen=True)
class RawWeather:
    """The two provider payloads for one location, as returned on the wire."""

    current: dict = field(default_factory=dict)
    forecast: dict = field(default_factory=dict)
