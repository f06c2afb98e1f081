"""Forecast normalizer: raw provider payloads -> display model.

The forecast feed holds one entry every 3 hours. Each calendar date is
represented by its noon-aligned reading only; dates without one are
omitted rather than backfilled from a neighbouring slot.
"""

import logging
import math
from datetime import UTC, date, datetime, tzinfo

from skyglow.errors import InvalidLocationError, MalformedResponseError
from skyglow.ingest.openweather_client import is_success_code
from skyglow.models.weather import CurrentConditions, ForecastDay, RawWeather, WeatherReport

logger = logging.getLogger(__name__)

NOON_MARKER = "12:00:00"
MAX_FORECAST_DAYS = 5
MS_TO_KMH = 3.6
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf."""
    return math.floor(value + 0.5)


def normalize(
    current: dict,
    forecast: dict,
    tz: tzinfo = UTC,
    max_days: int = MAX_FORECAST_DAYS,
) -> WeatherReport:
    """Build a WeatherReport from the /weather and /forecast payloads.

    Raises InvalidLocationError if the current payload reports a
    non-success ``cod``.
    """
    cod = current.get("cod")
    if cod is not None and not is_success_code(cod):
        raise InvalidLocationError(
            str(current.get("message", "location not found")),
            _int_or_none(cod),
        )

    conditions = _parse_current(current)
    days = _select_noon_readings(forecast, tz)[:max_days]
    return WeatherReport(current=conditions, forecast=tuple(days))


def normalize_raw(raw: RawWeather, tz: tzinfo = UTC, max_days: int = MAX_FORECAST_DAYS) -> WeatherReport:
    return normalize(raw.current, raw.forecast, tz=tz, max_days=max_days)


def _parse_current(data: dict) -> CurrentConditions:
    try:
        main = data["main"]
        weather = data["weather"][0]
        return CurrentConditions(
            location=str(data["name"]),
            country=str(data["sys"]["country"]),
            temperature=round_half_up(float(main["temp"])),
            condition=str(weather["main"]),
            description=str(weather.get("description", "")),
            humidity=round_half_up(float(main["humidity"])),
            wind_speed=round_half_up(float(data["wind"]["speed"]) * MS_TO_KMH),
            visibility=round_half_up(float(data["visibility"]) / 1000),
            feels_like=round_half_up(float(main["feels_like"])),
            icon=str(weather.get("icon", "")),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise MalformedResponseError(f"Current conditions payload incomplete: {e!r}") from e


def _select_noon_readings(forecast: dict, tz: tzinfo) -> list[ForecastDay]:
    """First noon reading per calendar date, in feed order."""
    entries = forecast.get("list")
    if not isinstance(entries, list):
        raise MalformedResponseError("Forecast payload has no 'list' of entries")

    seen: set[date] = set()
    days: list[ForecastDay] = []
    for entry in entries:
        try:
            if NOON_MARKER not in str(entry["dt_txt"]):
                continue
            day = datetime.fromtimestamp(int(entry["dt"]), tz).date()
            if day in seen:
                logger.debug("Ignoring duplicate noon reading for %s", day.isoformat())
                continue
            main = entry["main"]
            weather = entry["weather"][0]
            days.append(
                ForecastDay(
                    date=day,
                    day=WEEKDAY_LABELS[day.weekday()],
                    high=round_half_up(float(main["temp_max"])),
                    low=round_half_up(float(main["temp_min"])),
                    condition=str(weather["main"]),
                    icon=str(weather.get("icon", "")),
                )
            )
            seen.add(day)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Forecast entry incomplete: {e!r}") from e
    return days


def _int_or_none(value: object) -> int | None:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
