"""Text and icon formatting of the display model for the rendering layer."""

from skyglow.models.weather import CurrentConditions, ForecastDay, WeatherReport

CONDITION_ICONS = {
    "clear": "sun",
    "clouds": "cloud",
    "rain": "cloud-rain",
    "snow": "cloud-snow",
}
DEFAULT_ICON = "sun"


def condition_icon(condition: str) -> str:
    """Icon name for a condition category; unknown categories get the sun."""
    return CONDITION_ICONS.get(condition.lower(), DEFAULT_ICON)


def format_location(current: CurrentConditions) -> str:
    return f"{current.location}, {current.country}"


def format_current_text(current: CurrentConditions) -> str:
    lines = [
        format_location(current),
        f"{current.temperature}°C {current.description}",
        f"Feels like {current.feels_like}°C",
        f"Humidity: {current.humidity}% | Wind: {current.wind_speed} km/h | "
        f"Visibility: {current.visibility} km",
    ]
    return "\n".join(lines)


def format_forecast_text(days: tuple[ForecastDay, ...] | list[ForecastDay]) -> str:
    return "\n".join(f"{d.day} {d.high}°/{d.low}° {d.condition}" for d in days)


def format_report_text(report: WeatherReport) -> str:
    text = format_current_text(report.current)
    if report.forecast:
        text += f"\n\n{len(report.forecast)}-Day Forecast\n"
        text += format_forecast_text(report.forecast)
    return text
