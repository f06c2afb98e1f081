"""Wires clients, persistence and controllers from an AppConfig."""

import logging
from pathlib import Path
from zoneinfo import ZoneInfo

from skyglow.config.schema import AppConfig
from skyglow.controllers.dashboard import DashboardController, Notifier
from skyglow.controllers.suggestions import SuggestionController
from skyglow.ingest.geocoding_client import GeocodingClient
from skyglow.ingest.geolocation import Geolocator, IpGeolocator, NoGeolocation
from skyglow.ingest.openweather_client import OpenWeatherClient
from skyglow.storage.database import connect, run_migrations
from skyglow.storage.kv_repo import SqliteKeyValueStore
from skyglow.storage.recent_searches import RecentSearchStore

logger = logging.getLogger(__name__)

DEFAULT_DB = "data/skyglow.db"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_dashboard(
    config: AppConfig,
    db_path: str | Path = DEFAULT_DB,
    notifier: Notifier | None = None,
    geolocator: Geolocator | None = None,
) -> DashboardController:
    """Build a DashboardController with its suggestion controller attached.

    Raises ConfigurationError if no API key is configured.
    """
    provider = config.provider
    weather = OpenWeatherClient(
        api_key=provider.api_key,
        base_url=provider.base_url,
        units=provider.units.value,
        timeout=provider.timeout_seconds,
    )
    geocoding = GeocodingClient(
        api_key=provider.api_key,
        base_url=provider.base_url,
        timeout=provider.timeout_seconds,
    )

    conn = connect(db_path)
    applied = run_migrations(conn)
    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))
    recent = RecentSearchStore(
        SqliteKeyValueStore(conn),
        key=config.recent_searches.storage_key,
        capacity=config.recent_searches.capacity,
    )

    suggestions = SuggestionController(
        geocoding,
        debounce_ms=config.suggestions.debounce_ms,
        min_query_length=config.suggestions.min_query_length,
        limit=config.suggestions.limit,
    )

    if geolocator is None:
        geolocator = IpGeolocator() if config.location.use_ip_geolocation else NoGeolocation()

    return DashboardController(
        weather,
        recent,
        notifier=notifier,
        geolocator=geolocator,
        suggestions=suggestions,
        default_city=config.location.default_city,
        tz=ZoneInfo(config.display.timezone),
        forecast_days=config.display.forecast_days,
    )
