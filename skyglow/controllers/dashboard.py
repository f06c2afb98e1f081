"""Dashboard orchestration: initial location, searches, selection and recents."""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, tzinfo
from typing import Protocol

from skyglow.config.defaults import DEFAULT_CITY
from skyglow.controllers.suggestions import SuggestionController
from skyglow.errors import GeolocationUnavailable, SkyglowError
from skyglow.ingest.geolocation import Geolocator, NoGeolocation
from skyglow.models.suggestion import CitySuggestion
from skyglow.models.weather import RawWeather, WeatherReport
from skyglow.normalize.forecast import MAX_FORECAST_DAYS, normalize_raw
from skyglow.storage.recent_searches import RecentSearchStore

logger = logging.getLogger(__name__)

COORDINATES_ERROR = "Failed to fetch weather data"
CITY_ERROR = "Failed to fetch weather data for this location"


class WeatherSource(Protocol):
    async def fetch_by_coordinates(self, lat: float, lon: float) -> RawWeather: ...

    async def fetch_by_city_name(self, name: str) -> RawWeather: ...


class Notifier(Protocol):
    def notify(self, title: str, description: str, variant: str = "destructive") -> None: ...


class LoggingNotifier:
    """Notifier for hosts without a toast surface."""

    def notify(self, title: str, description: str, variant: str = "destructive") -> None:
        level = logging.ERROR if variant == "destructive" else logging.INFO
        logger.log(level, "%s: %s", title, description)


class DashboardController:
    """Sole owner of the displayed report and the loading flag.

    A failed fetch notifies once and leaves the previous report in place.
    Responses for superseded requests are discarded.
    """

    def __init__(
        self,
        weather_client: WeatherSource,
        recent: RecentSearchStore,
        notifier: Notifier | None = None,
        geolocator: Geolocator | None = None,
        suggestions: SuggestionController | None = None,
        default_city: str = DEFAULT_CITY,
        tz: tzinfo = UTC,
        forecast_days: int = MAX_FORECAST_DAYS,
        on_change: Callable[["DashboardController"], None] | None = None,
    ):
        self.weather_client = weather_client
        self.recent = recent
        self.notifier = notifier or LoggingNotifier()
        self.geolocator = geolocator or NoGeolocation()
        self.suggestions = suggestions
        self.default_city = default_city
        self.tz = tz
        self.forecast_days = forecast_days
        self.on_change = on_change
        self.report: WeatherReport | None = None
        self.loading = False
        self._latest_token = 0

    @property
    def recent_searches(self) -> list[str]:
        return self.recent.entries

    async def start(self) -> bool:
        """Load recents, then show weather for the device position or the default city."""
        self.recent.load()
        self._changed()
        try:
            lat, lon = await self.geolocator.locate()
        except GeolocationUnavailable as e:
            logger.info("Geolocation unavailable (%s); using %s", e, self.default_city)
            return await self._fetch_city(self.default_city)
        return await self._fetch(
            lambda: self.weather_client.fetch_by_coordinates(lat, lon), COORDINATES_ERROR
        )

    async def search(self, query: str) -> bool:
        city = query.strip()
        if not city:
            return False
        if self.suggestions is not None:
            self.suggestions.submit()
        return await self._fetch_city(city)

    async def select_suggestion(self, suggestion: CitySuggestion) -> bool:
        """Fetch by coordinates; the "name, country" label is recorded even on failure."""
        if self.suggestions is not None:
            self.suggestions.select(suggestion)
        self.recent.record(suggestion.label)
        self._changed()
        return await self._fetch(
            lambda: self.weather_client.fetch_by_coordinates(suggestion.lat, suggestion.lon),
            COORDINATES_ERROR,
        )

    async def replay_recent(self, city: str) -> bool:
        return await self._fetch_city(city)

    async def aclose(self) -> None:
        """Cancel the autocomplete timer, close the HTTP clients and the store."""
        resources: list[object] = [self.weather_client, self.geolocator]
        if self.suggestions is not None:
            await self.suggestions.aclose()
            resources.append(self.suggestions.client)
        for resource in resources:
            close = getattr(resource, "aclose", None)
            if close is not None:
                await close()
        self.recent.close()

    async def _fetch_city(self, city: str) -> bool:
        ok = await self._fetch(lambda: self.weather_client.fetch_by_city_name(city), CITY_ERROR)
        if ok:
            self.recent.record(city)
            self._changed()
        return ok

    async def _fetch(self, request: Callable[[], Awaitable[RawWeather]], failure_message: str) -> bool:
        self._latest_token += 1
        token = self._latest_token
        self.loading = True
        self._changed()
        try:
            raw = await request()
            report = normalize_raw(raw, tz=self.tz, max_days=self.forecast_days)
        except SkyglowError as e:
            if token != self._latest_token:
                logger.debug("Ignoring failure of superseded request %d: %s", token, e)
                return False
            logger.error("Weather fetch failed: %s", e)
            self.notifier.notify("Error", failure_message)
            return False
        finally:
            if token == self._latest_token:
                self.loading = False
                self._changed()

        if token != self._latest_token:
            logger.debug("Discarding response of superseded request %d", token)
            return False
        self.report = report
        self._changed()
        return True

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
