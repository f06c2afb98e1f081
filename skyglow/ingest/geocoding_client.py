"""OpenWeatherMap direct geocoding client used for city autocomplete."""

import logging
import os

import httpx

from skyglow.config.defaults import API_KEY_ENV_VAR, DEFAULT_BASE_URL
from skyglow.errors import ConfigurationError, NetworkError, ProviderError
from skyglow.models.suggestion import CitySuggestion

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV_VAR, "")
        if not self.api_key:
            raise ConfigurationError(f"{API_KEY_ENV_VAR} not set")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def fetch_suggestions(self, query: str, limit: int = 5) -> list[CitySuggestion]:
        """Return up to ``limit`` places matching a partial query.

        Entries missing a name, country or coordinates are skipped.
        """
        url = f"{self.base_url}/geo/1.0/direct"
        params = {"q": query, "limit": limit, "appid": self.api_key}
        try:
            resp = await self._http.get(url, params=params, timeout=self.timeout)
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}") from e
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid provider URL {url!r}: {e}") from e

        if resp.status_code >= 400:
            raise ProviderError(f"HTTP {resp.status_code}: {resp.text}", resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError("Geocoding response was not JSON", resp.status_code) from e
        if not isinstance(data, list):
            raise ProviderError("Unexpected geocoding response shape", resp.status_code)

        results: list[CitySuggestion] = []
        for item in data:
            suggestion = _parse_suggestion(item)
            if suggestion is None:
                logger.debug("Skipping incomplete geocoding entry: %r", item)
                continue
            results.append(suggestion)
            if len(results) >= limit:
                break
        return results

    async def aclose(self) -> None:
        await self._http.aclose()


def _parse_suggestion(item: object) -> CitySuggestion | None:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    country = item.get("country")
    if not isinstance(name, str) or not name or not isinstance(country, str):
        return None
    try:
        lat = float(item["lat"])
        lon = float(item["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    state = item.get("state")
    return CitySuggestion(
        name=name,
        country=country,
        lat=lat,
        lon=lon,
        state=state if isinstance(state, str) and state else None,
    )
