"""OpenWeatherMap current-conditions and forecast client."""

import logging
import os

import httpx

from skyglow.config.defaults import API_KEY_ENV_VAR, DEFAULT_BASE_URL
from skyglow.errors import ConfigurationError, NetworkError, ProviderError
from skyglow.models.weather import RawWeather

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "skyglow/0.1.0"
SUCCESS_CODE = 200


def is_success_code(cod: object) -> bool:
    """The provider sends ``cod`` as int on /weather and as str on /forecast."""
    return str(cod) == str(SUCCESS_CODE)


class OpenWeatherClient:
    """Fetches the raw current and forecast payloads for one location.

    Two sequential reads per lookup, no caching and no retry: a single
    failed call produces a single error.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        units: str = "metric",
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV_VAR, "")
        if not self.api_key:
            raise ConfigurationError(f"{API_KEY_ENV_VAR} not set")
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.timeout = timeout
        self._http = http or httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": DEFAULT_USER_AGENT}
        )

    async def fetch_by_coordinates(self, lat: float, lon: float) -> RawWeather:
        return await self._fetch({"lat": lat, "lon": lon})

    async def fetch_by_city_name(self, name: str) -> RawWeather:
        return await self._fetch({"q": name})

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _fetch(self, location: dict) -> RawWeather:
        current = await self._get("/data/2.5/weather", location)
        # Unknown cities are reported in the body; stop before the second read.
        if not is_success_code(current.get("cod", SUCCESS_CODE)):
            raise ProviderError(
                str(current.get("message", "unknown provider error")),
                _status_from_cod(current.get("cod")),
            )
        forecast = await self._get("/data/2.5/forecast", location)
        if not is_success_code(forecast.get("cod", SUCCESS_CODE)):
            raise ProviderError(
                str(forecast.get("message", "unknown provider error")),
                _status_from_cod(forecast.get("cod")),
            )
        return RawWeather(current=current, forecast=forecast)

    async def _get(self, endpoint: str, location: dict) -> dict:
        url = f"{self.base_url}{endpoint}"
        params = {**location, "appid": self.api_key, "units": self.units}
        try:
            resp = await self._http.get(url, params=params, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("OpenWeather request failed: GET %s -> %s", endpoint, e)
            raise NetworkError(f"Request failed: {e}") from e
        except httpx.InvalidURL as e:
            logger.error("OpenWeather request has an invalid URL: %s (%s)", url, e)
            raise ConfigurationError(f"Invalid provider URL {url!r}: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            logger.error(
                "OpenWeather %d: GET %s -> %s", resp.status_code, endpoint, message or resp.text
            )
            raise ProviderError(
                f"HTTP {resp.status_code}: {message or resp.text}", resp.status_code
            )
        if not isinstance(body, dict):
            raise ProviderError(f"Unexpected response body from {endpoint}", resp.status_code)
        return body


def _status_from_cod(cod: object) -> int | None:
    try:
        return int(cod)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
