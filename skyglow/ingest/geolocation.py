"""Device position providers.

The dashboard asks a ``Geolocator`` for coordinates once at startup and
falls back to the default city when it raises ``GeolocationUnavailable``.
"""

import logging
from typing import Protocol

import httpx

from skyglow.errors import GeolocationUnavailable

logger = logging.getLogger(__name__)

IP_GEOLOCATION_URL = "https://ipapi.co/json/"


class Geolocator(Protocol):
    async def locate(self) -> tuple[float, float]:
        """Return (latitude, longitude) or raise GeolocationUnavailable."""
        ...


class NoGeolocation:
    """Used when the host has no location capability or it is disabled."""

    async def locate(self) -> tuple[float, float]:
        raise GeolocationUnavailable("Geolocation is not supported")


class IpGeolocator:
    """Approximates the device position from its public IP address."""

    def __init__(
        self,
        url: str = IP_GEOLOCATION_URL,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def locate(self) -> tuple[float, float]:
        try:
            resp = await self._http.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeolocationUnavailable(f"IP geolocation failed: {e}") from e

        if not isinstance(payload, dict):
            raise GeolocationUnavailable("Unexpected IP geolocation response shape")
        try:
            lat = float(payload["latitude"])
            lon = float(payload["longitude"])
        except (KeyError, TypeError, ValueError) as e:
            raise GeolocationUnavailable("IP geolocation returned no coordinates") from e

        logger.info("Resolved position from IP: %.4f, %.4f", lat, lon)
        return lat, lon

    async def aclose(self) -> None:
        await self._http.aclose()
