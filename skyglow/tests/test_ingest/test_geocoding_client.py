"""Tests for the geocoding suggestion client with mocked httpx."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from skyglow.errors import ConfigurationError, NetworkError, ProviderError
from skyglow.ingest.geocoding_client import GeocodingClient

BASE = "https://test-owm.example.com"
GEO_URL = f"{BASE}/geo/1.0/direct"
FIXTURE_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def paris_results() -> list[dict]:
    with open(FIXTURE_DIR / "geocode_paris.json") as f:
        return json.load(f)


@pytest.fixture
def geo() -> GeocodingClient:
    return GeocodingClient(api_key="k123", base_url=BASE)


class TestFetchSuggestions:
    @respx.mock
    async def test_success(self, geo: GeocodingClient, paris_results: list[dict]):
        route = respx.get(GEO_URL).mock(
            return_value=httpx.Response(200, json=paris_results)
        )

        results = await geo.fetch_suggestions("Paris")

        # The entry with a null latitude is skipped
        assert len(results) == 4
        first = results[0]
        assert first.name == "Paris"
        assert first.country == "FR"
        assert first.state == "Ile-de-France"
        assert first.lat == pytest.approx(48.8588897)
        assert results[3].state is None

        params = route.calls[0].request.url.params
        assert params["q"] == "Paris"
        assert params["limit"] == "5"
        assert params["appid"] == "k123"

    @respx.mock
    async def test_limit_caps_results(self, geo: GeocodingClient, paris_results: list[dict]):
        respx.get(GEO_URL).mock(
            return_value=httpx.Response(200, json=paris_results)
        )

        results = await geo.fetch_suggestions("Paris", limit=2)
        assert [r.country for r in results] == ["FR", "US"]

    @respx.mock
    async def test_empty(self, geo: GeocodingClient):
        respx.get(GEO_URL).mock(return_value=httpx.Response(200, json=[]))
        assert await geo.fetch_suggestions("zzzz") == []

    @respx.mock
    async def test_http_error(self, geo: GeocodingClient):
        respx.get(GEO_URL).mock(return_value=httpx.Response(401, json={"cod": 401}))
        with pytest.raises(ProviderError):
            await geo.fetch_suggestions("Paris")

    @respx.mock
    async def test_unexpected_shape(self, geo: GeocodingClient):
        respx.get(GEO_URL).mock(return_value=httpx.Response(200, json={"results": []}))
        with pytest.raises(ProviderError):
            await geo.fetch_suggestions("Paris")

    @respx.mock
    async def test_transport_error(self, geo: GeocodingClient):
        respx.get(GEO_URL).mock(side_effect=httpx.ReadTimeout("slow"))
        with pytest.raises(NetworkError):
            await geo.fetch_suggestions("Paris")

    async def test_invalid_url_is_configuration_error(self):
        http = AsyncMock()
        http.get.side_effect = httpx.InvalidURL("Invalid URL")
        geo = GeocodingClient(api_key="k123", base_url=BASE, http=http)

        with pytest.raises(ConfigurationError):
            await geo.fetch_suggestions("Paris")
