"""Tests for application wiring."""

import logging
import sqlite3
from pathlib import Path

import httpx
import pytest
import respx

from skyglow.app import build_dashboard, configure_logging
from skyglow.config.schema import AppConfig
from skyglow.errors import ConfigurationError
from skyglow.ingest.geolocation import IpGeolocator, NoGeolocation

BASE = "https://test-owm.example.com"


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        provider={"api_key": "k123", "base_url": BASE},
        suggestions={"debounce_ms": 0},
        location={"default_city": "Paris"},
    )


class TestBuildDashboard:
    async def test_wires_components(self, config: AppConfig, tmp_path: Path):
        ctrl = build_dashboard(config, tmp_path / "app.db")
        assert ctrl.default_city == "Paris"
        assert ctrl.suggestions is not None
        assert ctrl.suggestions.debounce_ms == 0
        assert isinstance(ctrl.geolocator, IpGeolocator)
        await ctrl.aclose()

        with pytest.raises(sqlite3.ProgrammingError):
            ctrl.recent.store.conn.execute("SELECT 1")

    async def test_geolocation_disabled(self, config: AppConfig, tmp_path: Path):
        config = config.model_copy(
            update={"location": config.location.model_copy(update={"use_ip_geolocation": False})}
        )
        ctrl = build_dashboard(config, tmp_path / "app.db")
        assert isinstance(ctrl.geolocator, NoGeolocation)
        await ctrl.aclose()

    def test_missing_key(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            build_dashboard(AppConfig(), tmp_path / "app.db")

    @respx.mock
    async def test_end_to_end_fallback_city(
        self,
        config: AppConfig,
        tmp_path: Path,
        current_london: dict,
        forecast_london: dict,
        fixed_geolocator,
    ):
        respx.get(f"{BASE}/data/2.5/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )
        respx.get(f"{BASE}/data/2.5/forecast").mock(
            return_value=httpx.Response(200, json=forecast_london)
        )

        ctrl = build_dashboard(config, tmp_path / "app.db", geolocator=NoGeolocation())
        assert await ctrl.start() is True
        assert ctrl.report.current.location == "London"
        assert len(ctrl.report.forecast) == 5
        await ctrl.aclose()

        # Recent searches persist across sessions
        again = build_dashboard(config, tmp_path / "app.db", geolocator=fixed_geolocator(0.0, 0.0))
        again.recent.load()
        assert again.recent_searches == ["Paris"]
        await again.aclose()


class TestConfigureLogging:
    def test_sets_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        configure_logging(logging.DEBUG)
        assert calls["level"] == logging.DEBUG
        assert "%(name)s" in calls["format"]
