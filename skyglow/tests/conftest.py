"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from skyglow.config.schema import AppConfig
from skyglow.storage.kv_repo import InMemoryKeyValueStore
from skyglow.storage.recent_searches import RecentSearchStore

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def current_london() -> dict:
    return load_fixture("current_london.json")


@pytest.fixture
def forecast_london() -> dict:
    return load_fixture("forecast_london.json")


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig(provider={"api_key": "test-key"})


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key"},
        "suggestions": {"debounce_ms": 150},
        "location": {"default_city": "  Berlin "},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def recent_store(kv_store: InMemoryKeyValueStore) -> RecentSearchStore:
    return RecentSearchStore(kv_store)


class FixedGeolocator:
    def __init__(self, lat: float, lon: float):
        self.lat = lat
        self.lon = lon

    async def locate(self) -> tuple[float, float]:
        return self.lat, self.lon


@pytest.fixture
def fixed_geolocator() -> type[FixedGeolocator]:
    """Factory for a geolocator that always reports the given position."""
    return FixedGeolocator
