"""YAML config loader with environment credential fallback and dotted-key lookup."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from skyglow.config.defaults import API_KEY_ENV_VAR
from skyglow.config.schema import AppConfig
from skyglow.errors import ConfigurationError


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing path yields the defaults. If the file leaves
    ``provider.api_key`` empty, it is taken from OPENWEATHER_API_KEY.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError("Config must be a YAML mapping at the top level")

    provider = raw.get("provider") or {}
    if not isinstance(provider, dict):
        raise ConfigurationError("provider must be a mapping")
    raw["provider"] = provider
    if not provider.get("api_key"):
        provider["api_key"] = os.environ.get(API_KEY_ENV_VAR, "")

    try:
        return AppConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config: {e}") from e


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'suggestions.debounce_ms'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
