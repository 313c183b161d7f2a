# src/quickcash/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/quickcash/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `QUICKCASH_DATABASE_URL`, `QUICKCASH_LOG_LEVEL`)
- an external YAML file via `QUICKCASH_CONFIG_PATH`

Design rule:
- Radii, default location and category lists live in YAML, not in discovery code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from quickcash.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `quickcash.config`."""
    text = resources.files("quickcash.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "QuickCash"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/jobs.json"


class DatastoreSettings(BaseModel):
    # Realtime Database REST root, e.g. https://<project>-default-rtdb.firebaseio.com
    database_url: str | None = None
    jobs_path: str = "jobs"
    auth: str | None = None


class LocationSettings(BaseModel):
    name: str = "Halifax, NS"
    lat: float = Field(44.6488, ge=-90, le=90)
    lon: float = Field(-63.5752, ge=-180, le=180)


class NearbySettings(BaseModel):
    default_radius_km: float = Field(25.0, ge=0)
    map_radius_km: float = Field(10.0, ge=0)
    default_location: LocationSettings = Field(default_factory=LocationSettings)


class SearchSettings(BaseModel):
    categories: list[str] = Field(
        default_factory=lambda: ["All", "Technology", "Hard Labour", "Marketing", "Retail", "Education"]
    )
    allow_unknown_categories: bool = False


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    datastore: DatastoreSettings = Field(default_factory=DatastoreSettings)
    nearby: NearbySettings = Field(default_factory=NearbySettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    def public_dict(self) -> dict[str, Any]:
        """Settings payload safe to expose to clients (datastore auth redacted)."""
        data = self.model_dump(mode="json")
        if data.get("datastore", {}).get("auth"):
            data["datastore"]["auth"] = "***"
        return data


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("QUICKCASH_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("QUICKCASH_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    database_url = os.getenv("QUICKCASH_DATABASE_URL")
    database_auth = os.getenv("QUICKCASH_DATABASE_AUTH")
    if database_url:
        data.setdefault("datastore", {})["database_url"] = database_url
    if database_auth:
        data.setdefault("datastore", {})["auth"] = database_auth

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("QUICKCASH_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
