"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The DashboardConfig model is defined in src/core/config.py.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import DashboardConfig, validate_config
from src.core.state import TimeRange


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _parse_center(data: Any, default: tuple[float, float]) -> tuple[float, float]:
    """Parse the initial map center from a mapping or a [lat, lon] pair."""
    if data is None:
        return default
    if isinstance(data, dict):
        return (float(data["latitude"]), float(data["longitude"]))
    lat, lon = data
    return (float(lat), float(lon))


def load_config_from_dict(data: dict[str, Any]) -> DashboardConfig:
    """Load configuration from a dictionary.

    Pure function. Keys that are absent keep their defaults.

    Args:
        data: Configuration dictionary

    Returns:
        Parsed DashboardConfig object

    Raises:
        ValueError: If a value cannot be converted (e.g. unknown time range)
    """
    defaults = DashboardConfig()

    time_range = defaults.default_time_range
    if data.get("default_time_range") is not None:
        time_range = TimeRange.parse(data["default_time_range"])

    return DashboardConfig(
        feed_base_url=str(data.get("feed_base_url", defaults.feed_base_url)).rstrip("/"),
        default_time_range=time_range,
        default_min_magnitude=float(data.get("default_min_magnitude", defaults.default_min_magnitude)),
        request_timeout_seconds=int(data.get("request_timeout_seconds", defaults.request_timeout_seconds)),
        tile_url=data.get("tile_url", defaults.tile_url),
        tile_attribution=data.get("tile_attribution", defaults.tile_attribution),
        initial_center=_parse_center(data.get("initial_center"), defaults.initial_center),
        initial_zoom=int(data.get("initial_zoom", defaults.initial_zoom)),
        bounds_padding=float(data.get("bounds_padding", defaults.bounds_padding)),
        highlight_seconds=float(data.get("highlight_seconds", defaults.highlight_seconds)),
        map_height=int(data.get("map_height", defaults.map_height)),
        display_timezone=data.get("display_timezone", defaults.display_timezone) or None,
    )


def _env_overrides() -> dict[str, Any]:
    """Collect configuration overrides from environment variables.

    Environment variables:
        FEED_BASE_URL: Base URL of the summary feeds
        DEFAULT_TIME_RANGE: day, week or month (or all_day, ...)
        MIN_MAGNITUDE: Initial magnitude threshold
        REQUEST_TIMEOUT: Feed request timeout in seconds
        DISPLAY_TIMEZONE: IANA zone for event times (e.g. Europe/Berlin)
    """
    mapping = {
        "FEED_BASE_URL": "feed_base_url",
        "DEFAULT_TIME_RANGE": "default_time_range",
        "MIN_MAGNITUDE": "default_min_magnitude",
        "REQUEST_TIMEOUT": "request_timeout_seconds",
        "DISPLAY_TIMEZONE": "display_timezone",
    }

    overrides = {}
    for env_var, key in mapping.items():
        value = os.environ.get(env_var)
        if value:
            overrides[key] = value
    return overrides


def load_config(config_path: str | Path | None = None) -> DashboardConfig:
    """Load configuration from a YAML file plus environment overrides.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed DashboardConfig object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    data: dict[str, Any] = {}
    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
    else:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            logger.warning("Config file is empty, using defaults")
        else:
            data = loaded

    data = {**data, **_env_overrides()}
    config = load_config_from_dict(data)

    result = validate_config(config)
    for error in result.errors:
        if error.severity == "warning":
            logger.warning("Config %s: %s", error.field, error.message)
        else:
            logger.error("Config %s: %s", error.field, error.message)

    if not result.valid:
        logger.error("Invalid configuration, using defaults")
        return DashboardConfig()

    logger.info(
        "Loaded config: range=%s, min magnitude=%.1f",
        config.default_time_range.value,
        config.default_min_magnitude,
    )

    return config
