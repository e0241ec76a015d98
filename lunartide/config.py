"""Configuration management for the lunar-tidal fishing engine."""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "config.yaml")

DEFAULTS: Dict[str, Any] = {
    "location": {
        "timezone": "Europe/Amsterdam",
        "default_station": "SCHEVNGN",
    },
    "stations": [],
    "tides": {
        "days_before": 2,
        "days_after": 2,
    },
    "pressure": {
        "retention_hours": 72,
        "capacity": 500,
        "lookback_hours": 3,
        "threshold_hpa": 0.5,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file, filling missing keys with defaults.

    Args:
        config_path: Path to the YAML file. Falls back to the LUNARTIDE_CONFIG
            environment variable, then to the config.yaml shipped with the package.

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid YAML or not a mapping
    """
    path = os.path.abspath(
        config_path or os.getenv("LUNARTIDE_CONFIG") or DEFAULT_CONFIG_PATH)

    try:
        with open(path, 'r') as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(
            f"Configuration file not found at {path}")
    except yaml.YAMLError as e:
        raise ValueError(
            f"Error parsing configuration file {path}: {e}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"Configuration file {path} must contain a mapping, got {type(raw).__name__}")

    logging.info(f"Loaded configuration from {path}")
    return with_defaults(raw)


def with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Fill missing keys of an in-memory configuration with defaults."""
    return _merge(DEFAULTS, config)
