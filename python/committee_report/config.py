"""
Report Configuration Module

Loads report settings from YAML with built-in defaults.
"""

import copy
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "report_config.yaml"

DEFAULT_CONFIG = {
    "currency_label": "Rs.",
    "highlight": {
        "good_percentage": 80,
        "poor_percentage": 50,
    },
    "formats": {
        "footer_timestamp": "%d %b %Y, %I:%M %p",
        "export_timestamp": "%d %B %Y, %I:%M %p",
        "card_date": "%d/%m/%y",
        "export_date": "%d/%m/%Y",
    },
    "theme": {
        "primary": "#1A1A2E",
        "accent": "#00C853",
        "light_green": "#E8F5E9",
        "light_red": "#FFEBEE",
        "light_bg": "#F8F9FA",
    },
    "page": {
        "margin": 32,
    },
    "database": {
        "url": "sqlite:///committees.db",
    },
    "delivery": {
        "output_dir": "reports",
    },
}


def default_config_dir() -> Path:
    """Return the repository-level config directory."""
    return Path(__file__).parent.parent.parent / "config"


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_dir: Path | str | None = None) -> dict:
    """Load report configuration.

    Args:
        config_dir: Path to configuration directory

    Returns:
        Configuration dict, defaults filled in for missing keys
    """
    config_dir = Path(config_dir) if config_dir else default_config_dir()
    config_file = config_dir / CONFIG_FILENAME

    if config_file.exists():
        with open(config_file) as f:
            loaded = yaml.safe_load(f) or {}
        return _merge(DEFAULT_CONFIG, loaded)

    logger.debug(f"No {CONFIG_FILENAME} in {config_dir}, using defaults")
    return copy.deepcopy(DEFAULT_CONFIG)
