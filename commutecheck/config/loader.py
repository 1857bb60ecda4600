"""
Configuration loading for Commute Check.

Handles loading configuration from ~/.commutecheck/config.json with sensible
defaults, then applies environment variable overrides for secrets.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Any
import copy

logger = logging.getLogger("commutecheck.config")

DEFAULT_CONFIG: Dict[str, Any] = {
    "database_path": "~/.commutecheck/commute.db",

    # Google Maps Directions API key; None means placeholder mode
    "google_maps_api_key": None,

    # Key required by the admin endpoints; generated at startup when unset
    "admin_api_key": None,

    # Traffic cache and background refresh
    "cache_ttl_seconds": 600,
    "refresh_interval_seconds": 600,
    "request_timeout_seconds": 30,

    # Bounds for synthesized wait times when the API key is missing
    "placeholder_min_wait": 10,
    "placeholder_max_wait": 40,
}

# Environment variable -> config key
ENV_OVERRIDES: Dict[str, str] = {
    "GOOGLE_MAPS_API_KEY": "google_maps_api_key",
    "ADMIN_API_KEY": "admin_api_key",
    "COMMUTECHECK_DB": "database_path",
}

_INT_KEYS = [
    "cache_ttl_seconds",
    "refresh_interval_seconds",
    "request_timeout_seconds",
    "placeholder_min_wait",
    "placeholder_max_wait",
]


def get_config_path() -> Path:
    """Get path to config file."""
    return Path.home() / ".commutecheck" / "config.json"


def get_database_path(config: Dict[str, Any]) -> Path:
    """Get expanded database path from config."""
    return Path(config["database_path"]).expanduser()


def load_config() -> Dict[str, Any]:
    """
    Load configuration from file, merging with defaults.

    Returns a complete configuration with all default values filled in.
    User config overrides defaults where specified, and environment
    variables override both.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            for key in ['database_path', 'google_maps_api_key', 'admin_api_key']:
                if key in user_config:
                    config[key] = user_config[key]

            for key in _INT_KEYS:
                if key in user_config:
                    config[key] = int(user_config[key])

        except json.JSONDecodeError as e:
            logger.warning("Could not parse config file %s: %s", config_path, e)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Error loading config file %s: %s", config_path, e)

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    return config
