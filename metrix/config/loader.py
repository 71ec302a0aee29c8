"""
Configuration loading for MetriX.

Handles loading configuration from ~/.metrix/config.json with sensible defaults.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # External data source (see metrix.config.store)
    "data_source": {
        "endpoint": "",
        "credential": "",
    },

    # Seconds between automatic refreshes
    "poll_interval_seconds": 60,

    # None keeps the HTTP client's default timeout
    "request_timeout_seconds": None,

    # Hourly points generated in demo mode (N points -> N+1 samples)
    "demo_points": 24,

    # Narrative insight provider
    "insights": {
        "api_key": None,
        "model": "gemini-2.5-flash",
        "recent_points": 10,
        "top_endpoints": 5,
    },

    # Display options
    "display": {
        "color_enabled": True,
    },
}

INSIGHT_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


def get_config_path() -> Path:
    """Get path to config file."""
    return Path.home() / ".metrix" / "config.json"


def read_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the raw user config file.

    Returns an empty dict when the file is missing, unreadable, or does not
    hold a JSON object. Problems are logged, never raised.
    """
    config_path = Path(path) if path else get_config_path()
    if not config_path.exists():
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Could not parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Error reading config file %s: %s", config_path, e)
        return {}

    if not isinstance(user_config, dict):
        logger.warning("Ignoring config file %s: top level is not an object", config_path)
        return {}
    return user_config


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file, merging with defaults.

    Returns a complete configuration with all default values filled in.
    User config overrides defaults where specified.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    user_config = read_config_file(path)

    # Shallow merge sections
    for key in ['data_source', 'insights', 'display']:
        if key in user_config and isinstance(user_config[key], dict):
            config[key].update(user_config[key])

    # Direct override for simple values
    for key in ['poll_interval_seconds', 'request_timeout_seconds', 'demo_points']:
        if key in user_config:
            config[key] = user_config[key]

    return config


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    config_path = Path(path) if path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def get_poll_interval(config: Dict[str, Any]) -> float:
    """Seconds between automatic refreshes, falling back to the default."""
    value = config.get("poll_interval_seconds")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_CONFIG["poll_interval_seconds"]


def get_request_timeout(config: Dict[str, Any]) -> Optional[float]:
    """Explicit request timeout in seconds, or None for the client default."""
    value = config.get("request_timeout_seconds")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return value
    return None


def get_demo_points(config: Dict[str, Any]) -> int:
    """Hourly points generated in demo mode, falling back to the default."""
    value = config.get("demo_points")
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return DEFAULT_CONFIG["demo_points"]


def get_insights_api_key(config: Dict[str, Any]) -> Optional[str]:
    """
    Resolve the insight provider's API key.

    The config value wins; otherwise the first non-empty variable from
    INSIGHT_KEY_ENV_VARS is used.
    """
    key = (config.get("insights") or {}).get("api_key")
    if key:
        return key
    for name in INSIGHT_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None
