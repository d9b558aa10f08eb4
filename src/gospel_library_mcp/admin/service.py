"""Admin service layer for configuration and stats management."""

from __future__ import annotations

import logging
import os
from typing import Any

from gospel_library_mcp.metrics import get_metrics

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "default_timeout": 30,
    "call_timeout": 30.0,
    "default_limit": 20,
    "default_lang": "eng",
    "comprehensive_fanout": 2,
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return default
    return value if value > 0 else default


# Runtime configuration overrides (not persisted)
_runtime_config: dict[str, Any] = {
    **DEFAULTS,
    "default_timeout": _env_int("GOSPEL_LIBRARY_TIMEOUT", DEFAULTS["default_timeout"]),
    "default_lang": os.getenv("GOSPEL_LIBRARY_LANG") or DEFAULTS["default_lang"],
}
_startup_config = dict(_runtime_config)


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value with runtime override support.

    Args:
        key: Configuration key
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    return _runtime_config.get(key, default)


def get_stats() -> dict[str, Any]:
    """Get server statistics and metrics."""
    return get_metrics().to_dict()


def get_current_config() -> dict[str, Any]:
    """Get current runtime configuration.

    Returns:
        Dictionary with current config, defaults, and note
    """
    return {
        "config": _runtime_config,
        "defaults": DEFAULTS,
        "note": "Changes are not persisted and will reset on server restart",
    }


def _is_valid(key: str, value: Any) -> bool:
    # bool is an int subclass; reject it for numeric settings
    if isinstance(value, bool):
        return False
    if key == "default_timeout":
        return isinstance(value, int) and value > 0
    if key == "call_timeout":
        return isinstance(value, (int, float)) and value > 0
    if key == "default_limit":
        return isinstance(value, int) and 1 <= value <= 100
    if key == "comprehensive_fanout":
        return isinstance(value, int) and 0 <= value <= 5
    if key == "default_lang":
        return isinstance(value, str) and bool(value.strip())
    return False


def update_config(config_updates: dict[str, Any]) -> dict[str, Any]:
    """Update runtime configuration.

    Unknown keys and values of the wrong type or range are skipped.

    Args:
        config_updates: Dictionary of config key-value pairs to update

    Returns:
        Dictionary with status, message, updated keys, and current config
    """
    updated = []
    for key, value in config_updates.items():
        if key in DEFAULTS and _is_valid(key, value):
            _runtime_config[key] = value
            updated.append(key)
        else:
            logger.debug(f"Rejected config update {key}={value!r}")

    if "default_timeout" in updated:
        # The shared provider reads its timeout at construction
        from gospel_library_mcp.core.providers import default_provider

        default_provider.timeout = _runtime_config["default_timeout"]

    return {
        "status": "success",
        "message": f"Updated {len(updated)} config value(s)",
        "updated": updated,
        "current_config": _runtime_config,
    }


def reset_config() -> None:
    """Restore the startup configuration."""
    _runtime_config.clear()
    _runtime_config.update(_startup_config)
