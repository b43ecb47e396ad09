"""Settings for the runner, the process bus and the mod loader.

Values come from config/settings.yaml laid over the defaults below. The merged
dict is cached per process; tests call reload_settings() between cases.
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

_DEFAULTS: dict[str, Any] = {
    "event_bus": {
        # asyncio: timers on the runner's event loop; thread: threading.Timer per delayed fire
        "scheduler": "asyncio",
    },
    "mods": {
        "dir": "sandbox/mods",
        "data_dir": "sandbox/data",
        # {mod_id: {"enabled": bool, "config": {...}}}
        "overrides": {},
    },
    "logging": {
        "file": "sandbox/logs/modhub.log",
        "level": "INFO",
        "log_to_console": False,
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 3,
        # per-logger levels, e.g. {"modhub.events.bus": "DEBUG"}
        "levels": {},
    },
    "console": {
        "enabled": True,
        "prompt": "> ",
    },
}

_cached: dict[str, Any] | None = None


def _merge_into(target: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursive in-place merge; None in overlay keeps the target value."""
    for key, value in overlay.items():
        if value is None:
            continue
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value)
        else:
            target[key] = value
    return target


def _read_settings_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def get_setting(settings: dict[str, Any], path: str, default: Any = None) -> Any:
    """Nested lookup by dot path, e.g. get_setting(s, "mods.dir")."""
    node: Any = settings
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def reload_settings() -> None:
    """Drop the cached settings so the next load_settings() re-reads the file."""
    global _cached
    _cached = None


def load_settings(config_dir: Path | None = None) -> dict[str, Any]:
    """Defaults merged with <config_dir>/settings.yaml (config/ next to the package by default)."""
    global _cached
    if _cached is None:
        path = (config_dir or _CONFIG_DIR) / "settings.yaml"
        _cached = _merge_into(copy.deepcopy(_DEFAULTS), _read_settings_file(path))
    return _cached
