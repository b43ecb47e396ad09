"""Logging for the host process: the sink behind the bus diagnostics and every mod logger.

Root gets a rotating file handler, plus stderr when logging.log_to_console is
set (off by default so the command console stays readable). logging.levels
tunes single loggers, e.g. {"modhub.events.bus": "DEBUG", "mod.heartbeat": "WARNING"}.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: Any, fallback: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else fallback


def _handlers(project_root: Path, cfg: dict[str, Any]) -> list[logging.Handler]:
    log_path = project_root / cfg.get("file", "sandbox/logs/modhub.log")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=int(cfg.get("max_bytes", 10 * 1024 * 1024)),
            backupCount=int(cfg.get("backup_count", 3)),
            encoding="utf-8",
        )
    ]
    if cfg.get("log_to_console", False):
        handlers.append(logging.StreamHandler())
    return handlers


def setup_logging(project_root: Path, settings: dict[str, Any]) -> None:
    """Replace root handlers according to the "logging" settings section."""
    cfg = settings.get("logging", {})
    level = _level(cfg.get("level", "INFO"))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for old in root.handlers[:]:
        root.removeHandler(old)
    for handler in _handlers(project_root, cfg):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name, name_level in (cfg.get("levels") or {}).items():
        logging.getLogger(name).setLevel(_level(name_level, level))


def mod_logger(mod_id: str) -> logging.Logger:
    """Logger handed to a mod through its context."""
    return logging.getLogger(f"mod.{mod_id}")
