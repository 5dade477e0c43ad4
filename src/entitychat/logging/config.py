"""Persisted logging settings (currently just the log level)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional


def _config_dir() -> Path:
    raw = (os.environ.get("ENTITYCHAT_CONFIG_DIR") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".entitychat"


def config_path(config_file: Optional[os.PathLike[str] | str] = None) -> Path:
    """Return the logging config path.

    Resolution order is the explicit argument, ``ENTITYCHAT_LOG_CONFIG`` and
    finally ``<config dir>/logging.json``.
    """

    if config_file is not None:
        return Path(config_file)
    raw = (os.environ.get("ENTITYCHAT_LOG_CONFIG") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return _config_dir() / "logging.json"


def load_config(config_file: Optional[os.PathLike[str] | str] = None) -> Dict[str, Any]:
    """Read the JSON settings file; anything unreadable counts as empty."""

    try:
        data = json.loads(config_path(config_file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(
    config: Dict[str, Any],
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Path:
    path = config_path(config_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path


def level_number(level: str | int | None) -> Optional[int]:
    """Map a level name or number onto the numeric ``logging`` value."""

    if level is None:
        return None
    if isinstance(level, int):
        return level
    candidate = logging.getLevelName(str(level).strip().upper())
    return candidate if isinstance(candidate, int) else None


def load_log_level(config_file: Optional[os.PathLike[str] | str] = None) -> Optional[int]:
    return level_number(load_config(config_file).get("log_level"))


def save_log_level(
    level: str | int,
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Path:
    """Persist ``level`` and return the settings path.

    Raises
    ------
    ValueError
        If ``level`` is not a known logging level.
    """

    numeric = level_number(level)
    if numeric is None:
        raise ValueError(f"Unknown logging level: {level!r}")
    config = load_config(config_file)
    config["log_level"] = logging.getLevelName(numeric)
    return save_config(config, config_file)


__all__ = [
    "config_path",
    "load_config",
    "save_config",
    "level_number",
    "load_log_level",
    "save_log_level",
]
