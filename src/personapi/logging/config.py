"""Persisted logging preferences for the personapi CLI and server.

The saved level lives in a small JSON document (``~/.personapi/logging.json``
unless ``PERSONAPI_LOG_CONFIG`` or ``PERSONAPI_CONFIG_DIR`` point elsewhere)
so that ``personapi logging set-level`` survives across processes.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

PathLike = Optional[os.PathLike[str] | str]


def _config_path(config_file: PathLike = None) -> Path:
    if config_file is not None:
        return Path(config_file)

    explicit = (os.environ.get("PERSONAPI_LOG_CONFIG") or "").strip()
    if explicit:
        return Path(explicit).expanduser()

    config_dir = (os.environ.get("PERSONAPI_CONFIG_DIR") or "").strip()
    base = Path(config_dir).expanduser() if config_dir else Path.home() / ".personapi"
    return base / "logging.json"


def load_config(config_file: PathLike = None) -> Dict[str, Any]:
    """Return the stored logging configuration.

    A missing, unreadable or non-object file yields an empty dict.
    """

    path = _config_path(config_file)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: Dict[str, Any], config_file: PathLike = None) -> Path:
    path = _config_path(config_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(config, handle, indent=2, sort_keys=True)
        handle.write("\n")
    return path


def level_name(level: str | int) -> str:
    """Normalize ``level`` to its canonical upper-case name.

    Raises
    ------
    ValueError
        If ``level`` is not a known logging level.
    """

    if isinstance(level, int):
        name = logging.getLevelName(level)
        if isinstance(name, str) and not name.startswith("Level "):
            return name
        raise ValueError(f"Unknown logging level: {level!r}")

    name = str(level).strip().upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    raise ValueError(f"Unknown logging level: {level!r}")


def load_log_level(config_file: PathLike = None) -> Optional[int]:
    """Fetch the persisted numeric log level, if any."""

    value = load_config(config_file).get("log_level")
    if value is None:
        return None
    if isinstance(value, int):
        return value
    candidate = logging.getLevelName(str(value).upper())
    return candidate if isinstance(candidate, int) else None


def save_log_level(level: str | int, config_file: PathLike = None) -> Path:
    """Persist ``level`` and return the path it was written to."""

    config = load_config(config_file)
    config["log_level"] = level_name(level)
    return save_config(config, config_file)


__all__ = [
    "load_config",
    "save_config",
    "level_name",
    "load_log_level",
    "save_log_level",
]
