"""Logger setup shared by the API, the CLI and the services.

Modules call ``get_logger(__file__)``. The first call for a name attaches a
file handler writing to ``personapi.log`` under ``PERSONAPI_LOG_DIR`` and,
unless ``console=False``, a stderr handler. Later calls hand back the same
logger untouched until :func:`reset_logger` forgets it.
"""

import logging
import os
import sys
from pathlib import Path

from .config import load_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured: set[str] = set()


def log_file_path() -> Path:
    log_dir = os.environ.get("PERSONAPI_LOG_DIR") or Path.home() / ".personapi" / "logs"
    return Path(log_dir) / "personapi.log"


def _logger_name(name: str) -> str:
    """Turn a module path such as ``.../personapi/db/store.py`` into ``personapi.db.store``."""

    path = Path(name)
    if path.suffix != ".py":
        return name
    parts = path.with_suffix("").parts
    if "personapi" not in parts:
        return path.stem
    start = len(parts) - 1 - parts[::-1].index("personapi")
    return ".".join(parts[start:])


def _resolve_level(level: int | None) -> int:
    if level is not None:
        return level
    env_level = logging.getLevelName((os.environ.get("PERSONAPI_LOG_LEVEL") or "").strip().upper())
    if isinstance(env_level, int):
        return env_level
    saved = load_log_level()
    return logging.INFO if saved is None else saved


def get_logger(
    name: str = "personapi",
    level: int | None = None,
    log_file: str | os.PathLike | None = None,
    console: bool = True,
    propagate: bool = False,
) -> logging.Logger:
    """Return the logger for ``name``, configuring it on first use.

    ``level`` defaults to ``PERSONAPI_LOG_LEVEL``, then the level saved by
    ``personapi logging set-level``, then INFO.
    """

    logger = logging.getLogger(_logger_name(name))
    if logger.name in _configured:
        return logger

    path = Path(log_file) if log_file is not None else log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [logging.FileHandler(path, encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(_resolve_level(level))
    logger.propagate = propagate
    _configured.add(logger.name)
    return logger


def reset_logger(name: str | None = None) -> None:
    """Detach and close the handlers of ``name`` (or of every configured logger)."""

    names = list(_configured) if name is None else [_logger_name(name)]
    for logger_name in names:
        logger = logging.getLogger(logger_name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _configured.discard(logger_name)


def get_configured_level(name: str = "personapi") -> str:
    return logging.getLevelName(logging.getLogger(_logger_name(name)).getEffectiveLevel())
