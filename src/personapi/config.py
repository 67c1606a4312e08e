"""Runtime settings resolved from ``PERSONAPI_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_AGIFY_URL = "https://api.agify.io/"
DEFAULT_GENDERIZE_URL = "https://api.genderize.io/"
DEFAULT_NATIONALIZE_URL = "https://api.nationalize.io/"

DEFAULT_ENRICH_TIMEOUT_SECONDS = 5.0
ENRICH_POLICIES = ("strict", "partial")

_DEFAULT_CORS_ORIGINS = (
    "http://127.0.0.1:3000",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://localhost:5173",
)


def _parse_csv_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(key: str, default: str) -> str:
    raw = (os.getenv(key) or "").strip()
    return raw or default


def _env_float(key: str, default: float, *, minimum: float) -> float:
    raw = (os.getenv(key) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    raw = (os.getenv(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _enrich_policy() -> str:
    raw = (os.getenv("PERSONAPI_ENRICH_POLICY") or "").strip().lower()
    if not raw:
        return "strict"
    if raw not in ENRICH_POLICIES:
        raise ValueError(
            f"PERSONAPI_ENRICH_POLICY must be one of {', '.join(ENRICH_POLICIES)}; got {raw!r}"
        )
    return raw


def default_db_path() -> str:
    return str(Path.home() / "personapi" / "personapi.db")


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the service configuration."""

    db_path: str
    sql_trace: bool
    enrich_timeout_seconds: float
    enrich_policy: str
    agify_url: str
    genderize_url: str
    nationalize_url: str
    cors_origins: tuple[str, ...]
    cors_allow_credentials: bool
    host: str
    port: int

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=_env_str("PERSONAPI_DB_PATH", default_db_path()),
            sql_trace=_is_truthy(os.getenv("PERSONAPI_SQL_TRACE")),
            enrich_timeout_seconds=_env_float(
                "PERSONAPI_ENRICH_TIMEOUT_SECONDS",
                DEFAULT_ENRICH_TIMEOUT_SECONDS,
                minimum=0.1,
            ),
            enrich_policy=_enrich_policy(),
            agify_url=_env_str("PERSONAPI_AGIFY_URL", DEFAULT_AGIFY_URL),
            genderize_url=_env_str("PERSONAPI_GENDERIZE_URL", DEFAULT_GENDERIZE_URL),
            nationalize_url=_env_str("PERSONAPI_NATIONALIZE_URL", DEFAULT_NATIONALIZE_URL),
            cors_origins=tuple(
                _parse_csv_list(os.getenv("PERSONAPI_CORS_ORIGINS")) or _DEFAULT_CORS_ORIGINS
            ),
            cors_allow_credentials=_is_truthy(os.getenv("PERSONAPI_CORS_ALLOW_CREDENTIALS")),
            host=_env_str("PERSONAPI_HOST", "localhost"),
            port=_env_int("PERSONAPI_PORT", 8000),
        )


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the process-wide settings, read once on first use."""

    return Settings.from_env()
