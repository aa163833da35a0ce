"""
Environment-driven settings.

Values are read lazily from the process environment so tests and the CLI
can override them without reloading modules. `.env` files are loaded by
the entry points (`main.py`, `importer/cli.py`) before anything here runs.
"""

from __future__ import annotations

import os
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    # asyncpg rejects libpq's `sslmode` query parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def db_pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_size() -> int:
    return max(1, _env_int("DB_POOL_SIZE", 10))


def db_idle_timeout_s() -> float:
    """
    Seconds an idle pooled connection is kept before it is closed.

    `DB_IDLE_TIMEOUT_S` wins; the older `DB_IDLE_TIMEOUT` is in milliseconds.
    """
    if os.environ.get("DB_IDLE_TIMEOUT_S", "").strip():
        return _env_float("DB_IDLE_TIMEOUT_S", 30.0)
    return _env_float("DB_IDLE_TIMEOUT", 30000.0) / 1000.0


def db_command_timeout_s() -> float:
    return _env_float("DB_COMMAND_TIMEOUT_S", 30.0)


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def environment() -> str:
    return _env_str("ENVIRONMENT", "development").lower()


def is_development() -> bool:
    return environment() == "development"


def port() -> int:
    return _env_int("PORT", 8000)


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
