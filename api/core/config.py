"""
Environment-backed settings.

Every value has a fallback so the service starts with no environment at all
(local Postgres on the default port, HTTP on :8080).
"""

from __future__ import annotations

import os

DEFAULT_DATABASE_URL = "postgres://localhost:5432/persons?sslmode=disable"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_COMMAND_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


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


def database_url() -> str:
    return _env_str("DATABASE_URL", DEFAULT_DATABASE_URL)


def host() -> str:
    return _env_str("HOST", DEFAULT_HOST)


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", DEFAULT_POOL_MIN_SIZE))


def pool_max_size() -> int:
    # asyncpg rejects max_size < min_size.
    return max(1, pool_min_size(), _env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE))


def command_timeout() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT)


def log_level() -> str:
    return _env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
