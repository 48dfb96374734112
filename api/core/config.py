"""
Environment-driven settings.

Everything is read lazily from `os.environ` so tests can monkeypatch
variables without reloading modules.
"""

from __future__ import annotations

import os
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit


def _env_str(name: str, default: str = "") -> str:
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
    # asyncpg takes ssl as a keyword, not as a libpq query parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    """
    DSN for the timesheet database.

    DATABASE_URL wins; otherwise the DSN is assembled from DB_USER,
    DB_PASSWORD, DB_NAME, DB_HOST and DB_PORT.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return _sanitize_database_url(url)

    user = _env_str("DB_USER")
    name = _env_str("DB_NAME")
    if not user or not name:
        raise RuntimeError("Set DATABASE_URL or DB_USER and DB_NAME.")

    password = os.environ.get("DB_PASSWORD", "")
    host = _env_str("DB_HOST", "localhost")
    port = _env_int("DB_PORT", 5432)

    credentials = quote(user, safe="")
    if password:
        credentials += ":" + quote(password, safe="")
    return f"postgresql://{credentials}@{host}:{port}/{quote(name, safe='')}"


def database_ssl() -> str | None:
    return _env_str("DB_SSL") or None


def pool_min_size() -> int:
    # At least one connection so startup fails fast when the DB is down.
    return max(1, _env_int("DB_POOL_MIN", 1))


def pool_max_size() -> int:
    return max(pool_min_size(), _env_int("DB_POOL_MAX", 10))


def pool_idle_timeout() -> float:
    return _env_float("DB_POOL_IDLE_TIMEOUT", 30.0)


def command_timeout() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 30.0)


def server_host() -> str:
    return _env_str("HOST", "0.0.0.0")


def server_port() -> int:
    return _env_int("PORT", 8000)


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "*")
    origins = [item.strip() for item in raw.split(",")]
    return [item for item in origins if item] or ["*"]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
