"""
Runtime settings read from environment variables.

Everything the service needs to reach the database (and to bind its own
socket) is configurable here; nothing is hard-coded at the call sites.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
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


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def sanitize_database_url(url: str) -> str:
    """
    Drop `sslmode` from the DSN query string; asyncpg rejects it.
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


@dataclass(frozen=True)
class Settings:
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "sample"
    database_url: str | None = None
    pool_min_size: int = 1
    pool_size: int = 5
    acquire_timeout: float = 10.0
    command_timeout: float = 30.0
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        url = os.environ.get("DATABASE_URL", "").strip()
        pool_size = max(1, _env_int("DB_POOL_SIZE", 5))
        return cls(
            db_host=_env_str("DB_HOST", "localhost"),
            db_port=_env_int("DB_PORT", 5432),
            db_user=_env_str("DB_USER", "postgres"),
            db_password=os.environ.get("DB_PASSWORD", ""),
            db_name=_env_str("DB_NAME", "sample"),
            database_url=sanitize_database_url(url) if url else None,
            pool_min_size=min(max(0, _env_int("DB_POOL_MIN_SIZE", 1)), pool_size),
            pool_size=pool_size,
            acquire_timeout=_env_float("DB_ACQUIRE_TIMEOUT", 10.0),
            command_timeout=_env_float("DB_COMMAND_TIMEOUT", 30.0),
            api_host=_env_str("API_HOST", "0.0.0.0"),
            api_port=_env_int("API_PORT", 3000),
            cors_origins=_env_list("CORS_ORIGINS", ["*"]),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )

    def connect_kwargs(self) -> dict:
        """
        Keyword arguments for `asyncpg.create_pool` describing the target.
        """
        if self.database_url:
            return {"dsn": self.database_url}
        return {
            "host": self.db_host,
            "port": self.db_port,
            "user": self.db_user,
            "password": self.db_password or None,
            "database": self.db_name,
        }
