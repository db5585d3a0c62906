"""
Runtime configuration.

Settings are read once from the process environment (optionally seeded
from a .env file by :func:`jobboard.env.load_env`).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Optional[Path] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def normalize_database_url(url: str) -> str:
    """Rewrite the legacy ``postgres://`` scheme that SQLAlchemy rejects."""
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Settings instance

    Raises:
        ConfigError: DATABASE_URL is missing, or LOG_LEVEL/PORT are invalid
    """
    env = os.environ if environ is None else environ

    database_url = (env.get("DATABASE_URL") or "").strip()
    if not database_url:
        raise ConfigError("DATABASE_URL must be set. Did you forget to provision a database?")

    log_level = (env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}")

    log_dir = (env.get("LOG_DIR") or "").strip()

    port_raw = (env.get("PORT") or "").strip()
    try:
        port = int(port_raw) if port_raw else DEFAULT_PORT
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {port_raw!r}")
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")

    return Settings(
        database_url=normalize_database_url(database_url),
        log_level=log_level,
        log_dir=Path(log_dir) if log_dir else None,
        host=(env.get("HOST") or DEFAULT_HOST).strip(),
        port=port,
    )
