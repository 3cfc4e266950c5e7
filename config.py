"""
config.py
---------
Central configuration module. Loads environment variables (optionally
from a .env file) and exposes them as a typed Settings object.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# ── Required keys ─────────────────────────────────────────
DB_USER_KEY = "DB_USER"
DB_PASSWORD_KEY = "DB_PASSWORD"
DB_HOST_KEY = "DB_HOST"
DB_NAME_KEY = "DB_NAME"

REQUIRED_ENV = (DB_USER_KEY, DB_PASSWORD_KEY, DB_HOST_KEY)


class ConfigError(Exception):
    """Raised when the environment is missing or has malformed settings."""


@dataclass(frozen=True)
class Settings:
    """
    Process configuration.

    Attributes:
        db_user: Database role name.
        db_password: Database password.
        db_host: Database host name.
        db_name: Database name ('' lets the server pick the default).
        db_port: Database TCP port.
        db_pool_min: Connections kept open by the pool.
        db_pool_max: Upper bound on pooled connections.
        db_connect_interval: Seconds between startup connection attempts.
        db_connect_attempts: Connection attempts before startup gives up.
        http_host: Interface the HTTP server binds to.
        http_port: Port the HTTP server listens on.
        log_level: Root log level name.
    """
    db_user: str
    db_password: str
    db_host: str
    db_name: str = ""
    db_port: int = 5432
    db_pool_min: int = 1
    db_pool_max: int = 10
    db_connect_interval: float = 0.2
    db_connect_attempts: int = 150
    http_host: str = "0.0.0.0"
    http_port: int = 5000
    log_level: str = "INFO"


def _number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key, "")
    if not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None


def load_config(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        environ: Mapping to read from. Defaults to os.environ after
            loading a local .env file.

    Raises:
        ConfigError: If a required variable is absent or a number is malformed.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    missing = [key for key in REQUIRED_ENV if key not in environ]
    if missing:
        raise ConfigError(f"must set {', '.join(missing)}")

    settings = Settings(
        db_user=environ[DB_USER_KEY],
        db_password=environ[DB_PASSWORD_KEY],
        db_host=environ[DB_HOST_KEY],
        db_name=environ.get(DB_NAME_KEY, ""),
        db_port=_number(environ, "DB_PORT", 5432, int),
        db_pool_min=_number(environ, "DB_POOL_MIN", 1, int),
        db_pool_max=_number(environ, "DB_POOL_MAX", 10, int),
        db_connect_interval=_number(environ, "DB_CONNECT_INTERVAL", 0.2, float),
        db_connect_attempts=_number(environ, "DB_CONNECT_ATTEMPTS", 150, int),
        http_host=environ.get("HTTP_HOST", "0.0.0.0"),
        http_port=_number(environ, "HTTP_PORT", 5000, int),
        log_level=environ.get("LOG_LEVEL", "INFO"),
    )

    if settings.db_pool_min < 1 or settings.db_pool_max < settings.db_pool_min:
        raise ConfigError("DB_POOL_MIN must be >= 1 and <= DB_POOL_MAX")
    if settings.db_connect_attempts < 1:
        raise ConfigError("DB_CONNECT_ATTEMPTS must be >= 1")
    return settings
