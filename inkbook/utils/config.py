"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parents[2]
SUPPORTED_STORAGE_BACKENDS = ("sqlite", "memory")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid float for {env_var}: {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by repository, services and controllers."""

    app_name: str = "Inkbook Studio API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    database_path: Path = field(default=PROJECT_ROOT / "data" / "inkbook.db")
    storage_backend: str = "sqlite"
    admin_token: str = ""
    admin_session_ttl_seconds: int = 12 * 60 * 60
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    dashboard_api_url: str = "http://127.0.0.1:8000/api"
    api_timeout_seconds: float = 10.0


def _validate_settings(settings: Settings) -> None:
    if settings.storage_backend not in SUPPORTED_STORAGE_BACKENDS:
        raise ValueError(
            f"STORAGE_BACKEND must be one of {SUPPORTED_STORAGE_BACKENDS}, "
            f"got {settings.storage_backend!r}"
        )
    if settings.api_prefix and not settings.api_prefix.startswith("/"):
        raise ValueError(f"API_PREFIX must start with '/', got {settings.api_prefix!r}")
    if not 0 < settings.port < 65536:
        raise ValueError(f"PORT must be between 1 and 65535, got {settings.port}")
    if settings.admin_session_ttl_seconds <= 0:
        raise ValueError(
            f"ADMIN_SESSION_TTL_SECONDS must be > 0, got {settings.admin_session_ttl_seconds}"
        )
    if settings.api_timeout_seconds <= 0:
        raise ValueError(
            f"API_TIMEOUT_SECONDS must be > 0, got {settings.api_timeout_seconds}"
        )


def load_settings() -> Settings:
    """Build settings from the process environment (and a local .env file)."""
    load_dotenv()
    settings = Settings(
        app_name=os.getenv("APP_NAME", Settings.app_name),
        app_version=os.getenv("APP_VERSION", Settings.app_version),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
        database_path=Path(
            os.getenv("DATABASE_PATH", str(PROJECT_ROOT / "data" / "inkbook.db"))
        ),
        storage_backend=os.getenv("STORAGE_BACKEND", Settings.storage_backend).lower(),
        admin_token=os.getenv("ADMIN_TOKEN", ""),
        admin_session_ttl_seconds=_safe_int(
            "ADMIN_SESSION_TTL_SECONDS", str(Settings.admin_session_ttl_seconds)
        ),
        api_prefix=os.getenv("API_PREFIX", Settings.api_prefix).rstrip("/"),
        host=os.getenv("HOST", Settings.host),
        port=_safe_int("PORT", str(Settings.port)),
        dashboard_api_url=os.getenv("DASHBOARD_API_URL", Settings.dashboard_api_url),
        api_timeout_seconds=_safe_float(
            "API_TIMEOUT_SECONDS", str(Settings.api_timeout_seconds)
        ),
    )
    _validate_settings(settings)
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings; call ``get_settings.cache_clear()`` to reload."""
    return load_settings()
