"""
Centralized configuration for the meeting planner.

Settings come from the environment; main.py and the root conftest load
.env / .env.local before anything here is read.
"""

import os

DEFAULT_HOLIDAY_API_URL = "https://date.nager.at/api/v3"


def is_dev_mode() -> bool:
    """Check if running in development mode (--dev flag or DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_holiday_api_url() -> str:
    """Base URL of the public holiday source (Nager.Date compatible)."""
    return os.getenv("HOLIDAY_API_URL", DEFAULT_HOLIDAY_API_URL).rstrip("/")


def get_holiday_fetch_timeout() -> float:
    """Per-request timeout in seconds for holiday fetches."""
    return float(os.getenv("HOLIDAY_FETCH_TIMEOUT", "10"))


def get_sentry_dsn() -> str | None:
    """Sentry DSN, or None when error reporting is disabled."""
    return os.getenv("SENTRY_DSN") or None


def get_allowed_origins() -> list[str]:
    """
    Get list of allowed CORS origins.

    Includes localhost variants for dev and FRONTEND_URL when set.
    """
    ports = [get_api_port(), 3000, 5173]
    hosts = ["localhost", "127.0.0.1"]
    origins = [f"http://{host}:{port}" for host in hosts for port in ports]

    env_frontend = os.environ.get("FRONTEND_URL")
    if env_frontend and env_frontend.rstrip("/") not in origins:
        origins.append(env_frontend.rstrip("/"))

    return origins
