from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str, default=None):
    value = _env(name)
    if not value:
        return default
    return json.loads(value)


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    jwt_secret: str
    default_plan_id: str
    domain_fetch_timeout_seconds: float
    session_idle_seconds: float
    refresh_debounce_seconds: float
    change_poll_interval_seconds: float
    log_level: str
    cors_allow_origins: list


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        jwt_secret=_env("JWT_SECRET", ""),
        default_plan_id=_env("DEFAULT_PLAN_ID", "free"),
        domain_fetch_timeout_seconds=float(_env("DOMAIN_FETCH_TIMEOUT_SECONDS", "5")),
        session_idle_seconds=float(_env("DASHBOARD_SESSION_IDLE_SECONDS", "900")),
        refresh_debounce_seconds=float(_env("REFRESH_DEBOUNCE_SECONDS", "0.25")),
        change_poll_interval_seconds=float(_env("CHANGE_POLL_INTERVAL_SECONDS", "5")),
        log_level=_env("LOG_LEVEL", "INFO"),
        cors_allow_origins=_json("CORS_ALLOW_ORIGINS", ["*"]),
    )
