from __future__ import annotations

import os
from dataclasses import dataclass

from tableside.infrastructure.http.api_client import DEFAULT_BASE_URL
from tableside.infrastructure.storage.token_store import DEFAULT_TOKEN_KEY


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_BASE_URL
    http_timeout_seconds: float = 10.0
    token_key: str = DEFAULT_TOKEN_KEY
    redis_url: str | None = None
    log_level: str = "INFO"
    enable_tracing: bool = True


def _env_flag(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    timeout_raw = os.getenv("TABLESIDE_HTTP_TIMEOUT_SECONDS", "10")
    try:
        timeout_seconds = float(timeout_raw)
    except ValueError as exc:
        raise RuntimeError(f"TABLESIDE_HTTP_TIMEOUT_SECONDS must be a number: {timeout_raw}") from exc

    return Settings(
        api_base_url=os.getenv("TABLESIDE_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        http_timeout_seconds=timeout_seconds,
        token_key=os.getenv("TABLESIDE_TOKEN_KEY", DEFAULT_TOKEN_KEY),
        redis_url=os.getenv("REDIS_URL") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        enable_tracing=_env_flag("TABLESIDE_TRACING", True),
    )
