# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from typing import List


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    """Centralized configuration for the dashboard backend."""

    def __init__(self) -> None:
        self.upstream_base_url: str = (
            os.environ.get("SPARKYFITNESS_API_URL") or "https://api.sparkyfitness.com"
        ).rstrip("/")
        # identity:apiKey or identity:accessSecret:apiKey, comma separated.
        self.users_raw: str = os.environ.get("SPARKYVIZ_USERS") or ""
        self.fallback_api_key: str = os.environ.get("SPARKYFITNESS_API_KEY") or ""
        self.default_user: str = (os.environ.get("SPARKYVIZ_DEFAULT_USER") or "me").strip() or "me"

        self.upstream_timeout: float = _env_float("SPARKYVIZ_UPSTREAM_TIMEOUT", 10.0)
        self.request_deadline: float = _env_float("SPARKYVIZ_REQUEST_DEADLINE", 30.0)
        self.max_concurrency: int = max(1, _env_int("SPARKYVIZ_MAX_CONCURRENCY", 10))
        self.default_days: int = _env_int("SPARKYVIZ_DEFAULT_DAYS", 90)
        self.max_days: int = _env_int("SPARKYVIZ_MAX_DAYS", 366)

        self.log_level: str = (os.environ.get("SPARKYVIZ_LOG_LEVEL") or "INFO").upper()
        self.host: str = os.environ.get("SPARKYVIZ_HOST") or os.environ.get("HOST") or "127.0.0.1"
        self.port: int = _env_int("SPARKYVIZ_PORT", _env_int("PORT", 8000))

        cors = os.environ.get("SPARKYVIZ_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    @property
    def credentials_source(self) -> str:
        """Credential list to parse, falling back to the single-key setup."""
        if self.users_raw.strip():
            return self.users_raw
        if self.fallback_api_key.strip():
            return f"{self.default_user}:{self.fallback_api_key.strip()}"
        return ""


settings = Settings()
