"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    api_host: str
    api_port: int
    backtracking_time_budget_ms: int
    max_events_per_request: int
    max_halls_per_request: int
    random_event_count: int
    random_range_start: int
    random_range_end: int
    random_min_length: int
    random_max_length: int
    random_seed: Optional[int]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process; use ``get_settings.cache_clear()`` to reload."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Hall Scheduler"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=_env_int("API_PORT", 8000),
        backtracking_time_budget_ms=_env_int("BACKTRACKING_TIME_BUDGET_MS", 500),
        max_events_per_request=_env_int("MAX_EVENTS_PER_REQUEST", 500),
        max_halls_per_request=_env_int("MAX_HALLS_PER_REQUEST", 100),
        random_event_count=_env_int("RANDOM_EVENT_COUNT", 10),
        random_range_start=_env_int("RANDOM_RANGE_START", 0),
        random_range_end=_env_int("RANDOM_RANGE_END", 20),
        random_min_length=_env_int("RANDOM_MIN_LENGTH", 1),
        random_max_length=_env_int("RANDOM_MAX_LENGTH", 6),
        random_seed=_env_optional_int("RANDOM_SEED"),
    )
