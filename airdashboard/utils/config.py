"""Configuration helpers for the provider endpoint and dashboard defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

DEFAULT_API_BASE_URL = "http://localhost:8000"


@dataclass(frozen=True)
class DashboardSettings:
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = 30.0
    retries: int = 1
    cache_ttl_seconds: float = 300.0
    default_country: str = "IN"
    default_city: str = "New Delhi"
    log_level: str = "INFO"


def _read_values(env_path: Path | None) -> Dict[str, Optional[str]]:
    """Merge a .env file under the process environment; the environment wins."""
    env_path = env_path or Path(".env")
    values: Dict[str, Optional[str]] = {}
    if env_path.exists():
        values.update(dotenv_values(str(env_path)))
    for key, value in os.environ.items():
        if key.startswith("AIRDASH_"):
            values[key] = value
    return values


def load_settings(env_path: Path | None = None) -> DashboardSettings:
    """Load dashboard settings from environment variables or a .env file."""
    values = _read_values(env_path)
    defaults = DashboardSettings()

    def pick(name: str, fallback):
        raw = values.get(name)
        if raw is None or raw == "":
            return fallback
        return raw

    try:
        return DashboardSettings(
            api_base_url=str(pick("AIRDASH_API_BASE_URL", defaults.api_base_url)).rstrip("/"),
            timeout_seconds=float(pick("AIRDASH_TIMEOUT_SECONDS", defaults.timeout_seconds)),
            retries=int(pick("AIRDASH_RETRIES", defaults.retries)),
            cache_ttl_seconds=float(pick("AIRDASH_CACHE_TTL_SECONDS", defaults.cache_ttl_seconds)),
            default_country=str(pick("AIRDASH_DEFAULT_COUNTRY", defaults.default_country)),
            default_city=str(pick("AIRDASH_DEFAULT_CITY", defaults.default_city)),
            log_level=str(pick("AIRDASH_LOG_LEVEL", defaults.log_level)),
        )
    except ValueError as exc:
        raise RuntimeError(f"Invalid dashboard configuration: {exc}") from exc
