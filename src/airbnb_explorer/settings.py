from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .collection import MIN_HOST_LISTINGS, TOP_HOSTS_LIMIT


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip().lower()
    if v in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from ``ABNB_*`` environment variables.

    Defaults match the documented report behavior (top 10 hosts, hosts with
    at least 3 listings).
    """

    log_level: str
    log_json: bool
    top_hosts_limit: int
    min_host_listings: int
    export_root: Path

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=(os.getenv("ABNB_LOG_LEVEL") or "WARNING").strip().upper(),
            log_json=_env_bool("ABNB_LOG_JSON", False),
            top_hosts_limit=_env_int("ABNB_TOP_HOSTS_LIMIT", TOP_HOSTS_LIMIT),
            min_host_listings=_env_int("ABNB_MIN_HOST_LISTINGS", MIN_HOST_LISTINGS),
            export_root=Path(os.getenv("ABNB_EXPORT_ROOT") or os.getcwd()),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Test helper to force env re-read."""

    get_settings.cache_clear()
