"""Runtime settings derived from environment variables.

Centralizes the mapping file location, the sysfs mount point and logging so
collector/API layers can remain declarative. Values are cached per process.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .config_loader import DEFAULT_MAPPING_FILE

DEFAULT_SYSFS_PATH = Path("/sys")


@dataclass(frozen=True)
class RuntimeSettings:
    """Container for runtime flags."""

    mapping_file: Path
    sysfs_path: Path
    log_level: str


def _normalize_log_level(value: str | None) -> str:
    if not value:
        return "INFO"
    level = value.strip().upper()
    if level in logging._nameToLevel:
        return level
    return "INFO"


def _env_path(value: str | None, default: Path) -> Path:
    if not value:
        return default
    return Path(value).expanduser()


def load_runtime_settings() -> RuntimeSettings:
    """Load settings without caching (useful for tests)."""

    mapping_file = _env_path(os.getenv("ACCELINV_MAPPING_FILE"), DEFAULT_MAPPING_FILE)
    sysfs_path = _env_path(os.getenv("ACCELINV_SYSFS_PATH"), DEFAULT_SYSFS_PATH)
    log_level = _normalize_log_level(os.getenv("LOG_LEVEL"))
    return RuntimeSettings(
        mapping_file=mapping_file,
        sysfs_path=sysfs_path,
        log_level=log_level,
    )


@lru_cache(maxsize=1)
def get_runtime_settings() -> RuntimeSettings:
    """Cached accessor used by runtime code."""

    return load_runtime_settings()


def reset_runtime_settings_cache() -> None:
    """Testing helper to clear cached settings."""

    get_runtime_settings.cache_clear()
