"""
FILE: questboard/config.py
PURPOSE: Settings loaded from environment variables
EXPORTS:
  - Settings (frozen dataclass)
  - get_settings() -> Settings (cached)
  - reset_settings_cache() -> None
DEPENDENCIES:
  - os, pathlib, dataclasses, functools, logging (stdlib)
NOTES:
  - All variables use the QUESTBOARD_ prefix
  - Malformed values fall back to defaults, nothing raises at import time
  - Tests either build Settings directly or reset the cache after monkeypatching env
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_PREFIX = "QUESTBOARD"

DEFAULT_DATA_DIR = Path.home() / ".questboard"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: int = logging.WARNING
    log_to_file: bool = True
    tick_seconds: float = 1.0

    @property
    def db_path(self) -> Path:
        return self.data_dir / "questboard.db"

    @property
    def log_dir(self) -> Path:
        return self.data_dir


def load_settings() -> Settings:
    return Settings(
        data_dir=_env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR),
        log_level=_env_level(_k("LOG_LEVEL"), logging.WARNING),
        log_to_file=_env_bool(_k("LOG_FILE"), True),
        tick_seconds=_env_float(_k("TICK_SECONDS"), 1.0),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
