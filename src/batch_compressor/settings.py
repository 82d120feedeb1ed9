from __future__ import annotations

import os
from dataclasses import dataclass

from batch_compressor.errors import ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "INFO"


def _default_workers() -> int:
    return max(1, os.cpu_count() or 1)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{name} must be >= 1, got {value}")
    return value


def load_log_level() -> str | None:
    """Level name from BATCH_COMPRESSOR_LOG_LEVEL, or None when unset."""
    raw = os.getenv("BATCH_COMPRESSOR_LOG_LEVEL", "").strip().upper()
    if raw == "":
        return None
    if raw not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {raw}")
    return raw


@dataclass(frozen=True)
class Settings:
    # Worker threads used per batch
    max_workers: int

    # Logging
    log_level: str


def load_settings() -> Settings:
    return Settings(
        max_workers=_get_int("BATCH_COMPRESSOR_MAX_WORKERS", _default_workers()),
        log_level=load_log_level() or DEFAULT_LOG_LEVEL,
    )
