"""
dwlr_ingest/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_ENV_PREFIXES = ("DWLR_", "LOG_LEVEL")


def load_env_files(env_dir: Path | None = None) -> None:
    """
    Export DWLR_* and LOG_LEVEL pairs from the project `.env` file.

    Variables already set in the process environment win over the file.
    """

    env_path = (env_dir or Path(__file__).resolve().parents[1]) / ".env"
    if not env_path.is_file():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key.startswith("export "):
            key = key[len("export "):].strip()
        if key.startswith(_ENV_PREFIXES) and key not in os.environ:
            os.environ[key] = value.strip('"').strip("'")


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for upload ingestion.

    Status offsets are added to the running mean level: readings above
    ``mean + status_critical_offset`` are critical, above
    ``mean + status_warning_offset`` are warnings.
    """

    status_warning_offset: float = 2.0
    status_critical_offset: float = 5.0
    max_display_errors: int = 10
    log_row_errors: bool = True
    max_upload_bytes: int = 10 * 1024 * 1024


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    warning_offset = max(0.0, _get_float_env("DWLR_STATUS_WARNING_OFFSET", 2.0))
    critical_offset = max(
        warning_offset,
        _get_float_env("DWLR_STATUS_CRITICAL_OFFSET", 5.0),
    )
    return IngestionSettings(
        status_warning_offset=warning_offset,
        status_critical_offset=critical_offset,
        max_display_errors=max(1, _get_int_env("DWLR_MAX_DISPLAY_ERRORS", 10)),
        log_row_errors=_get_bool_env("DWLR_LOG_ROW_ERRORS", True),
        max_upload_bytes=max(1, _get_int_env("DWLR_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())
