"""Environment-driven settings for the Riseset API."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from threading import Lock
from typing import Optional, Tuple

LOGGER = logging.getLogger(__name__)

DEFAULT_DELTA_T = 67.0
DEFAULT_CORS_ORIGINS = ("https://risesetol.vercel.app",)
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

_SETTINGS: Optional["Settings"] = None
_LOAD_LOCK = Lock()


class ConfigurationError(RuntimeError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    delta_t: float = DEFAULT_DELTA_T
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_delta_t(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_DELTA_T
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"RISESET_DELTA_T must be a number of seconds: {raw!r}") from exc
    if abs(value) > 8000:
        raise ConfigurationError(f"RISESET_DELTA_T must lie within ±8000 seconds: {value}")
    return value


def _parse_origins(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _parse_log_level(raw: Optional[str]) -> str:
    if raw is None or not raw.strip():
        return DEFAULT_LOG_LEVEL
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(f"RISESET_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}: {raw!r}")
    return level


def settings_from_env() -> Settings:
    """Build :class:`Settings` from ``RISESET_*`` environment variables."""

    return Settings(
        delta_t=_parse_delta_t(os.environ.get("RISESET_DELTA_T")),
        cors_origins=_parse_origins(os.environ.get("RISESET_CORS_ORIGINS")),
        log_level=_parse_log_level(os.environ.get("RISESET_LOG_LEVEL")),
    )


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""

    global _SETTINGS

    if _SETTINGS is not None:
        return _SETTINGS

    with _LOAD_LOCK:
        if _SETTINGS is not None:
            return _SETTINGS
        _SETTINGS = settings_from_env()
        LOGGER.info(
            json.dumps(
                {
                    "event": "settings_loaded",
                    "delta_t": _SETTINGS.delta_t,
                    "cors_origins": list(_SETTINGS.cors_origins),
                    "log_level": _SETTINGS.log_level,
                }
            )
        )
        return _SETTINGS


def reset_settings() -> None:
    """Forget cached settings so the next :func:`get_settings` rereads the environment."""

    global _SETTINGS

    with _LOAD_LOCK:
        _SETTINGS = None
