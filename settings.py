from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional


DEFAULT_RESPONSES_URL = "https://api.openai.com/v1/responses"
DEFAULT_MODEL = "gpt-4.1-mini"

_API_KEY_ENVS = ("EXPO_PUBLIC_OPENAI_API_KEY", "OPENAI_API_KEY")
_APP_CONFIG_ENV = "CO2_APP_CONFIG_PATH"
_RESPONSES_URL_ENV = "OPENAI_RESPONSES_URL"
_MODEL_ENV = "OPENAI_MODEL"
_DATA_PATH_ENV = "CO2_DATA_PATH"
_DISPLAY_SOURCE_ENV = "CO2_DISPLAY_SOURCE"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_DISPLAY_SOURCES = ("live", "file")


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str]
    responses_url: str
    model: str
    data_path: str
    display_source: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_app_config_key(path: Path) -> Optional[str]:
    """Return ``extra.openaiApiKey`` from an app config file, if any."""
    if not path.exists():
        return None
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8") or "{}")
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None

    container = data.get("expo", data)
    extra = container.get("extra") if isinstance(container, dict) else None
    if not isinstance(extra, dict):
        return None
    key = extra.get("openaiApiKey")
    if isinstance(key, str) and key.strip():
        return key.strip()
    return None


def _read_api_key() -> Optional[str]:
    for name in _API_KEY_ENVS:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    config_path = Path(_read_str_env(_APP_CONFIG_ENV, "app.json"))
    return _read_app_config_key(config_path)


def _read_display_source(default: str) -> str:
    candidate = _read_str_env(_DISPLAY_SOURCE_ENV, default).lower()
    return candidate if candidate in _DISPLAY_SOURCES else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        openai_api_key=_read_api_key(),
        responses_url=_read_str_env(_RESPONSES_URL_ENV, DEFAULT_RESPONSES_URL),
        model=_read_str_env(_MODEL_ENV, DEFAULT_MODEL),
        data_path=_read_str_env(_DATA_PATH_ENV, "data/latest_co2.json"),
        display_source=_read_display_source("live"),
        log_level=_read_log_level("INFO"),
    )
