"""Settings loaded from environment variables.

Every knob has a default so the package runs with no environment at all;
only the LLM key is needed to actually call the chat endpoint.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DATA_DIR = Path(__file__).resolve().parent / "data"

LLM_URL = "https://api.openai.com/v1"
LLM_MODEL = "gpt-4.1-mini"
LLM_TIMEOUT = 120
TRANSLATION_TTL_SECONDS = 6 * 60 * 60


class SettingsError(ValueError):
    """Raised when an environment value is invalid."""


@dataclass(frozen=True)
class Settings:
    llm_url: str = LLM_URL
    llm_model: str = LLM_MODEL
    llm_api_key: Optional[str] = None
    llm_timeout: int = LLM_TIMEOUT
    translation_ttl_seconds: int = TRANSLATION_TTL_SECONDS
    manual_top_k: int = 6
    gas_top_k: int = 50
    weak_score: int = 10
    gas_display_cap: int = 12
    manual_path: str = str(DATA_DIR / "manual.json")
    gas_path: str = str(DATA_DIR / "gasolineras.json")
    log_level: str = "INFO"


def _as_positive_int(raw: Mapping[str, str], key: str, default: int) -> int:
    value = raw.get(key)
    if value is None or not value.strip():
        return default
    try:
        number = int(value)
    except ValueError:
        raise SettingsError(f"Invalid value for {key}: expected integer, got {value!r}")
    if number <= 0:
        raise SettingsError(f"Invalid value for {key}: expected positive integer")
    return number


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        llm_url=env.get("LLM_URL", defaults.llm_url).rstrip("/"),
        llm_model=env.get("LLM_MODEL", defaults.llm_model),
        llm_api_key=env.get("LLM_API_KEY") or env.get("OPENAI_API_KEY"),
        llm_timeout=_as_positive_int(env, "LLM_TIMEOUT", defaults.llm_timeout),
        translation_ttl_seconds=_as_positive_int(
            env, "TRANSLATION_TTL_SECONDS", defaults.translation_ttl_seconds
        ),
        manual_top_k=_as_positive_int(env, "MANUAL_TOP_K", defaults.manual_top_k),
        gas_top_k=_as_positive_int(env, "GAS_TOP_K", defaults.gas_top_k),
        weak_score=_as_positive_int(env, "WEAK_SCORE", defaults.weak_score),
        gas_display_cap=_as_positive_int(env, "GAS_DISPLAY_CAP", defaults.gas_display_cap),
        manual_path=env.get("MANUAL_PATH", defaults.manual_path),
        gas_path=env.get("GAS_PATH", defaults.gas_path),
        log_level=env.get("LOG_LEVEL", defaults.log_level).upper(),
    )
