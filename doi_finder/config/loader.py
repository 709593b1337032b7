"""YAML and env loader with fail-fast validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from doi_finder.models import SettingsConfig

REQUIRED_ENV_KEYS = ("GEMINI_API_KEY",)
DEFAULT_SETTINGS_PATH = "config/settings.yaml"


def _read_yaml(path: str) -> dict:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with resolved.open("r", encoding="utf-8") as file_obj:
        loaded = yaml.safe_load(file_obj) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Expected object at root of YAML file: {path}")
    return loaded


def load_settings(settings_path: Optional[str] = DEFAULT_SETTINGS_PATH) -> SettingsConfig:
    """Load settings from YAML, or return defaults when settings_path is None."""
    load_dotenv()
    if settings_path is None:
        return SettingsConfig()
    return SettingsConfig.model_validate(_read_yaml(settings_path))


def validate_secret_env() -> list[str]:
    """Return list of missing required env var names."""
    load_dotenv()
    return [key for key in REQUIRED_ENV_KEYS if not os.getenv(key)]
