"""Settings loading."""

from .loader import DEFAULT_SETTINGS_PATH, load_settings, validate_secret_env

__all__ = ["DEFAULT_SETTINGS_PATH", "load_settings", "validate_secret_env"]
