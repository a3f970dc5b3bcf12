"""Configuration for promptrelay.

Settings come from config/default.toml, the overlay for PROMPTRELAY_ENV and
PROMPTRELAY_* environment variables, in increasing priority.

Usage:
    from promptrelay.config import get_settings

    settings = get_settings()
    entries = settings.prompts.prompt_entries
    retries = settings.langfuse.resilience.max_retries
"""

from functools import lru_cache
from pathlib import Path

from promptrelay.config.loader import load_config
from promptrelay.config.settings import Settings, set_toml_config


def load_settings(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> Settings:
    """Build settings from a specific config directory and environment, uncached."""
    set_toml_config(load_config(config_dir, environment))
    return Settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings for the active environment.

    Call `get_settings.cache_clear()` or `reload_settings()` after changing
    the TOML files or PROMPTRELAY_* variables.
    """
    return load_settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "load_settings", "reload_settings", "Settings"]
