"""TOML configuration loading.

Files are layered: config/default.toml first, then the overlay for the
active environment. Overlay tables merge key by key, so an environment can
add one prompt to [prompts.defaults] without repeating the rest; arrays such
as [[prompts.entries]] are replaced whole.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "PROMPTRELAY_CONFIG_DIR"
ENVIRONMENT_ENV = "PROMPTRELAY_ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_CONFIG_FILE = "default.toml"

# Parent directories searched for config/ when PROMPTRELAY_CONFIG_DIR is unset
_SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Locate the configuration directory.

    PROMPTRELAY_CONFIG_DIR wins and must exist. Otherwise the nearest
    'config/' in the working directory or its parents is used.

    Raises:
        FileNotFoundError: PROMPTRELAY_CONFIG_DIR points nowhere
    """
    configured = os.environ.get(CONFIG_DIR_ENV)
    if configured:
        path = Path(configured)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {configured}")
        return path

    current = Path.cwd()
    for _ in range(_SEARCH_DEPTH):
        candidate = current / "config"
        if candidate.exists():
            return candidate
        current = current.parent

    return Path("config")


def get_environment() -> str:
    """Active environment name from PROMPTRELAY_ENV, 'development' if unset or blank."""
    return os.environ.get(ENVIRONMENT_ENV, "").strip() or DEFAULT_ENVIRONMENT


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base.

    Tables merge recursively; any other value, lists included, replaces
    the base value.
    """
    result = base.copy()

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Load the base configuration and the environment overlay.

    Args:
        config_dir: Directory holding the TOML files (default: get_config_dir())
        environment: Overlay name (default: get_environment())

    Returns:
        Merged configuration dictionary

    Raises:
        FileNotFoundError: default.toml is missing
    """
    config_dir = config_dir or get_config_dir()
    environment = (environment or "").strip() or get_environment()

    base_path = config_dir / BASE_CONFIG_FILE
    if not base_path.exists():
        raise FileNotFoundError(
            f"Base configuration file not found: {base_path}. "
            f"Create config/{BASE_CONFIG_FILE} or set {CONFIG_DIR_ENV}."
        )

    config = load_toml(base_path)

    overlay_path = config_dir / f"{environment}.toml"
    if environment != "default" and overlay_path.exists():
        config = deep_merge(config, load_toml(overlay_path))

    return config
