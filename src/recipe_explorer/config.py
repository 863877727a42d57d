"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for recipe_explorer:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.recipe-explorer/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~recipe_explorer.models.GlobalConfig`
  JSON file storing API, cache, and output settings.
* **Data files** -- :func:`cache_file_path` (disposable, under the cache
  directory) and :func:`favorites_file_path` (user data, under the data
  directory).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the config file into the effective
  configuration.

All file writes use :func:`~recipe_explorer.storage.atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from recipe_explorer.exceptions import ConfigError
from recipe_explorer.models import GlobalConfig
from recipe_explorer.storage import atomic_write

_APP_NAME = "recipe-explorer"
_CONFIG_FILENAME = "config.json"
_CACHE_FILENAME = "cache.json"
_FAVORITES_FILENAME = "favorites.json"

ENV_API_URL = "RECIPE_EXPLORER_API_URL"
ENV_CACHE_TTL = "RECIPE_EXPLORER_CACHE_TTL"
ENV_NO_CACHE = "RECIPE_EXPLORER_NO_CACHE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/recipe-explorer/`` (default
    ``~/.config/recipe-explorer/``). On macOS/Windows: ``~/.recipe-explorer/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds the response cache, which can be deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/recipe-explorer/`` (default
    ``~/.cache/recipe-explorer/``). On macOS/Windows: ``~/.recipe-explorer/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (favourites, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/recipe-explorer/`` (default
    ``~/.local/share/recipe-explorer/``). On macOS/Windows:
    ``~/.recipe-explorer/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def cache_file_path() -> Path:
    """Path of the response cache file."""
    return get_cache_dir() / _CACHE_FILENAME


def favorites_file_path() -> Path:
    """Path of the favourites file."""
    return get_data_dir() / _FAVORITES_FILENAME


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~recipe_explorer.models.GlobalConfig`. If
        the file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_api_url: Optional[str] = None,
    cli_ttl: Optional[int] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--api-url``, ``--ttl``, ``--no-cache``)
        2. Environment variables (``RECIPE_EXPLORER_API_URL``,
           ``RECIPE_EXPLORER_CACHE_TTL``, ``RECIPE_EXPLORER_NO_CACHE``)
        3. User config (``~/.config/recipe-explorer/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file or an environment override is invalid.
    """
    config = load_global_config()

    env_url = os.environ.get(ENV_API_URL)
    if env_url:
        config.api.base_url = env_url
    env_ttl = os.environ.get(ENV_CACHE_TTL)
    if env_ttl:
        config.cache.ttl_seconds = _parse_ttl(env_ttl, source=ENV_CACHE_TTL)
    if os.environ.get(ENV_NO_CACHE, "").lower() in ("1", "true", "yes"):
        config.cache.enabled = False

    if cli_api_url is not None:
        config.api.base_url = cli_api_url
    if cli_ttl is not None:
        config.cache.ttl_seconds = _parse_ttl(str(cli_ttl), source="--ttl")
    if cli_no_cache:
        config.cache.enabled = False

    try:
        return GlobalConfig.model_validate(config.model_dump())
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _parse_ttl(value: str, source: str) -> int:
    try:
        ttl = int(value)
    except ValueError:
        raise ConfigError(f"{source} must be an integer number of seconds, got {value!r}") from None
    if ttl <= 0:
        raise ConfigError(f"{source} must be positive, got {ttl}")
    return ttl
