"""Runtime settings assembled from defaults, config file, environment and CLI.

Precedence, lowest to highest: ``Constants`` defaults, the YAML config file,
``BREWCACHE_*`` environment variables, command-line flags.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on", "all")
_FALSE_VALUES = ("0", "false", "no", "off", "none", "")


@dataclass
class Settings:
    """Resolved configuration for one invocation."""
    cache_dir: Path
    catalog: Optional[str] = None
    api_url: str = Constants.DEFAULT_API_URL
    prefer_prebuilt: bool = True
    build_from_source: FrozenSet[str] = field(default_factory=frozenset)
    build_all_from_source: bool = False

    @property
    def catalog_location(self) -> str:
        """Explicit catalog if configured, else the API."""
        return self.catalog or self.api_url


def default_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the OS-appropriate cache root.

    - macOS:   ~/Library/Caches/brewcache
    - Linux:   $XDG_CACHE_HOME/brewcache (defaults to ~/.cache/)
    - Windows: %LOCALAPPDATA%/brewcache
    """
    environ = os.environ if environ is None else environ
    system = platform.system()
    if system == "Darwin":
        base = Path.home() / "Library" / "Caches"
    elif system == "Windows":
        local = environ.get("LOCALAPPDATA")
        base = Path(local) if local else Path.home() / "AppData" / "Local"
    else:
        xdg = environ.get("XDG_CACHE_HOME")
        base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / Constants.PROG_NAME


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return ``$XDG_CONFIG_HOME/brewcache/config.yml`` (``~/.config`` by default)."""
    environ = os.environ if environ is None else environ
    xdg = environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / Constants.PROG_NAME / Constants.CONFIG_FILE_NAME


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the YAML config file.

    A missing or malformed file is logged and treated as empty.

    Args:
        config_path: Path to a YAML (or JSON) file.

    Returns:
        Configuration dict.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.debug("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", config_path)
        return {}
    return data


def _parse_bool(value: Any, default: bool) -> bool:
    """Interpret YAML booleans and their string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    if isinstance(value, int):
        return bool(value)
    logger.warning("Ignoring non-boolean setting %r", value)
    return default


def _parse_build_from_source(value: Any) -> tuple:
    """Return (names, all_flag) from a config or environment value."""
    if value is None:
        return frozenset(), False
    if isinstance(value, bool):
        return frozenset(), value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return frozenset(), True
        if text in _FALSE_VALUES:
            return frozenset(), False
        names = [part.strip() for part in value.replace(",", " ").split()]
        return frozenset(n for n in names if n), False
    if isinstance(value, (list, tuple, set)):
        return frozenset(str(v) for v in value), False
    logger.warning("Ignoring build_from_source setting of type %s", type(value).__name__)
    return frozenset(), False


def load_settings(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Assemble Settings for this invocation.

    Args:
        args: Parsed CLI namespace (attributes may be absent).
        environ: Environment mapping; defaults to ``os.environ``.
    """
    environ = os.environ if environ is None else environ

    config_path = getattr(args, "CONFIG", None)
    if config_path is None:
        config_path = str(default_config_path(environ))
    config = load_config_file(config_path)

    settings = Settings(cache_dir=default_cache_dir(environ))

    # Config file
    if config.get("cache_dir"):
        settings.cache_dir = Path(os.path.expanduser(str(config["cache_dir"])))
    if config.get("catalog"):
        settings.catalog = str(config["catalog"])
    if config.get("api_url"):
        settings.api_url = str(config["api_url"])
    if "prefer_prebuilt" in config:
        settings.prefer_prebuilt = _parse_bool(config["prefer_prebuilt"], settings.prefer_prebuilt)
    names, build_all = _parse_build_from_source(config.get("build_from_source"))
    settings.build_from_source = names
    settings.build_all_from_source = build_all

    # Environment
    if environ.get(Constants.ENV_CACHE_DIR):
        settings.cache_dir = Path(os.path.expanduser(environ[Constants.ENV_CACHE_DIR]))
    if environ.get(Constants.ENV_CATALOG):
        settings.catalog = environ[Constants.ENV_CATALOG]
    if environ.get(Constants.ENV_API_URL):
        settings.api_url = environ[Constants.ENV_API_URL]
    if environ.get(Constants.ENV_BUILD_FROM_SOURCE):
        names, build_all = _parse_build_from_source(environ[Constants.ENV_BUILD_FROM_SOURCE])
        settings.build_from_source = settings.build_from_source | names
        settings.build_all_from_source = settings.build_all_from_source or build_all

    # CLI (highest precedence)
    if getattr(args, "CACHE_DIR", None):
        settings.cache_dir = Path(os.path.expanduser(args.CACHE_DIR))
    if getattr(args, "CATALOG", None):
        settings.catalog = args.CATALOG

    logger.debug("Settings: %s", settings)
    return settings
