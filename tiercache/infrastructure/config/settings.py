"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.tiercache/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".tiercache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    # 3. Environment Variables (Highest priority) are handled by os.getenv in get_config

    _loaded = True


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load starts from scratch."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _flatten(tree: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('cache.memory.max_items')."""
    flat: Dict[str, Any] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def _coerce(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper()
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    try:
        cwd = Path.cwd()
        for path in [cwd] + list(cwd.parents):
            env_path = path / ENV_FILE_NAME
            if env_path.is_file():
                return env_path
    except OSError as e:
        logger.warning(f"Error searching for .env file: {e}")
    return None


# --- Convenience Functions ---

def get_cache_root() -> Optional[Path]:
    """Returns the configured cache root, or None to use the platform default."""
    # Checks ENV TIERCACHE_ROOT first, then yaml cache.root
    root = get_config("TIERCACHE_ROOT") or get_config("cache.root")
    return Path(str(root)).expanduser() if root else None


def get_memory_max_items() -> Optional[int]:
    """Returns the memory tier capacity. 0 or a negative value means unbounded."""
    value = get_config("TIERCACHE_MEMORY_MAX_ITEMS")
    if value is None:
        value = get_config("cache.memory.max_items")
    if value is None:
        return None
    try:
        max_items = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid memory max_items setting: {value!r}")
        return None
    return max_items if max_items > 0 else None


def get_protection() -> Optional[int]:
    """Returns the directory permission mode.

    Strings are parsed as octal ('0700'). Integers are taken as the mode
    itself, which is what YAML produces for an unquoted 0700.
    """
    # Read the raw environment string; get_config would coerce '0700' to 700
    value = _test_config.get("TIERCACHE_PROTECTION", os.environ.get("TIERCACHE_PROTECTION"))
    if value is None:
        value = get_config("cache.protection")
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 8)
    except ValueError:
        logger.warning(f"Ignoring invalid protection setting: {value!r}")
        return None


def get_background_writes() -> bool:
    """Whether disk writes are deferred to a background worker."""
    flag = get_config("TIERCACHE_BACKGROUND_WRITES")
    if flag is None:
        flag = get_config("cache.background_writes", False)
    if isinstance(flag, str):
        return flag.lower() in ("1", "true", "yes", "on")
    return bool(flag)


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


# Load configuration when the module is imported
load_configuration()
