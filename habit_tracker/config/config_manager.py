# habit_tracker/config/config_manager.py
'''
config_manager.py - Configuration management for htrack
'''
from importlib.resources import files
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
import toml


logger = logging.getLogger(__name__)

if "BASE_DIR" not in globals():
    _xdg = os.getenv("XDG_CONFIG_HOME")
    BASE_DIR = Path(_xdg) / "htrack" if _xdg else Path.home() / ".config" / "htrack"

if "USER_CONFIG" not in globals():
    USER_CONFIG = BASE_DIR / "config.toml"

if "DEFAULT_CONFIG" not in globals():
    # the shipped defaults, read from the package resources
    DEFAULT_CONFIG = files("habit_tracker.config") \
        .joinpath("config.toml") \
        .read_text(encoding="utf-8")

DEFAULT_GLYPHS = {"mark": "■", "empty": "·", "future": " "}

# keys `htrack config-set` may change
SETTABLE_KEYS = {
    "storage": ("data_file",),
    "graph": ("mark", "empty", "future"),
    "logging": ("level",),
}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config() -> dict:
    """
    Load the user configuration from USER_CONFIG file.
    - If the config directory or file does not exist, create them with defaults.
    - Returns a dict parsed from TOML; on error, logs and returns empty dict.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
        if not USER_CONFIG.exists():
            try:
                USER_CONFIG.write_text(DEFAULT_CONFIG, encoding="utf-8")
            except Exception as e:
                logger.error(
                    f"Failed to write default config to {USER_CONFIG}: {e}", exc_info=True)
        try:
            text = USER_CONFIG.read_text(encoding="utf-8")
        except Exception as e:
            logger.error(
                f"Failed to read config file {USER_CONFIG}: {e}", exc_info=True)
            return {}
        try:
            return toml.loads(text)
        except Exception as e:
            logger.error(
                f"Failed to parse TOML from {USER_CONFIG}: {e}", exc_info=True)
            return {}
    except Exception as e:
        logger.error(f"Unexpected error in load_config: {e}", exc_info=True)
        return {}


def save_config(doc: dict) -> bool:
    """
    Write the whole config document back to USER_CONFIG.
    Returns False (and logs) when it cannot be serialized or written.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
        USER_CONFIG.write_text(toml.dumps(doc), encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save config to {USER_CONFIG}: {e}", exc_info=True)
        return False
    return True


def get_config_value(section: str, key: str, default=None) -> Any:
    """
    Return value for [section][key] in config, or default if missing.
    """
    try:
        config = load_config()
        return config.get(section, {}).get(key, default)
    except Exception as e:
        logger.error(
            f"Error getting config value for [{section}][{key}]: {e}", exc_info=True)
        return default


def set_config_value(section: str, key: str, value: Any) -> bool:
    """
    Update one [section] key, keeping the rest of the user's file.
    A section that isn't a table is replaced.
    """
    config = load_config()
    sec = config.get(section)
    if not isinstance(sec, dict):
        sec = {}
    sec[key] = value
    config[section] = sec
    if not save_config(config):
        logger.error(f"Config [{section}][{key}] was not saved")
        return False
    logger.info(f"Config [{section}][{key}] set to {value!r}")
    return True


def get_config_section(section: str) -> Dict[str, Any]:
    """
    Return the dict for [section] from config.
    On error or missing, returns empty dict.
    """
    try:
        config = load_config()
        sec = config.get(section, {})
        if isinstance(sec, dict):
            return sec
        else:
            logger.warning(
                f"get_config_section: section [{section}] is not a dict.")
            return {}
    except Exception as e:
        logger.error(
            f"Error retrieving config section [{section}]: {e}", exc_info=True)
        return {}


def get_data_file() -> Optional[Path]:
    """
    Return [storage].data_file as a Path, or None when unset/blank.
    """
    value = get_config_value("storage", "data_file", "") or ""
    if not isinstance(value, str) or not value.strip():
        return None
    return Path(value.strip()).expanduser()


def get_graph_glyphs() -> Dict[str, str]:
    """
    Return the mark/empty/future glyphs for the graph.
    Missing or non-single-character values fall back to the defaults.
    """
    glyphs = dict(DEFAULT_GLYPHS)
    for key, val in get_config_section("graph").items():
        if key not in glyphs:
            continue
        if isinstance(val, str) and len(val) == 1:
            glyphs[key] = val
        else:
            logger.warning(
                f"Graph glyph '{key}' must be a single character, got {val!r}. Using default.")
    return glyphs


def get_log_level() -> str:
    """
    Return [logging].level, defaulting to INFO.
    """
    level = get_config_value("logging", "level", "INFO")
    if not isinstance(level, str) or not level.strip():
        return "INFO"
    return level.strip().upper()
