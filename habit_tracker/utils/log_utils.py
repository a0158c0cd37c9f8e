# habit_tracker/utils/log_utils.py

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Union

CONSOLE_HANDLER_NAME = "htrack-console"


def get_log_dir() -> Path:
    _xdg = os.getenv("XDG_STATE_HOME")
    base = Path(_xdg) if _xdg else Path.home() / ".local" / "state"
    return base / "htrack" / "logs"


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: Union[int, str] = logging.INFO):
    """
    Configure root logger with:
     - RotatingFileHandler writing to <state dir>/htrack/logs/htrack.log
     - StreamHandler to console, WARNING and above only
    Idempotent: calling multiple times won't add duplicate handlers.
    Optional `level` param can be numeric or string (e.g., logging.DEBUG or "DEBUG").
    """
    log_dir = get_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        # If directory creation fails, log to console only
        print(f"WARNING: Could not create log directory {log_dir}: {e}")
        _configure_console_logging(level)
        return

    root_logger = logging.getLogger()
    level = _coerce_level(level)
    root_logger.setLevel(level)

    existing_handlers = list(root_logger.handlers)

    # 1) RotatingFileHandler: only add if not already present for our log file
    file_log_path = log_dir / "htrack.log"
    add_file = True
    for h in existing_handlers:
        if isinstance(h, RotatingFileHandler):
            base = getattr(h, 'baseFilename', None)
            if base and os.path.abspath(base) == os.path.abspath(file_log_path):
                add_file = False
                break
    if add_file:
        try:
            file_handler = RotatingFileHandler(
                file_log_path,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            file_handler.setFormatter(file_formatter)
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)
        except Exception as e:
            print(f"WARNING: Could not set up file logging: {e}")

    # 2) Console handler: only add if not already present
    _configure_console_logging(level)


def _configure_console_logging(level: Union[int, str] = logging.INFO):
    """
    Console logging only. Used directly when the file handler cannot be created.
    """
    root_logger = logging.getLogger()
    level = _coerce_level(level)
    if root_logger.level == logging.NOTSET or root_logger.level > level:
        root_logger.setLevel(level)

    for h in root_logger.handlers:
        if h.get_name() == CONSOLE_HANDLER_NAME:
            return

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(max(level, logging.WARNING))
    root_logger.addHandler(console_handler)
