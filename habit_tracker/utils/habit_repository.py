# habit_tracker/utils/habit_repository.py
'''
JSON persistence for the habit collection.

The data file holds an ordered array of habit objects:
    [{"name": "...", "streak": 0, "history": ["YYYY-MM-DD", ...]}, ...]
Unknown fields are ignored on read. The whole collection is always
written back; there are no partial writes.
'''
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import List, Optional, Sequence

import habit_tracker.config.config_manager as cf
from habit_tracker.utils.error_handler import StorageError, handle_storage_errors
from habit_tracker.utils.models import Habit, habit_from_row

logger = logging.getLogger(__name__)

DATA_FILENAME = "habits.json"


def get_default_data_dir() -> Path:
    _xdg = os.getenv("XDG_DATA_HOME")
    base = Path(_xdg) if _xdg else Path.home() / ".local" / "share"
    return base / "htrack"


@handle_storage_errors("Resolve data file")
def get_habits_path() -> Path:
    """
    Return the habits data file, creating its directory and seeding an
    empty array if it does not exist yet.
    """
    path = cf.get_data_file() or get_default_data_dir() / DATA_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.write_text("[]", encoding="utf-8")
        logger.info(f"Created empty habit data file at {path}")
    return path


@handle_storage_errors("Load habits")
def load_habits(path: Optional[Path] = None) -> List[Habit]:
    path = path or get_habits_path()
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if not text.strip():
        return []

    data = json.loads(text)
    if not isinstance(data, list):
        raise StorageError(
            f"Data file {path} must contain a JSON array of habits")

    habits = []
    for i, row in enumerate(data):
        if not isinstance(row, dict):
            logger.warning(f"Skipping habit entry #{i} in {path}: not an object")
            continue
        habits.append(habit_from_row(row))
    return habits


@handle_storage_errors("Save habits")
def save_habits(habits: Sequence[Habit], path: Optional[Path] = None) -> Path:
    """
    Write the full collection, replacing the file atomically.
    """
    path = path or get_habits_path()
    payload = json.dumps([h.to_dict() for h in habits],
                         indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=".habits-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    logger.debug(f"Saved {len(habits)} habits to {path}")
    return path
