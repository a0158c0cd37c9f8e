# tests/conftest.py

from datetime import date
import json

import pytest

import habit_tracker.config.config_manager as cfg
from habit_tracker.utils import log_utils
from habit_tracker.utils.models import Habit


# ────────────────────────────────────────────────────────────────────────────────
# Fixture: point config, data and log directories at a temp dir for every test
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """
    Keep every test away from the real ~/.config, ~/.local/share and log dirs.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))

    # BASE_DIR / USER_CONFIG are computed at import time
    base = tmp_path / "config" / "htrack"
    monkeypatch.setattr(cfg, "BASE_DIR", base)
    monkeypatch.setattr(cfg, "USER_CONFIG", base / "config.toml")

    # CliRunner swaps sys.stderr per invoke; don't leave handlers bound to it
    monkeypatch.setattr(log_utils, "setup_logging", lambda *a, **k: None)
    yield tmp_path


@pytest.fixture
def data_file(isolated_dirs):
    """Default habits.json location under the isolated XDG_DATA_HOME."""
    return isolated_dirs / "data" / "htrack" / "habits.json"


@pytest.fixture
def write_habits(data_file):
    """Write raw habit dicts straight to the data file."""
    def _write(rows):
        data_file.parent.mkdir(parents=True, exist_ok=True)
        data_file.write_text(json.dumps(rows), encoding="utf-8")
        return data_file
    return _write


@pytest.fixture
def today():
    # A Friday
    return date(2024, 3, 15)


@pytest.fixture
def make_habit():
    def _make(name="reading", history=(), streak=0):
        return Habit(name=name, streak=streak, history=sorted(set(history)))
    return _make
