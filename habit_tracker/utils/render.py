# habit_tracker/utils/render.py
'''
Paint a habit's history as a calendar grid in the terminal.

Drawing goes through a TerminalSurface: cursor moves and writes are
queued and written to the console in one go on flush(), so the grid
never appears half-painted.
'''
from contextlib import contextmanager
from datetime import date
import logging
from typing import Dict, Iterator, List, Optional

from rich.console import Console
from rich.control import Control

from habit_tracker.utils.error_handler import TerminalUnavailable
from habit_tracker.utils.grid import CELL_WIDTH, ROWS, columns, future_cells, locate
from habit_tracker.utils.models import Habit

logger = logging.getLogger(__name__)


class TerminalSurface:
    """Cursor/write surface over a rich Console."""

    def __init__(self, console: Console):
        self.console = console
        self._pending: List[str] = []

    def current_width(self) -> int:
        if not self.console.is_terminal:
            raise TerminalUnavailable("Couldn't get terminal size.")
        width = self.console.size.width
        if not width or width < CELL_WIDTH:
            raise TerminalUnavailable(
                f"Terminal is too narrow to draw a graph (width {width}).")
        return width

    def move_to(self, x: int, y: int):
        self._pending.append(str(Control.move_to(x, y)))

    def write(self, text: str):
        self._pending.append(text)

    def clear_all(self):
        self._pending.append(str(Control.clear()))
        self._pending.append(str(Control.home()))

    def hide_cursor(self):
        self._pending.append(str(Control.show_cursor(False)))

    def show_cursor(self):
        self._pending.append(str(Control.show_cursor(True)))

    def flush(self):
        if not self._pending:
            return
        out = self.console.file
        out.write("".join(self._pending))
        out.flush()
        self._pending.clear()


@contextmanager
def terminal_session(console: Optional[Console] = None) -> Iterator[TerminalSurface]:
    """
    Acquire a surface with the cursor hidden. On every exit path the
    cursor is shown again and everything queued is flushed once.
    """
    surface = TerminalSurface(console or Console())
    surface.current_width()
    surface.hide_cursor()
    try:
        yield surface
    finally:
        surface.show_cursor()
        surface.flush()


def render_graph(surface: TerminalSurface, habit: Habit, today: date, width: int,
                 glyphs: Dict[str, str]) -> int:
    """
    Draw the grid for one habit and return how many marks landed on it.
    """
    pad = " " * (CELL_WIDTH - 1)
    surface.clear_all()

    empty_row = (glyphs["empty"] + pad) * columns(width)
    for y in range(ROWS):
        surface.move_to(0, y)
        surface.write(empty_row)

    painted = 0
    # newest first: once a date falls off the left edge, every older one does too
    for day in reversed(habit.history):
        if day > today:
            continue
        cell = locate(today, width, day)
        if cell is None:
            break
        x, y = cell
        surface.move_to(x, y)
        surface.write(glyphs["mark"])
        painted += 1

    for x, y in future_cells(today, width):
        surface.move_to(x, y)
        surface.write(glyphs["future"] + pad)

    surface.move_to(0, ROWS)
    logger.debug(
        f"Rendered '{habit.name}' at width {width}: {painted} marks")
    return painted
