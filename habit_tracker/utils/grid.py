# habit_tracker/utils/grid.py
'''
Calendar-to-terminal geometry.

The graph is 7 rows tall (Monday = row 0 ... Sunday = row 6) and
width // 2 weeks wide, two terminal cells per week. The rightmost week
column holds the current week; older weeks move left.
'''
from datetime import date
from typing import List, Optional, Tuple

ROWS = 7
CELL_WIDTH = 2

Cell = Tuple[int, int]


def columns(width: int) -> int:
    """Number of visible week columns for a terminal of the given width."""
    return max(width, 0) // CELL_WIDTH


def current_column(width: int) -> int:
    """x coordinate of the current week. Negative when nothing fits."""
    return CELL_WIDTH * columns(width) - CELL_WIDTH


def locate(today: date, width: int, day: date) -> Optional[Cell]:
    """
    Map a completion date to an (x, y) cell.
    Returns None for dates after today and for dates left of the grid.
    """
    weekday = day.isoweekday()
    day_difference = (today - day).days
    if day_difference < 0:
        return None

    week_offset = (day_difference + weekday - 1) // 7
    x = CELL_WIDTH * columns(width) - CELL_WIDTH * (week_offset + 1)
    if x < 0:
        return None
    return x, weekday - 1


def future_cells(today: date, width: int) -> List[Cell]:
    """Cells of the current week for the weekdays after today."""
    x = current_column(width)
    if x < 0:
        return []
    return [(x, y) for y in range(today.isoweekday(), ROWS)]
