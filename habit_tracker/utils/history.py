# habit_tracker/utils/history.py
'''
History engine: pure operations on Habit records.

Every function takes "today" explicitly; nothing here reads the clock,
prints, or touches the data file. Callers load the collection, run
invalidate_all() once per session, mutate, then persist.
'''
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence, Union

from habit_tracker.utils.core_utils import parse_date
from habit_tracker.utils.error_handler import (
    DuplicateHabit, HabitNotFound, InvalidDate, ValidationError)
from habit_tracker.utils.models import Habit, normalize_history

logger = logging.getLogger(__name__)

DateLike = Union[str, date]


@dataclass
class MarkResult:
    """
    Outcome of a mark/unmark call.
    - dates: dates actually inserted (mark) or removed (unmark)
    - already_marked: today's mark was requested but today was already present
    - errors: one InvalidDate per skipped input
    """
    dates: List[date] = field(default_factory=list)
    already_marked: bool = False
    errors: List[InvalidDate] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.dates)


def recompute_streak(history: Sequence[date], today: date) -> int:
    """
    Count consecutive days ending at the latest entry on or before today.
    The chain only counts when that entry is today or yesterday.
    """
    past = sorted({d for d in history if d <= today}, reverse=True)
    if not past or (today - past[0]).days > 1:
        return 0

    streak = 1
    for newer, older in zip(past, past[1:]):
        if (newer - older).days != 1:
            break
        streak += 1
    return streak


def invalidate(habit: Habit, today: date) -> bool:
    """
    Reconcile habit.streak with its history and today.
    Returns True if the streak changed.
    """
    future = [d for d in habit.history if d > today]
    for d in future:
        logger.warning(
            f"Habit '{habit.name}' has a future entry {d.isoformat()}; ignoring it for the streak")

    streak = recompute_streak(habit.history, today)
    if streak == habit.streak:
        return False
    logger.debug(
        f"Habit '{habit.name}' streak {habit.streak} -> {streak} as of {today.isoformat()}")
    habit.streak = streak
    return True


def invalidate_all(habits: Iterable[Habit], today: date) -> List[str]:
    """Run invalidate() over a collection; return the names whose streak changed."""
    return [h.name for h in habits if invalidate(h, today)]


def _validated_dates(dates: Iterable[DateLike], today: date, result: MarkResult) -> List[date]:
    valid = []
    for raw in dates:
        try:
            d = parse_date(raw)
        except InvalidDate as e:
            logger.warning(str(e))
            result.errors.append(e)
            continue
        if d > today:
            err = InvalidDate(raw, "date is in the future")
            logger.warning(str(err))
            result.errors.append(err)
            continue
        valid.append(d)
    return valid


def mark(habit: Habit, dates: Optional[Iterable[DateLike]], today: date) -> MarkResult:
    """
    Mark a habit as done.
    - No dates: mark today. Streak-affecting; reports already_marked when
      today is present and leaves the habit untouched.
    - Explicit dates: history-only. The streak is left for the next
      invalidate() pass.
    """
    result = MarkResult()
    dates = list(dates or [])

    if not dates:
        if today in habit.history:
            result.already_marked = True
            return result
        habit.history = normalize_history([*habit.history, today])
        habit.streak = recompute_streak(habit.history, today)
        result.dates.append(today)
        return result

    valid = _validated_dates(dates, today, result)
    present = set(habit.history)
    added = sorted({d for d in valid if d not in present})
    if added:
        habit.history = normalize_history([*habit.history, *added])
    result.dates = added
    return result


def unmark(habit: Habit, dates: Optional[Iterable[DateLike]], today: date) -> MarkResult:
    """
    Remove dates from a habit's history; no dates means today.
    Dates not present are ignored. The streak is left for the next invalidate().
    """
    result = MarkResult()
    dates = list(dates or [])

    targets = {today} if not dates else set(_validated_dates(dates, today, result))
    removed = sorted(targets.intersection(habit.history))
    if removed:
        habit.history = normalize_history(
            d for d in habit.history if d not in targets)
    result.dates = removed
    return result


def find_habit(habits: Sequence[Habit], name: str) -> Habit:
    for habit in habits:
        if habit.name == name:
            return habit
    raise HabitNotFound(name)


def add_habit(habits: List[Habit], name: str) -> Habit:
    """Append a new, empty habit. Raises DuplicateHabit if the name is taken."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Habit name cannot be empty")
    if any(h.name == name for h in habits):
        raise DuplicateHabit(name)
    habit = Habit(name=name)
    habits.append(habit)
    return habit


def remove_habit(habits: List[Habit], name: str) -> Habit:
    """Remove and return the named habit. Raises HabitNotFound."""
    habit = find_habit(habits, name)
    habits.remove(habit)
    return habit
