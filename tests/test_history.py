# tests/test_history.py

from datetime import date, timedelta

import pytest

from habit_tracker.utils import history as h
from habit_tracker.utils.error_handler import (
    DuplicateHabit, HabitNotFound, InvalidDate, ValidationError)
from habit_tracker.utils.models import Habit


def days_before(today, *offsets):
    return [today - timedelta(days=n) for n in offsets]


# ────────────────────────────────────────────────────────────────────────────────
# recompute_streak / invalidate
# ────────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("offsets, expected", [
    ((), 0),
    ((0,), 1),
    ((1,), 1),
    ((2,), 0),
    ((0, 1, 2), 3),
    ((1, 2, 3, 4), 4),
    ((0, 1, 3, 4), 2),
    ((2, 3, 4), 0),
])
def test_recompute_streak(today, offsets, expected):
    assert h.recompute_streak(days_before(today, *offsets), today) == expected


def test_recompute_streak_ignores_future_entries(today):
    history = days_before(today, 1, 0) + [today + timedelta(days=3)]
    assert h.recompute_streak(history, today) == 2


def test_invalidate_resets_broken_streak(make_habit):
    habit = make_habit(history=[date(2024, 1, 1)], streak=5)
    changed = h.invalidate(habit, date(2024, 1, 10))
    assert changed is True
    assert habit.streak == 0


def test_invalidate_is_idempotent(today, make_habit):
    habit = make_habit(history=days_before(today, 1, 2, 5), streak=9)
    h.invalidate(habit, today)
    first = habit.streak
    assert h.invalidate(habit, today) is False
    assert habit.streak == first == 2


def test_invalidate_empty_history_zeroes_streak(today, make_habit):
    habit = make_habit(streak=3)
    h.invalidate(habit, today)
    assert habit.streak == 0
    assert habit.history == []


def test_invalidate_all_reports_changed_names(today, make_habit):
    fresh = make_habit("fresh", days_before(today, 0), streak=1)
    stale = make_habit("stale", days_before(today, 10), streak=4)
    assert h.invalidate_all([fresh, stale], today) == ["stale"]


# ────────────────────────────────────────────────────────────────────────────────
# mark / unmark
# ────────────────────────────────────────────────────────────────────────────────

def test_mark_today_twice(today, make_habit):
    habit = make_habit()

    first = h.mark(habit, [], today)
    assert first.changed and not first.already_marked
    assert habit.history == [today]
    assert habit.streak == 1

    second = h.mark(habit, [], today)
    assert second.already_marked
    assert not second.changed
    assert habit.history == [today]
    assert habit.streak == 1


def test_mark_today_extends_running_streak(today, make_habit):
    habit = make_habit(history=days_before(today, 1, 2))
    h.invalidate(habit, today)
    assert habit.streak == 2
    h.mark(habit, None, today)
    assert habit.streak == 3


def test_mark_explicit_dates_leaves_streak_alone(today, make_habit):
    habit = make_habit(streak=0)
    result = h.mark(habit, ["2024-03-14", date(2024, 3, 13)], today)
    assert result.dates == [date(2024, 3, 13), date(2024, 3, 14)]
    assert habit.streak == 0
    # the next session reconciles it
    h.invalidate(habit, today)
    assert habit.streak == 2


def test_mark_dedupes_and_sorts(today, make_habit):
    habit = make_habit(history=[date(2024, 3, 1)])
    result = h.mark(habit, ["2024-03-10", "2024-03-01", "2024-02-20", "2024-03-10"], today)
    assert habit.history == [date(2024, 2, 20), date(2024, 3, 1), date(2024, 3, 10)]
    assert result.dates == [date(2024, 2, 20), date(2024, 3, 10)]


def test_mark_skips_invalid_and_future_dates(today, make_habit):
    habit = make_habit()
    result = h.mark(habit, ["not-a-date", "2024-03-20", "2024-03-01"], today)
    assert habit.history == [date(2024, 3, 1)]
    assert len(result.errors) == 2
    assert all(isinstance(e, InvalidDate) for e in result.errors)
    assert result.errors[0].value == "not-a-date"
    assert "future" in str(result.errors[1])


def test_unmark_today(today, make_habit):
    habit = make_habit(history=days_before(today, 0, 1), streak=2)
    result = h.unmark(habit, [], today)
    assert result.dates == [today]
    assert habit.history == [today - timedelta(days=1)]
    # streak reconciled later, not here
    assert habit.streak == 2


def test_unmark_ignores_missing_dates(today, make_habit):
    habit = make_habit(history=[date(2024, 3, 1)])
    result = h.unmark(habit, ["2024-02-01", "bogus"], today)
    assert not result.changed
    assert habit.history == [date(2024, 3, 1)]
    assert len(result.errors) == 1


def test_mark_then_unmark_restores_history(today, make_habit):
    original = [date(2024, 3, 1), date(2024, 3, 5)]
    habit = make_habit(history=original)
    h.mark(habit, ["2024-03-03"], today)
    h.unmark(habit, ["2024-03-03"], today)
    assert habit.history == original


def test_history_stays_strictly_ascending(today, make_habit):
    habit = make_habit()
    ops = [
        (h.mark, ["2024-03-10", "2024-03-02"]),
        (h.mark, []),
        (h.unmark, ["2024-03-02"]),
        (h.mark, ["2024-03-02", "2024-03-15", "2024-01-31"]),
        (h.unmark, []),
        (h.mark, ["2024-03-15"]),
    ]
    for op, dates in ops:
        op(habit, dates, today)
        assert all(a < b for a, b in zip(habit.history, habit.history[1:]))


# ────────────────────────────────────────────────────────────────────────────────
# collection-level operations
# ────────────────────────────────────────────────────────────────────────────────

def test_add_habit_creates_empty_record():
    habits = []
    habit = h.add_habit(habits, "  walk ")
    assert habits == [habit]
    assert habit.name == "walk"
    assert habit.streak == 0
    assert habit.history == []


def test_add_habit_rejects_duplicates_and_blanks():
    habits = [Habit(name="walk")]
    with pytest.raises(DuplicateHabit):
        h.add_habit(habits, "walk")
    with pytest.raises(ValidationError):
        h.add_habit(habits, "   ")
    assert len(habits) == 1


def test_remove_and_find_habit():
    walk, read = Habit(name="walk"), Habit(name="read")
    habits = [walk, read]
    assert h.find_habit(habits, "read") is read
    assert h.remove_habit(habits, "walk") is walk
    assert habits == [read]
    with pytest.raises(HabitNotFound) as exc:
        h.remove_habit(habits, "walk")
    assert exc.value.name == "walk"
