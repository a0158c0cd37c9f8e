# habit_tracker/commands/habit.py
'''
htrack habit commands - add, remove, mark, unmark, list and graph habits.
Every command loads the full collection, reconciles streaks against today,
applies its change and writes the collection back only if something changed.
'''
from datetime import date
import logging
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import habit_tracker.config.config_manager as cf
from habit_tracker.utils import habit_repository
from habit_tracker.utils.core_utils import format_date, today_local
from habit_tracker.utils.error_handler import (
    DuplicateHabit, HabitNotFound, StorageError, TerminalUnavailable, ValidationError)
from habit_tracker.utils.history import (
    MarkResult, add_habit, find_habit, invalidate_all, mark, remove_habit, unmark)
from habit_tracker.utils.models import Habit
from habit_tracker.utils.render import render_graph, terminal_session

app = typer.Typer(help="Track recurring habits, their streaks and history.")
console = Console()
logger = logging.getLogger(__name__)


def _fail(message: str):
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def load_session() -> Tuple[List[Habit], date]:
    """
    Load every habit and reconcile streaks with today.
    Streak changes are persisted straight away.
    """
    today = today_local()
    try:
        habits = habit_repository.load_habits()
        changed = invalidate_all(habits, today)
        if changed:
            logger.info(f"Streaks reset for: {', '.join(changed)}")
            habit_repository.save_habits(habits)
    except StorageError as e:
        logger.error(f"Could not load habits: {e}")
        _fail(f"⚠️ Could not load habits: {e}")
    return habits, today


def _save(habits: List[Habit]):
    try:
        habit_repository.save_habits(habits)
    except StorageError as e:
        logger.error(f"Could not save habits: {e}")
        _fail(f"⚠️ Changes were not saved: {e}")


def _report_skipped(result: MarkResult):
    for err in result.errors:
        console.print(f"[yellow]⚠️ Skipped {escape(str(err))}[/yellow]")


def _lookup(habits: List[Habit], name: str) -> Habit:
    try:
        return find_habit(habits, name)
    except HabitNotFound as e:
        _fail(f"❌ {e} Use 'htrack add' to define it.")


@app.command()
def add(
    name: str = typer.Argument(..., help="The name of the habit."),
):
    """
    Add a new habit to track.
    """
    habits, _ = load_session()
    try:
        add_habit(habits, name)
    except DuplicateHabit as e:
        _fail(f"⚠️ {e}")
    except ValidationError as e:
        _fail(f"Error: {e}")
    _save(habits)
    console.print(f"[green]✅ Added habit: {escape(name.strip())}[/green]")


@app.command()
def remove(
    name: str = typer.Argument(..., help="The name of the habit to remove."),
):
    """
    Remove a habit and its history.
    """
    habits, _ = load_session()
    try:
        remove_habit(habits, name)
    except HabitNotFound as e:
        _fail(f"❌ {e}")
    _save(habits)
    console.print(f"[green]🗑️ Removed habit: {escape(name)}[/green]")


@app.command("mark")
def mark_command(
    name: str = typer.Argument(..., help="The name of the habit to mark as done."),
    dates: Optional[List[str]] = typer.Argument(
        None, help="Dates to mark (YYYY-MM-DD). Defaults to today."),
):
    """
    Mark a habit as done today, or on the given dates.
    """
    habits, today = load_session()
    habit = _lookup(habits, name)
    result = mark(habit, dates, today)
    _report_skipped(result)

    if result.changed:
        _save(habits)

    if not dates:
        if result.already_marked:
            console.print(
                f"[yellow]Habit '{escape(habit.name)}' is already marked today.[/yellow]")
        else:
            console.print(
                f"[green]✅ Habit '{escape(habit.name)}' marked! Streak: {habit.streak}[/green]")
    elif result.changed:
        marked = ", ".join(format_date(d) for d in result.dates)
        console.print(f"[green]✅ Habit '{escape(habit.name)}' marked on {marked}[/green]")
    else:
        console.print(f"[yellow]Nothing new to mark for '{escape(habit.name)}'.[/yellow]")


@app.command("unmark")
def unmark_command(
    name: str = typer.Argument(..., help="The name of the habit."),
    dates: Optional[List[str]] = typer.Argument(
        None, help="Dates to remove (YYYY-MM-DD). Defaults to today."),
):
    """
    Remove today's mark, or the marks on the given dates.
    """
    habits, today = load_session()
    habit = _lookup(habits, name)
    result = unmark(habit, dates, today)
    _report_skipped(result)

    if not result.changed:
        console.print(f"[yellow]Nothing to unmark for '{escape(habit.name)}'.[/yellow]")
        return

    _save(habits)
    removed = ", ".join(format_date(d) for d in result.dates)
    console.print(f"[green]↩️ Removed {removed} from '{escape(habit.name)}'[/green]")


@app.command("list")
def list_habits():
    """
    List all habits with their streak and last entry.
    """
    habits, _ = load_session()
    if not habits:
        console.print(
            "[italic]No habits found. Add one with 'htrack add'![/italic]")
        return

    table = Table(
        show_header=True,
        box=None,
        pad_edge=False,
        collapse_padding=True,
        padding=(0, 1),
    )
    table.add_column("Habit", style="bold", overflow="ellipsis", min_width=8)
    table.add_column("Streak", justify="right")
    table.add_column("Last Entry")

    for h in habits:
        last = format_date(h.last_entry) if h.last_entry else "-"
        table.add_row(escape(h.name), str(h.streak), last)

    console.print(table)


@app.command()
def graph(
    name: str = typer.Argument(..., help="The habit to draw."),
):
    """
    Draw the habit's history as a weekly calendar grid sized to the terminal.
    """
    habits, today = load_session()
    habit = _lookup(habits, name)
    glyphs = cf.get_graph_glyphs()

    try:
        with terminal_session(console) as surface:
            width = surface.current_width()
            render_graph(surface, habit, today, width, glyphs)
    except TerminalUnavailable as e:
        logger.error(f"Graph for '{name}' not drawn: {e}")
        _fail(f"⚠️ {e}")

    console.print(
        f"[bold]{escape(habit.name)}[/bold]  streak: {habit.streak}", highlight=False)


@app.command("config-path")
def config_path():
    """
    Show where htrack keeps its config and habit data.
    """
    console.print(f"Config: {cf.USER_CONFIG}", highlight=False, soft_wrap=True)
    try:
        console.print(
            f"Data:   {habit_repository.get_habits_path()}", highlight=False, soft_wrap=True)
    except StorageError as e:
        _fail(f"⚠️ {e}")


@app.command("config-set")
def config_set(
    section: str = typer.Argument(..., help="Config section: storage, graph or logging."),
    key: str = typer.Argument(..., help="Key within the section."),
    value: str = typer.Argument(..., help="New value."),
):
    """
    Change one setting in the user config file.
    """
    if key not in cf.SETTABLE_KEYS.get(section, ()):
        known = ", ".join(
            f"{s}.{k}" for s, keys in cf.SETTABLE_KEYS.items() for k in keys)
        _fail(f"Unknown setting '{section}.{key}'. Known settings: {known}")
    if section == "graph" and len(value) != 1:
        _fail(f"Graph glyphs must be a single character, got '{value}'.")
    if section == "logging":
        value = value.strip().upper()
        if value not in cf.LOG_LEVELS:
            _fail(f"Log level must be one of: {', '.join(cf.LOG_LEVELS)}")

    if not cf.set_config_value(section, key, value):
        _fail(f"⚠️ Could not write {cf.USER_CONFIG}")
    console.print(
        f"[green]✅ {section}.{key} = {escape(repr(value))}[/green]",
        highlight=False, soft_wrap=True)
