#!/usr/bin/env python3
# htrack - A terminal-based habit tracker
# Copyright (C) 2024 The htrack authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''
htrack CLI
A command-line habit tracker: mark habits as done, keep streaks honest,
and draw each habit's history as a calendar grid in the terminal.
'''
import logging
import sys

import typer
from rich.console import Console

import habit_tracker.config.config_manager as cf
from habit_tracker.commands import habit as habit_module
from habit_tracker.utils import log_utils

app = habit_module.app

console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main_callback(ctx: typer.Context):
    """
    🔁 htrack: track recurring habits and their streaks.
    """
    log_utils.setup_logging(cf.get_log_level())
    logger.debug(f"htrack invoked: {ctx.invoked_subcommand}")


def main():
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]🚪 Exiting...[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unhandled error: {e}", exc_info=True)
        console.print(f"[red]⚠️ Unhandled error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
