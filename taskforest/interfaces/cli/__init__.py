"""CLI interface for taskforest using Typer.

This module provides the command-line interface for taskforest,
a hierarchical task manager.

Usage:
    taskforest add "Release 1.0"             # Add a root task
    taskforest add "Write notes" --parent ID # Add a subtask
    taskforest tree                          # Show the task tree
    taskforest done ID                       # Complete a task
    taskforest rm ID --promote               # Delete, keeping subtasks
    taskforest category list                 # Show categories

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (task, category)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from taskforest import __version__
from taskforest.global_config import configure_logging, get_global_config

# Import command groups
from taskforest.interfaces.cli.commands import category, task

# Create the main Typer application
app = typer.Typer(
    name="taskforest",
    help="Hierarchical task management",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"taskforest version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """taskforest - tasks and subtasks of any depth.

    Progress of a task is derived from all of its subtasks. Completing or
    deleting a parent asks what should happen to its children.
    """
    configure_logging("DEBUG" if verbose else get_global_config().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(category.app, name="category")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================

app.command("add", help="Add a task (shortcut for 'task add').")(task.add)
app.command("edit", help="Edit a task (shortcut for 'task edit').")(task.edit)
app.command("list", help="List tasks (shortcut for 'task list').")(task.list_tasks)
app.command("tree", help="Show the task tree (shortcut for 'task tree').")(task.tree)
app.command("progress", help="Show progress (shortcut for 'task progress').")(task.progress)
app.command("done", help="Complete a task (shortcut for 'task done').")(task.done)
app.command("undo", help="Reopen tasks (shortcut for 'task undo').")(task.undo)
app.command("rm", help="Delete tasks (shortcut for 'task rm').")(task.rm)


__all__ = ["app"]
