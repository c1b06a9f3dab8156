"""Shared utilities for taskforest CLI commands.

This module provides common utilities used across CLI commands:
- Data file resolution and store loading
- Category file resolution and seeding
- Formatted output helpers (error, success, info)
- Task and tree formatting for display
"""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional, TypeVar

import typer

from taskforest.application import TaskStore, category_label, seed_default_categories
from taskforest.application.ports import CategoryRepository
from taskforest.domain.shared import BulkOperationError, Err, Result, TaskError
from taskforest.domain.task import HierarchyNode, Task, TaskProgress, walk
from taskforest.global_config import get_global_config
from taskforest.infrastructure.storage import JsonCategoryRepository, JsonTaskRepository

T = TypeVar("T")

# Reusable data file option for CLI commands
# Usage: def my_command(data: DataFileOption = None) -> None:
DataFileOption = Annotated[
    Optional[Path],
    typer.Option(
        "--data",
        "-d",
        help="Task file (or set TASKFOREST_DATA env var)",
        envvar="TASKFOREST_DATA",
    ),
]


def get_data_file(explicit: Path | None = None) -> Path:
    """Resolve the task file to use.

    Resolution order:
    1. Explicit path (from --data, which also reads TASKFOREST_DATA)
    2. ``data_file`` from the global config

    Args:
        explicit: Path explicitly provided via CLI option.

    Returns:
        Path to the task file (it may not exist yet).
    """
    if explicit:
        return explicit.expanduser()
    return get_global_config().data_file.expanduser()


def get_categories_file(data_file: Path) -> Path:
    """Category file kept next to the task file, e.g. ``tasks.categories.json``."""
    return data_file.with_name(f"{data_file.stem}.categories.json")


def open_categories(data: Path | None = None) -> JsonCategoryRepository:
    """Open the category file for a task file, seeding defaults if it is new.

    Raises:
        typer.Exit: If the file cannot be read or written.
    """
    path = get_categories_file(get_data_file(data))
    fresh = not path.exists()
    categories = exit_on_error(JsonCategoryRepository.open(path))
    if fresh:
        exit_on_error(seed_default_categories(categories))
    return categories


def open_store(data: Path | None = None) -> TaskStore:
    """Open the task and category files and load a snapshot.

    Raises:
        typer.Exit: If a file cannot be read.
    """
    repository = exit_on_error(JsonTaskRepository.open(get_data_file(data)))
    store = TaskStore(repository, categories=open_categories(data))
    exit_on_error(store.load())
    return store


def exit_on_error(result: Result[T, TaskError]) -> T:
    """Return the Ok value, or print the error and exit with status 1.

    Raises:
        typer.Exit: On Err.
    """
    if isinstance(result, Err):
        print_error(str(result.error))
        if isinstance(result.error, BulkOperationError) and result.error.succeeded:
            typer.echo(f"Already processed: {', '.join(result.error.succeeded)}", err=True)
        raise typer.Exit(1)
    return result.value


def require_task(store: TaskStore, task_id: str) -> Task:
    """Look up a task in the store's snapshot.

    Raises:
        typer.Exit: If the task does not exist.
    """
    task = store.get(task_id)
    if task is None:
        print_error(f"Task not found: {task_id}")
        raise typer.Exit(1)
    return task


def parse_due(value: str | None) -> datetime | None:
    """Parse a --due value (ISO date or datetime).

    Raises:
        typer.BadParameter: If the value is not an ISO date.
    """
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"Expected YYYY-MM-DD or ISO datetime, got {value!r}") from e


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    """Print a formatted info message.

    Args:
        msg: Info message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def format_progress(progress: TaskProgress) -> str:
    """Format progress as ``done/total (pct%)``."""
    return (
        f"{progress.completed_subtasks}/{progress.total_subtasks} "
        f"({progress.progress_percentage}%)"
    )


def format_task(task: Task, categories: CategoryRepository | None = None) -> str:
    """One-line summary of a task: checkbox, id, title and details.

    With ``categories``, the task's category is shown by name.
    """
    mark = "[x]" if task.completed else "[ ]"
    details = [task.priority.value]
    if task.category_id and categories is not None:
        details.append(f"@{category_label(categories, task.category_id)}")
    if task.due_date:
        details.append(f"due {task.due_date.date().isoformat()}")
    if task.tags:
        details.append(" ".join(f"#{tag}" for tag in task.tags))
    return f"{mark} {task.id}  {task.title}  ({', '.join(details)})"


def print_tree(nodes: list[HierarchyNode], store: TaskStore) -> None:
    """Print a forest, indented by depth, with progress next to each parent.

    Progress comes from the store's full snapshot, so it is unaffected
    by whatever filter produced ``nodes``.
    """
    for node in walk(nodes):
        indent = "  " * node.depth
        line = f"{indent}- {format_task(node.task, store.categories)}"
        progress = store.progress(node.task.id)
        if progress.has_subtasks:
            line += f"  {format_progress(progress)}"
        typer.echo(line)


__all__ = [
    "DataFileOption",
    "get_data_file",
    "get_categories_file",
    "open_categories",
    "open_store",
    "exit_on_error",
    "require_task",
    "parse_due",
    "print_error",
    "print_success",
    "print_info",
    "format_progress",
    "format_task",
    "print_tree",
]
