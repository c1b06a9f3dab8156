"""Task management CLI commands.

Commands for the task lifecycle: adding and editing tasks, listing them
flat or as a tree, completing them (with or without their subtasks) and
deleting them.
"""

from typing import Annotated, Any, Optional

import typer

from taskforest.application import (
    CompletionResolution,
    DeleteMode,
    check_have_subtasks,
)
from taskforest.domain.task import (
    CreateTaskRequest,
    Priority,
    SortConfig,
    SortField,
    SortOrder,
    TaskFilter,
    UpdateTaskRequest,
)
from taskforest.global_config import get_global_config
from taskforest.interfaces.cli.common import (
    DataFileOption,
    exit_on_error,
    format_progress,
    format_task,
    open_store,
    parse_due,
    print_error,
    print_info,
    print_success,
    print_tree,
    require_task,
)

app = typer.Typer(help="Task management commands")

PriorityOption = Annotated[
    Optional[Priority],
    typer.Option("--priority", "-p", case_sensitive=False, help="Low, Medium or High"),
]


# =============================================================================
# Create and Edit
# =============================================================================


@app.command("add")
def add(
    title: Annotated[str, typer.Argument(help="Task title")],
    parent: Annotated[Optional[str], typer.Option("--parent", help="Parent task ID")] = None,
    priority: PriorityOption = None,
    due: Annotated[Optional[str], typer.Option("--due", help="Due date (YYYY-MM-DD)")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Category ID")] = None,
    tag: Annotated[
        Optional[list[str]], typer.Option("--tag", "-t", help="Tag (repeatable)")
    ] = None,
    description: Annotated[Optional[str], typer.Option("--description", help="Notes")] = None,
    data: DataFileOption = None,
) -> None:
    """Add a task, optionally as a subtask of another."""
    store = open_store(data)
    request = CreateTaskRequest(
        title=title,
        description=description,
        priority=priority or get_global_config().default_priority,
        due_date=parse_due(due),
        category_id=category,
        tags=tag or [],
        parent_id=parent,
    )
    task = exit_on_error(store.create(request))
    print_success(f"Added {task.id}: {task.title}")


@app.command("edit")
def edit(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    title: Annotated[Optional[str], typer.Option("--title", help="New title")] = None,
    description: Annotated[Optional[str], typer.Option("--description", help="Notes")] = None,
    parent: Annotated[Optional[str], typer.Option("--parent", help="Move under this task")] = None,
    root: Annotated[bool, typer.Option("--root", help="Move to the top level")] = False,
    priority: PriorityOption = None,
    due: Annotated[Optional[str], typer.Option("--due", help="Due date (YYYY-MM-DD)")] = None,
    clear_due: Annotated[bool, typer.Option("--clear-due", help="Remove the due date")] = False,
    category: Annotated[Optional[str], typer.Option("--category", help="Category ID")] = None,
    uncategorize: Annotated[
        bool, typer.Option("--uncategorize", help="Remove the category")
    ] = False,
    tag: Annotated[
        Optional[list[str]], typer.Option("--tag", "-t", help="Replace tags (repeatable)")
    ] = None,
    data: DataFileOption = None,
) -> None:
    """Edit a task. Only the options given are changed."""
    if parent is not None and root:
        print_error("--parent and --root are mutually exclusive")
        raise typer.Exit(1)
    if due is not None and clear_due:
        print_error("--due and --clear-due are mutually exclusive")
        raise typer.Exit(1)
    if category is not None and uncategorize:
        print_error("--category and --uncategorize are mutually exclusive")
        raise typer.Exit(1)

    # Only explicitly-set fields reach the request, so None can mean "clear"
    changes: dict[str, Any] = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if parent is not None:
        changes["parent_id"] = parent
    if root:
        changes["parent_id"] = None
    if priority is not None:
        changes["priority"] = priority
    if due is not None:
        changes["due_date"] = parse_due(due)
    if clear_due:
        changes["due_date"] = None
    if category is not None:
        changes["category_id"] = category
    if uncategorize:
        changes["category_id"] = None
    if tag is not None:
        changes["tags"] = tag

    if not changes:
        print_info("Nothing to change")
        return

    store = open_store(data)
    task = exit_on_error(store.update(task_id, UpdateTaskRequest(**changes)))
    print_success(f"Updated {task.id}: {task.title}")


# =============================================================================
# Views
# =============================================================================


@app.command("list")
def list_tasks(
    completed: Annotated[
        Optional[bool],
        typer.Option("--completed/--pending", help="Only completed or only pending tasks"),
    ] = None,
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Text to find")] = None,
    priority: PriorityOption = None,
    category: Annotated[
        Optional[str], typer.Option("--category", help="Only tasks in this category")
    ] = None,
    uncategorized: Annotated[
        bool, typer.Option("--uncategorized", help="Only tasks without a category")
    ] = False,
    sort: Annotated[Optional[SortField], typer.Option("--sort", help="Sort field")] = None,
    desc: Annotated[bool, typer.Option("--desc", help="Sort descending")] = False,
    data: DataFileOption = None,
) -> None:
    """List tasks as a flat list."""
    if category is not None and uncategorized:
        print_error("--category and --uncategorized are mutually exclusive")
        raise typer.Exit(1)

    store = open_store(data)
    store.task_filter = TaskFilter(
        completed=completed,
        search_query=search,
        priority=priority,
        category_id=category,
        no_category=uncategorized or None,
    )

    sort_config = None
    if sort is not None:
        sort_config = SortConfig(field=sort, order=SortOrder.DESC if desc else SortOrder.ASC)

    tasks = store.visible_tasks(sort_config)
    if not tasks:
        print_info("No tasks found")
        return

    for task in tasks:
        typer.echo(format_task(task, store.categories))


@app.command("tree")
def tree(
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Text to find")] = None,
    pending: Annotated[bool, typer.Option("--pending", help="Hide completed tasks")] = False,
    data: DataFileOption = None,
) -> None:
    """Show tasks as an indented tree with subtask progress."""
    store = open_store(data)
    store.task_filter = TaskFilter(search_query=search, completed=False if pending else None)

    nodes = store.hierarchy()
    if not nodes:
        print_info("No tasks found")
        return

    print_tree(nodes, store)


@app.command("progress")
def progress(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    data: DataFileOption = None,
) -> None:
    """Show how many of a task's subtasks (at any depth) are done."""
    store = open_store(data)
    task = require_task(store, task_id)
    task_progress = store.progress(task_id)

    if not task_progress.has_subtasks:
        typer.echo(f"{task.title}: no subtasks")
        return
    typer.echo(f"{task.title}: {format_progress(task_progress)}")


# =============================================================================
# Completion
# =============================================================================


@app.command("done")
def done(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    with_subtasks: Annotated[
        bool, typer.Option("--with-subtasks", help="Also complete every incomplete subtask")
    ] = False,
    parent_only: Annotated[
        bool, typer.Option("--parent-only", help="Leave incomplete subtasks as they are")
    ] = False,
    data: DataFileOption = None,
) -> None:
    """Mark a task completed.

    If the task has incomplete subtasks you are asked whether to complete
    them too, unless --with-subtasks or --parent-only says so already.
    """
    if with_subtasks and parent_only:
        print_error("--with-subtasks and --parent-only are mutually exclusive")
        raise typer.Exit(1)

    store = open_store(data)
    task = require_task(store, task_id)
    if task.completed:
        print_info(f"Already completed: {task.title}")
        return

    if with_subtasks or parent_only:
        resolution = (
            CompletionResolution.COMPLETE_WITH_DESCENDANTS
            if with_subtasks
            else CompletionResolution.COMPLETE_PARENT_ONLY
        )
    else:
        outcome = exit_on_error(store.request_toggle(task_id))
        if not outcome.needs_decision:
            print_success(f"Completed {task.title}")
            return

        typer.echo(f"'{task.title}' has {len(outcome.incomplete_subtasks)} incomplete subtask(s):")
        for subtask in outcome.incomplete_subtasks:
            typer.echo(f"  - {subtask.title}")
        complete_all = typer.confirm("Complete them as well?", default=True)
        resolution = (
            CompletionResolution.COMPLETE_WITH_DESCENDANTS
            if complete_all
            else CompletionResolution.COMPLETE_PARENT_ONLY
        )

    result = exit_on_error(store.confirm_completion(task_id, resolution))
    if result.completed_subtasks:
        print_success(
            f"Completed {result.task.title} and {len(result.completed_subtasks)} subtask(s)"
        )
    else:
        print_success(f"Completed {result.task.title}")


@app.command("undo")
def undo(
    task_ids: Annotated[list[str], typer.Argument(help="Task IDs")],
    data: DataFileOption = None,
) -> None:
    """Mark tasks as not completed. Subtasks are left unchanged."""
    store = open_store(data)
    for task_id in task_ids:
        require_task(store, task_id)

    updated = exit_on_error(store.mark_completed(task_ids, completed=False))
    print_success(f"Reopened {len(updated)} task(s)")


# =============================================================================
# Deletion
# =============================================================================


@app.command("rm")
def rm(
    task_ids: Annotated[list[str], typer.Argument(help="Task IDs")],
    with_subtasks: Annotated[
        bool, typer.Option("--with-subtasks", help="Delete all subtasks too")
    ] = False,
    promote: Annotated[
        bool, typer.Option("--promote", help="Move subtasks up one level")
    ] = False,
    data: DataFileOption = None,
) -> None:
    """Delete tasks.

    Tasks that have subtasks are only deleted when --with-subtasks or
    --promote says what should happen to those subtasks.
    """
    if with_subtasks and promote:
        print_error("--with-subtasks and --promote are mutually exclusive")
        raise typer.Exit(1)

    store = open_store(data)
    for task_id in task_ids:
        require_task(store, task_id)

    if with_subtasks:
        mode = DeleteMode.WITH_SUBTASKS
    elif promote:
        mode = DeleteMode.PROMOTE
    else:
        mode = DeleteMode.SINGLE
        parents = exit_on_error(check_have_subtasks(store.repository, task_ids))
        if parents:
            print_error(f"Task(s) with subtasks: {', '.join(parents)}")
            typer.echo("Use --with-subtasks to delete them too, or --promote to keep them.")
            raise typer.Exit(1)

    report = exit_on_error(store.delete(task_ids, mode))
    message = f"Deleted {len(report.deleted_ids)} task(s)"
    if report.promoted_ids:
        message += f", promoted {len(report.promoted_ids)} subtask(s)"
    print_success(message)
