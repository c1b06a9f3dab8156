"""Application service layer for taskforest.

This package contains application services that orchestrate domain
operations against the task and category repositories. Services are plain functions that
take the repository as their first argument and return Results.

Services:
    task_service - Create, update, list and inspect tasks
    category_service - Categories and the task references to them
    completion_service - Completion flow for tasks with incomplete subtasks
    deletion_service - Deletion strategies (single, subtree, promote)
    store - TaskStore, a snapshot view over a repository

Example usage:
    >>> from taskforest.application import request_toggle, confirm_completion
    >>> from taskforest.application import CompletionResolution
    >>>
    >>> outcome = request_toggle(repository, task_id)
    >>> if isinstance(outcome, Ok) and outcome.value.needs_decision:
    ...     confirm_completion(
    ...         repository, task_id, CompletionResolution.COMPLETE_WITH_DESCENDANTS
    ...     )
"""

from taskforest.application.category_service import (
    category_label,
    check_category,
    create_category,
    delete_category,
    get_category,
    list_categories,
    seed_default_categories,
    update_category,
)
from taskforest.application.completion_service import (
    CompletionResolution,
    CompletionResult,
    ToggleOutcome,
    bulk_mark_completed,
    confirm_completion,
    get_incomplete_subtasks,
    request_toggle,
)
from taskforest.application.deletion_service import (
    DeleteMode,
    DeletionReport,
    bulk_delete_and_promote,
    bulk_delete_with_descendants,
    check_has_subtasks,
    check_have_subtasks,
    delete_and_promote_descendants,
    delete_single,
    delete_tasks,
    delete_with_descendants,
)
from taskforest.application.ports import CategoryRepository, TaskRepository
from taskforest.application.store import TaskStore
from taskforest.application.task_service import (
    create_task,
    get_hierarchy,
    get_progress,
    get_subtasks,
    get_subtree,
    get_task,
    get_task_with_subtasks,
    list_tasks,
    search_tasks,
    update_task,
)

__all__ = [
    # Ports
    "TaskRepository",
    "CategoryRepository",
    # Task service
    "create_task",
    "update_task",
    "get_task",
    "list_tasks",
    "search_tasks",
    "get_subtasks",
    "get_task_with_subtasks",
    "get_progress",
    "get_hierarchy",
    "get_subtree",
    # Completion service
    "get_incomplete_subtasks",
    "request_toggle",
    "confirm_completion",
    "bulk_mark_completed",
    "CompletionResolution",
    "CompletionResult",
    "ToggleOutcome",
    # Deletion service
    "delete_single",
    "delete_with_descendants",
    "delete_and_promote_descendants",
    "bulk_delete_with_descendants",
    "bulk_delete_and_promote",
    "delete_tasks",
    "check_has_subtasks",
    "check_have_subtasks",
    "DeleteMode",
    "DeletionReport",
    # Category service
    "create_category",
    "get_category",
    "list_categories",
    "update_category",
    "delete_category",
    "seed_default_categories",
    "check_category",
    "category_label",
    # Store
    "TaskStore",
]
