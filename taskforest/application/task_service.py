"""Task application service.

Hierarchy-aware wrappers around the task repository. These are the
operations every interface (CLI, HTTP) calls for creating, editing,
listing and inspecting tasks. Derived data (progress, hierarchy views)
is recomputed from a fresh repository snapshot on every call.
"""

import logging

from taskforest.application.category_service import check_category
from taskforest.application.ports import CategoryRepository, TaskRepository
from taskforest.domain.shared import (
    Err,
    NotFoundError,
    Ok,
    Result,
    TaskError,
    flat_map,
    map_result,
)
from taskforest.domain.task import (
    CreateTaskRequest,
    HierarchyNode,
    SortConfig,
    Task,
    TaskFilter,
    TaskProgress,
    UpdateTaskRequest,
    all_descendants_of,
    build_hierarchy,
    build_subtree,
    calculate_progress,
    find_orphans,
    sort_tasks,
    validate_parent_change,
)

logger = logging.getLogger(__name__)


def create_task(
    repository: TaskRepository,
    request: CreateTaskRequest,
    categories: CategoryRepository | None = None,
) -> Result[Task, TaskError]:
    """Create a root task or a subtask of an existing task.

    A new task cannot be anyone's ancestor yet, so linking it under an
    existing parent always keeps the forest acyclic. When ``categories``
    is given, a ``category_id`` must name an existing category.
    """
    if categories is not None:
        known = check_category(categories, request.category_id)
        if isinstance(known, Err):
            return known

    logger.debug("Creating task %r under parent %s", request.title, request.parent_id)
    return repository.create_task(request)


def update_task(
    repository: TaskRepository,
    task_id: str,
    request: UpdateTaskRequest,
    categories: CategoryRepository | None = None,
) -> Result[Task, TaskError]:
    """Apply a partial update, refusing parent changes that would cycle.

    Args:
        repository: Task repository.
        task_id: Task to update.
        request: Explicitly-set fields to change.
        categories: When given, a new ``category_id`` must exist.

    Returns:
        Ok(updated Task), Err(ValidationError) when ``parent_id`` would
        point at the task itself or one of its descendants,
        Err(NotFoundError) for an unknown category, or any error from the
        repository.
    """
    if categories is not None and "category_id" in request.model_fields_set:
        known = check_category(categories, request.category_id)
        if isinstance(known, Err):
            return known

    if request.sets_parent() and request.parent_id is not None:
        snapshot = repository.list_tasks()
        if isinstance(snapshot, Err):
            return snapshot
        allowed = validate_parent_change(task_id, request.parent_id, snapshot.value)
        if isinstance(allowed, Err):
            logger.warning("Rejected parent change for %s: %s", task_id, allowed.error)
            return allowed

    return repository.update_task(task_id, request)


def get_task(repository: TaskRepository, task_id: str) -> Result[Task, TaskError]:
    """Fetch a single task."""
    return repository.get_task(task_id)


def list_tasks(
    repository: TaskRepository,
    task_filter: TaskFilter | None = None,
    sort: SortConfig | None = None,
) -> Result[list[Task], TaskError]:
    """List tasks matching a filter, optionally sorted."""
    listed = repository.list_tasks(task_filter)
    if sort is None:
        return listed
    return map_result(listed, lambda tasks: sort_tasks(tasks, sort))


def search_tasks(repository: TaskRepository, query: str) -> Result[list[Task], TaskError]:
    """Tasks whose title or description contains ``query``."""
    return repository.list_tasks(TaskFilter(search_query=query))


def get_subtasks(repository: TaskRepository, parent_id: str) -> Result[list[Task], TaskError]:
    """Direct children of a task."""
    return repository.list_tasks(TaskFilter(parent_id=parent_id))


def get_task_with_subtasks(
    repository: TaskRepository,
    task_id: str,
) -> Result[list[Task], TaskError]:
    """A task followed by all of its descendants, depth-first."""
    task = repository.get_task(task_id)
    if isinstance(task, Err):
        return task

    snapshot = repository.list_tasks()
    if isinstance(snapshot, Err):
        return snapshot

    return Ok([task.value, *all_descendants_of(task_id, snapshot.value)])


def get_progress(repository: TaskRepository, task_id: str) -> Result[TaskProgress, TaskError]:
    """Progress of a task's subtree against the full, unfiltered collection."""
    return flat_map(
        repository.get_task(task_id),
        lambda _: map_result(
            repository.list_tasks(), lambda tasks: calculate_progress(task_id, tasks)
        ),
    )


def get_hierarchy(
    repository: TaskRepository,
    task_filter: TaskFilter | None = None,
    sort: SortConfig | None = None,
) -> Result[list[HierarchyNode], TaskError]:
    """Forest view of the (optionally filtered) collection.

    Tasks whose parent is filtered out become view roots.
    """
    listed = list_tasks(repository, task_filter, sort)
    if isinstance(listed, Err):
        return listed

    if task_filter is None or task_filter.is_empty():
        orphans = find_orphans(listed.value)
        if orphans:
            logger.warning(
                "%d orphaned task(s) shown as roots: %s",
                len(orphans),
                ", ".join(t.id for t in orphans),
            )

    return Ok(build_hierarchy(listed.value))


def get_subtree(repository: TaskRepository, task_id: str) -> Result[HierarchyNode, TaskError]:
    """A task and its descendants as a single HierarchyNode."""
    listed = get_task_with_subtasks(repository, task_id)
    if isinstance(listed, Err):
        return listed

    node = build_subtree(task_id, listed.value)
    if node is None:
        return Err(NotFoundError.for_task(task_id))
    return Ok(node)
