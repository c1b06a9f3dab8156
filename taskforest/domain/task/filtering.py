"""Task filter predicates.

Pure functions evaluating a TaskFilter against tasks. A filter is a
conjunction: a task matches only if every set predicate holds.
"""

from collections.abc import Sequence

from .models import Task, TaskFilter


def matches_search(task: Task, query: str) -> bool:
    """Case-insensitive substring match over title and description."""
    needle = query.casefold()
    if needle in task.title.casefold():
        return True
    return task.description is not None and needle in task.description.casefold()


def matches_filter(task: Task, task_filter: TaskFilter) -> bool:
    """Check a single task against every set predicate of a filter."""
    f = task_filter

    if f.completed is not None and task.completed != f.completed:
        return False
    if f.priority is not None and task.priority != f.priority:
        return False
    if f.category_id is not None and task.category_id != f.category_id:
        return False
    if f.no_category and task.category_id is not None:
        return False
    if f.parent_id is not None and task.parent_id != f.parent_id:
        return False
    if f.search_query is not None and not matches_search(task, f.search_query):
        return False
    # A task without a due date never satisfies a due bound
    if f.due_before is not None and (task.due_date is None or task.due_date > f.due_before):
        return False
    if f.due_after is not None and (task.due_date is None or task.due_date < f.due_after):
        return False

    return True


def apply_filter(tasks: Sequence[Task], task_filter: TaskFilter | None) -> list[Task]:
    """Return the tasks matching a filter, preserving order.

    No filter (or an empty one) returns the whole collection.
    """
    if task_filter is None or task_filter.is_empty():
        return list(tasks)
    return [task for task in tasks if matches_filter(task, task_filter)]
