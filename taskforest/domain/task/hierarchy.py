"""Hierarchy index over a flat task collection.

All functions in this module are pure - no I/O, no side effects.
They take a snapshot of tasks in and return data out, answering
parent/child questions by grouping on ``parent_id``.

Unknown ids are never an error here: lookups that fail to resolve
degrade to "missing" or "treat as root", since callers routinely work
with partially loaded or just-mutated snapshots. Every upward or
downward walk keeps a visited set so malformed (cyclic) data still
terminates.
"""

from collections.abc import Sequence

from .models import Task


# =============================================================================
# Index Building
# =============================================================================


def index_by_id(tasks: Sequence[Task]) -> dict[str, Task]:
    """Map task ids to tasks."""
    return {task.id: task for task in tasks}


def group_by_parent(tasks: Sequence[Task]) -> dict[str | None, list[Task]]:
    """Group tasks by ``parent_id``, preserving snapshot order per group."""
    groups: dict[str | None, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.parent_id, []).append(task)
    return groups


# =============================================================================
# Lookups
# =============================================================================


def find_task(task_id: str, tasks: Sequence[Task]) -> Task | None:
    """Find a task by id, or None if it is not in the snapshot."""
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def parent_of(task: Task, tasks: Sequence[Task]) -> Task | None:
    """Return the task's parent, or None for roots and orphans."""
    if task.parent_id is None:
        return None
    return find_task(task.parent_id, tasks)


def children_of(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """Direct children of a task, in snapshot order.

    The index imposes no ordering of its own; callers sort if needed.
    """
    return [task for task in tasks if task.parent_id == task_id]


def has_subtasks(task_id: str, tasks: Sequence[Task]) -> bool:
    """True when at least one task names ``task_id`` as its parent."""
    return any(task.parent_id == task_id for task in tasks)


# =============================================================================
# Traversals
# =============================================================================


def all_descendants_of(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """All transitive descendants of a task, depth-first pre-order.

    Each child is immediately followed by its own descendants. An id is
    never visited twice, which also guards against cycles in bad data.

    Args:
        task_id: The task whose subtree to expand.
        tasks: Task snapshot to search.

    Returns:
        Descendants (not including the task itself).
    """
    groups = group_by_parent(tasks)
    visited = {task_id}
    descendants: list[Task] = []
    stack = list(reversed(groups.get(task_id, [])))

    while stack:
        task = stack.pop()
        if task.id in visited:
            continue
        visited.add(task.id)
        descendants.append(task)
        stack.extend(reversed(groups.get(task.id, [])))

    return descendants


def ancestors_of(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """Resolvable ancestors of a task, nearest first.

    Stops at the first parent reference that does not resolve.
    """
    by_id = index_by_id(tasks)
    current = by_id.get(task_id)
    if current is None:
        return []

    seen = {task_id}
    ancestors: list[Task] = []
    while current.parent_id is not None and current.parent_id not in seen:
        parent = by_id.get(current.parent_id)
        if parent is None:
            break
        seen.add(parent.id)
        ancestors.append(parent)
        current = parent
    return ancestors


def is_ancestor_of(ancestor_id: str, descendant_id: str, tasks: Sequence[Task]) -> bool:
    """Check whether ``ancestor_id`` lies on the parent chain of ``descendant_id``.

    Returns False when the descendant is unknown or root-like, or when the
    walk reaches a root without meeting the ancestor.
    """
    by_id = index_by_id(tasks)
    current = by_id.get(descendant_id)
    if current is None:
        return False

    seen = {descendant_id}
    while current.parent_id is not None:
        if current.parent_id == ancestor_id:
            return True
        if current.parent_id in seen:
            return False
        seen.add(current.parent_id)
        parent = by_id.get(current.parent_id)
        if parent is None:
            return False
        current = parent
    return False


def root_task(task: Task, tasks: Sequence[Task]) -> Task:
    """Walk upward to the task's effective root.

    An orphan (parent set but absent) is its own effective root.
    """
    ancestors = ancestors_of(task.id, tasks)
    if ancestors:
        return ancestors[-1]
    return task


def depth_of(task: Task, tasks: Sequence[Task]) -> int:
    """Number of resolvable ancestors above a task (0 for roots and orphans)."""
    return len(ancestors_of(task.id, tasks))


# =============================================================================
# Roots and Orphans
# =============================================================================


def forest_roots(tasks: Sequence[Task]) -> list[Task]:
    """True roots: tasks with no parent reference."""
    return [task for task in tasks if task.parent_id is None]


def find_orphans(tasks: Sequence[Task]) -> list[Task]:
    """Tasks whose ``parent_id`` does not resolve within ``tasks``.

    Against the full collection these are real orphans (their parent was
    deleted). Against a filtered view they are usually just tasks whose
    parent was filtered out.
    """
    ids = {task.id for task in tasks}
    return [
        task for task in tasks if task.parent_id is not None and task.parent_id not in ids
    ]


def view_roots(tasks: Sequence[Task]) -> list[Task]:
    """Tasks rendered at the top level of a view: true roots plus orphans."""
    ids = {task.id for task in tasks}
    return [task for task in tasks if task.parent_id is None or task.parent_id not in ids]
