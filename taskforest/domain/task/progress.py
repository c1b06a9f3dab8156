"""Progress calculation over a task's transitive subtasks.

Pure functions. Progress must always be computed against the full,
unfiltered task collection: a view that hides completed tasks must not
change the numbers shown next to a parent.
"""

from collections.abc import Sequence

from .hierarchy import all_descendants_of
from .models import Task, TaskProgress


def percentage(completed: int, total: int) -> int:
    """Integer percentage rounded half-up, 0 when ``total`` is 0."""
    if total <= 0:
        return 0
    # Integer form of floor(100 * completed / total + 0.5), no float error
    return (200 * completed + total) // (2 * total)


def calculate_progress(task_id: str, all_tasks: Sequence[Task]) -> TaskProgress:
    """Compute completion of every transitive descendant of a task.

    Args:
        task_id: Task whose subtree to measure. An unknown id yields an
            empty progress rather than an error.
        all_tasks: Full task snapshot.

    Returns:
        TaskProgress with totals over all descendants, not only direct
        children.
    """
    descendants = all_descendants_of(task_id, all_tasks)
    total = len(descendants)
    completed = sum(1 for task in descendants if task.completed)

    return TaskProgress(
        total_subtasks=total,
        completed_subtasks=completed,
        progress_percentage=percentage(completed, total),
        has_subtasks=total > 0,
    )


def progress_by_task(all_tasks: Sequence[Task]) -> dict[str, TaskProgress]:
    """Progress for every task in the snapshot, keyed by id."""
    return {task.id: calculate_progress(task.id, all_tasks) for task in all_tasks}
