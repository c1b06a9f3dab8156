"""Input validation for task mutations.

Pure checks returning Results, shared by repositories and services so
every entry point rejects the same inputs with the same errors.
"""

from collections.abc import Sequence

from taskforest.domain.shared import Err, Ok, Result, ValidationError

from .hierarchy import all_descendants_of
from .models import Task


def validate_title(title: str | None) -> Result[str, ValidationError]:
    """Check a task title and return it stripped.

    Args:
        title: Raw title as supplied by the caller.

    Returns:
        Ok(stripped title), or Err(ValidationError) if empty or blank.
    """
    if title is None or not title.strip():
        return Err(ValidationError("Task title cannot be empty"))
    return Ok(title.strip())


def validate_parent_change(
    task_id: str,
    new_parent_id: str | None,
    tasks: Sequence[Task],
) -> Result[None, ValidationError]:
    """Reject a ``parent_id`` retarget that would create a cycle.

    A task may not become its own parent, nor a child of any of its
    transitive descendants. Moving to the root (None) is always allowed.

    Args:
        task_id: The task being re-parented.
        new_parent_id: Proposed parent id, or None for root.
        tasks: Full task snapshot.

    Returns:
        Ok(None) if the move keeps the forest acyclic.
    """
    if new_parent_id is None:
        return Ok(None)
    if new_parent_id == task_id:
        return Err(ValidationError(f"Task {task_id} cannot be its own parent"))
    descendant_ids = {t.id for t in all_descendants_of(task_id, tasks)}
    if new_parent_id in descendant_ids:
        return Err(
            ValidationError(
                f"Cannot move task {task_id} under its own subtask {new_parent_id}"
            )
        )
    return Ok(None)
