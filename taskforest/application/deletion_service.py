"""Structural mutator: deletions that decide the fate of subtasks.

Three strategies, each with a bulk form:

- single: delete one task; its children become orphans
- with descendants: delete the task and its whole subtree
- promote: delete the task and move its direct children up one level

Bulk forms expand the selection first, deduplicate overlaps (a task and
one of its descendants both selected) and touch each affected task once.
A multi-call operation reports one outcome: either every call succeeded,
or a BulkOperationError listing what was done before the failure.
"""

import logging
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, Field

from taskforest.application.ports import TaskRepository
from taskforest.domain.shared import (
    BulkOperationError,
    Err,
    NotFoundError,
    Ok,
    Result,
    TaskError,
    map_result,
)
from taskforest.domain.task import (
    Task,
    UpdateTaskRequest,
    all_descendants_of,
    depth_of,
    has_subtasks,
    index_by_id,
)

logger = logging.getLogger(__name__)


class DeleteMode(str, Enum):
    """How to treat a deleted task's subtasks."""

    SINGLE = "single"
    WITH_SUBTASKS = "with-subtasks"
    PROMOTE = "promote"


class DeletionReport(BaseModel):
    """Ids touched by a completed deletion, in processing order."""

    deleted_ids: list[str] = Field(default_factory=list)
    promoted_ids: list[str] = Field(default_factory=list)


# =============================================================================
# Planning (pure)
# =============================================================================


def plan_subtree_deletion(selected_ids: Sequence[str], tasks: Sequence[Task]) -> list[str]:
    """Expand selected ids to their subtrees, children before parents.

    Each subtree is listed in reverse depth-first pre-order, so every
    task comes after all of its descendants. Ids reached through more
    than one selection are listed once.
    """
    order: dict[str, None] = {}
    for task_id in selected_ids:
        subtree = [task_id, *(t.id for t in all_descendants_of(task_id, tasks))]
        for tid in reversed(subtree):
            order.setdefault(tid, None)
    return list(order)


def _surviving_parent(task: Task, deleted: set[str], by_id: dict[str, Task]) -> str | None:
    """Nearest ancestor of ``task`` that is not being deleted."""
    parent_id = task.parent_id
    seen: set[str] = set()
    while parent_id in deleted and parent_id not in seen:
        seen.add(parent_id)
        parent_id = by_id[parent_id].parent_id
    # An unresolvable grandparent cannot be linked to, so the child becomes a root
    if parent_id is None or parent_id in deleted or parent_id not in by_id:
        return None
    return parent_id


def plan_promotion(
    selected_ids: Sequence[str],
    tasks: Sequence[Task],
) -> tuple[list[tuple[str, str | None]], list[str]]:
    """Work out re-parenting and deletion order for a promote-delete.

    Every surviving task whose parent is being deleted moves to its
    nearest surviving ancestor (None means root). Deeper descendants keep
    their parent, which is itself one of the promoted tasks.

    Returns:
        (promotions as (task_id, new_parent_id) in snapshot order,
        deletion order deepest first)
    """
    deleted = set(selected_ids)
    by_id = index_by_id(tasks)

    promotions = [
        (task.id, _surviving_parent(task, deleted, by_id))
        for task in tasks
        if task.id not in deleted and task.parent_id in deleted
    ]

    unique_selected = list(dict.fromkeys(selected_ids))
    deletion_order = sorted(
        unique_selected,
        key=lambda tid: depth_of(by_id[tid], tasks),
        reverse=True,
    )
    return promotions, deletion_order


# =============================================================================
# Execution
# =============================================================================


def _snapshot_containing(
    repository: TaskRepository,
    ids: Sequence[str],
) -> Result[list[Task], TaskError]:
    """Full snapshot, or NotFoundError if any of ``ids`` is missing."""
    snapshot = repository.list_tasks()
    if isinstance(snapshot, Err):
        return snapshot

    known = {task.id for task in snapshot.value}
    for task_id in ids:
        if task_id not in known:
            return Err(NotFoundError.for_task(task_id))
    return snapshot


def _delete_in_order(
    repository: TaskRepository,
    operation: str,
    order: list[str],
    report: DeletionReport,
) -> Result[DeletionReport, TaskError]:
    for task_id in order:
        deleted = repository.delete_task(task_id)
        if isinstance(deleted, Err):
            return Err(
                BulkOperationError.from_failure(
                    operation,
                    [*report.promoted_ids, *report.deleted_ids],
                    task_id,
                    deleted.error,
                )
            )
        report.deleted_ids.append(task_id)
    return Ok(report)


def delete_single(repository: TaskRepository, task_id: str) -> Result[DeletionReport, TaskError]:
    """Delete exactly one task. Any children are left as orphans."""
    deleted = repository.delete_task(task_id)
    if isinstance(deleted, Err):
        return deleted
    return Ok(DeletionReport(deleted_ids=[task_id]))


def bulk_delete_with_descendants(
    repository: TaskRepository,
    ids: Sequence[str],
) -> Result[DeletionReport, TaskError]:
    """Delete the selected tasks and all of their descendants.

    Args:
        repository: Task repository.
        ids: Selected task ids; overlaps and duplicates are fine.

    Returns:
        Ok(DeletionReport), Err(NotFoundError) before any deletion if a
        selected id is unknown, or Err(BulkOperationError) on a
        mid-batch failure.
    """
    snapshot = _snapshot_containing(repository, ids)
    if isinstance(snapshot, Err):
        return snapshot

    order = plan_subtree_deletion(ids, snapshot.value)
    logger.info("Deleting %d task(s) from %d selected subtree(s)", len(order), len(set(ids)))
    return _delete_in_order(repository, "Deleting subtasks", order, DeletionReport())


def delete_with_descendants(
    repository: TaskRepository,
    task_id: str,
) -> Result[DeletionReport, TaskError]:
    """Delete a task and every transitive descendant."""
    return bulk_delete_with_descendants(repository, [task_id])


def bulk_delete_and_promote(
    repository: TaskRepository,
    ids: Sequence[str],
) -> Result[DeletionReport, TaskError]:
    """Delete the selected tasks, moving their children up.

    Children are re-parented before any deletion, so at no point does a
    surviving task point at a deleted one.

    Returns:
        Ok(DeletionReport), Err(NotFoundError) before any change if a
        selected id is unknown, or Err(BulkOperationError) on a
        mid-batch failure.
    """
    snapshot = _snapshot_containing(repository, ids)
    if isinstance(snapshot, Err):
        return snapshot

    promotions, deletion_order = plan_promotion(ids, snapshot.value)
    logger.info(
        "Deleting %d task(s), promoting %d subtask(s)",
        len(deletion_order),
        len(promotions),
    )

    report = DeletionReport()
    for child_id, new_parent_id in promotions:
        moved = repository.update_task(child_id, UpdateTaskRequest(parent_id=new_parent_id))
        if isinstance(moved, Err):
            return Err(
                BulkOperationError.from_failure(
                    "Promoting subtasks",
                    report.promoted_ids,
                    child_id,
                    moved.error,
                )
            )
        report.promoted_ids.append(child_id)

    return _delete_in_order(repository, "Deleting promoted parents", deletion_order, report)


def delete_and_promote_descendants(
    repository: TaskRepository,
    task_id: str,
) -> Result[DeletionReport, TaskError]:
    """Delete a task and re-parent its direct children to its parent."""
    return bulk_delete_and_promote(repository, [task_id])


def delete_tasks(
    repository: TaskRepository,
    ids: Sequence[str],
    mode: DeleteMode,
) -> Result[DeletionReport, TaskError]:
    """Dispatch a (bulk) deletion by mode."""
    if mode == DeleteMode.WITH_SUBTASKS:
        return bulk_delete_with_descendants(repository, ids)
    if mode == DeleteMode.PROMOTE:
        return bulk_delete_and_promote(repository, ids)

    snapshot = _snapshot_containing(repository, ids)
    if isinstance(snapshot, Err):
        return snapshot
    order = list(dict.fromkeys(ids))
    return _delete_in_order(repository, "Deleting tasks", order, DeletionReport())


# =============================================================================
# Read-only checks
# =============================================================================


def check_has_subtasks(repository: TaskRepository, task_id: str) -> Result[bool, TaskError]:
    """Whether a task has at least one subtask. Unknown ids have none."""
    return map_result(repository.list_tasks(), lambda tasks: has_subtasks(task_id, tasks))


def check_have_subtasks(
    repository: TaskRepository,
    ids: Sequence[str],
) -> Result[list[str], TaskError]:
    """The subset of ``ids`` that have subtasks, in input order."""
    return map_result(
        repository.list_tasks(),
        lambda tasks: [tid for tid in dict.fromkeys(ids) if has_subtasks(tid, tasks)],
    )
