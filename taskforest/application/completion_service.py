"""Completion coordinator.

Governs what happens when a task's ``completed`` flag is toggled while
it has incomplete subtasks. The flow is two independent calls:

1. ``request_toggle`` either toggles immediately or reports that a
   decision is needed, listing the incomplete descendants.
2. ``confirm_completion`` carries the caller's decision.

No pending state is kept between the two calls; the caller holds the
decision context.

Un-completing a task never cascades, and completing a parent alone
while children stay incomplete is a legal state.
"""

import logging
from enum import Enum

from pydantic import BaseModel, Field

from taskforest.application.ports import TaskRepository
from taskforest.domain.shared import BulkOperationError, Err, Ok, Result, TaskError
from taskforest.domain.task import Task, UpdateTaskRequest

logger = logging.getLogger(__name__)


class CompletionResolution(str, Enum):
    """Caller's decision for completing a task with incomplete subtasks."""

    COMPLETE_WITH_DESCENDANTS = "complete-with-descendants"
    COMPLETE_PARENT_ONLY = "complete-parent-only"


class ToggleOutcome(BaseModel):
    """Result of a toggle request.

    When ``needs_decision`` is True nothing was changed: ``task`` is the
    unchanged task and ``incomplete_subtasks`` lists what would be left
    incomplete. Otherwise ``task`` is the toggled task.
    """

    task: Task
    needs_decision: bool = False
    incomplete_subtasks: list[Task] = Field(default_factory=list)


class CompletionResult(BaseModel):
    """Tasks changed by a confirmed completion."""

    task: Task
    completed_subtasks: list[Task] = Field(default_factory=list)


def get_incomplete_subtasks(
    repository: TaskRepository,
    parent_id: str,
) -> Result[list[Task], TaskError]:
    """Every transitive descendant of ``parent_id`` that is not completed."""
    return repository.get_incomplete_subtasks(parent_id)


def request_toggle(repository: TaskRepository, task_id: str) -> Result[ToggleOutcome, TaskError]:
    """Toggle a task's completion, or ask for a decision first.

    - complete -> incomplete: toggled directly, children untouched
    - incomplete -> complete, no incomplete descendants: toggled directly
    - incomplete -> complete, incomplete descendants: nothing changes;
      the outcome carries ``needs_decision=True`` and the descendants

    Args:
        repository: Task repository.
        task_id: Task to toggle.

    Returns:
        Ok(ToggleOutcome), or the repository error.
    """
    current = repository.get_task(task_id)
    if isinstance(current, Err):
        return current

    task = current.value
    if not task.completed:
        incomplete = repository.get_incomplete_subtasks(task_id)
        if isinstance(incomplete, Err):
            return incomplete
        if incomplete.value:
            logger.info(
                "Task %s has %d incomplete subtask(s); awaiting decision",
                task_id,
                len(incomplete.value),
            )
            return Ok(
                ToggleOutcome(task=task, needs_decision=True, incomplete_subtasks=incomplete.value)
            )

    toggled = repository.toggle_completion(task_id)
    if isinstance(toggled, Err):
        return toggled
    return Ok(ToggleOutcome(task=toggled.value))


def confirm_completion(
    repository: TaskRepository,
    task_id: str,
    resolution: CompletionResolution,
) -> Result[CompletionResult, TaskError]:
    """Complete a task according to the caller's decision.

    With ``COMPLETE_WITH_DESCENDANTS`` every incomplete descendant is
    marked completed first, then the task itself. With
    ``COMPLETE_PARENT_ONLY`` only the task is marked completed.

    Completion is set explicitly rather than toggled, so confirming
    against a task that was completed in the meantime is harmless.

    Returns:
        Ok(CompletionResult), or Err(BulkOperationError) listing the
        subtasks already completed when a later call fails. Already
        applied updates are not rolled back.
    """
    current = repository.get_task(task_id)
    if isinstance(current, Err):
        return current

    completed: list[Task] = []
    if resolution == CompletionResolution.COMPLETE_WITH_DESCENDANTS:
        incomplete = repository.get_incomplete_subtasks(task_id)
        if isinstance(incomplete, Err):
            return incomplete

        for subtask in incomplete.value:
            updated = repository.update_task(subtask.id, UpdateTaskRequest(completed=True))
            if isinstance(updated, Err):
                return Err(
                    BulkOperationError.from_failure(
                        "Completing subtasks",
                        [t.id for t in completed],
                        subtask.id,
                        updated.error,
                    )
                )
            completed.append(updated.value)

    parent = repository.update_task(task_id, UpdateTaskRequest(completed=True))
    if isinstance(parent, Err):
        if not completed:
            return parent
        return Err(
            BulkOperationError.from_failure(
                "Completing task",
                [t.id for t in completed],
                task_id,
                parent.error,
            )
        )

    logger.info(
        "Completed task %s (%s, %d subtask(s) completed)",
        task_id,
        resolution.value,
        len(completed),
    )
    return Ok(CompletionResult(task=parent.value, completed_subtasks=completed))


def bulk_mark_completed(
    repository: TaskRepository,
    ids: list[str],
    completed: bool,
) -> Result[list[Task], TaskError]:
    """Set ``completed`` on several tasks, one repository call each.

    Duplicate ids are applied once. No hierarchy rules apply here: this
    is the "select many rows, mark done" action.

    Returns:
        Ok(updated tasks in input order), or Err(BulkOperationError)
        after the first failing call.
    """
    updated: list[Task] = []
    for task_id in dict.fromkeys(ids):
        result = repository.update_task(task_id, UpdateTaskRequest(completed=completed))
        if isinstance(result, Err):
            return Err(
                BulkOperationError.from_failure(
                    "Bulk completion",
                    [t.id for t in updated],
                    task_id,
                    result.error,
                )
            )
        updated.append(result.value)

    logger.info("Marked %d task(s) completed=%s", len(updated), completed)
    return Ok(updated)
