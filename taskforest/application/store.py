"""Snapshot store: one authoritative flat task list per client.

The store owns a single snapshot loaded from the repository. Mutations
go to the repository first and the snapshot is then reloaded, so it
never drifts from what was persisted. Derived views (hierarchy, progress)
are recomputed on every call and never cached.
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

from taskforest.application import completion_service, deletion_service, task_service
from taskforest.application.completion_service import (
    CompletionResolution,
    CompletionResult,
    ToggleOutcome,
)
from taskforest.application.deletion_service import DeleteMode, DeletionReport
from taskforest.application.ports import CategoryRepository, TaskRepository
from taskforest.domain.shared import Err, Ok, Result, TaskError
from taskforest.domain.task import (
    CreateTaskRequest,
    HierarchyNode,
    SortConfig,
    Task,
    TaskFilter,
    TaskProgress,
    UpdateTaskRequest,
    apply_filter,
    build_hierarchy,
    calculate_progress,
    find_task,
    sort_tasks,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskStore:
    """Client-side view over a task repository.

    Example:
        store = TaskStore(InMemoryTaskRepository())
        store.load()
        store.create(CreateTaskRequest(title="Plan release"))
        for node in store.hierarchy():
            ...
    """

    def __init__(
        self,
        repository: TaskRepository,
        task_filter: TaskFilter | None = None,
        categories: CategoryRepository | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            repository: Source of truth for tasks.
            task_filter: Filter for ``visible_tasks`` and ``hierarchy``.
                Progress is never filtered.
            categories: When given, category ids on created and updated
                tasks must name an existing category.
        """
        self._repository = repository
        self._categories = categories
        self._tasks: list[Task] = []
        self.task_filter = task_filter

    @property
    def repository(self) -> TaskRepository:
        return self._repository

    @property
    def categories(self) -> CategoryRepository | None:
        return self._categories

    @property
    def tasks(self) -> list[Task]:
        """The full, unfiltered snapshot."""
        return list(self._tasks)

    def load(self) -> Result[list[Task], TaskError]:
        """Replace the snapshot with the repository's current contents."""
        listed = self._repository.list_tasks()
        if isinstance(listed, Err):
            logger.warning("Failed to load tasks: %s", listed.error)
            return listed

        self._tasks = listed.value
        logger.debug("Loaded snapshot of %d tasks", len(self._tasks))
        return Ok(self.tasks)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def get(self, task_id: str) -> Task | None:
        return find_task(task_id, self._tasks)

    def visible_tasks(self, sort: SortConfig | None = None) -> list[Task]:
        """Snapshot tasks passing the store's filter, optionally sorted."""
        visible = apply_filter(self._tasks, self.task_filter)
        if sort is not None:
            visible = sort_tasks(visible, sort)
        return visible

    def hierarchy(self, sort: SortConfig | None = None) -> list[HierarchyNode]:
        """Forest view of the visible tasks.

        Sorting applies to siblings, since children keep the relative
        order of the list they were grouped from.
        """
        return build_hierarchy(self.visible_tasks(sort))

    def progress(self, task_id: str) -> TaskProgress:
        """Progress of a task against the full snapshot, whatever the filter."""
        return calculate_progress(task_id, self._tasks)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _refresh_after(self, result: Result[T, TaskError]) -> Result[T, TaskError]:
        """Reload the snapshot after a mutation and report one outcome.

        Reload happens on failure too, since a bulk operation may have
        applied part of its work before failing.
        """
        reloaded = self.load()
        if isinstance(result, Err):
            return result
        if isinstance(reloaded, Err):
            return reloaded
        return result

    def create(self, request: CreateTaskRequest) -> Result[Task, TaskError]:
        return self._refresh_after(
            task_service.create_task(self._repository, request, self._categories)
        )

    def update(self, task_id: str, request: UpdateTaskRequest) -> Result[Task, TaskError]:
        return self._refresh_after(
            task_service.update_task(self._repository, task_id, request, self._categories)
        )

    def request_toggle(self, task_id: str) -> Result[ToggleOutcome, TaskError]:
        """Step one of the completion flow; see ``completion_service``."""
        outcome = completion_service.request_toggle(self._repository, task_id)
        if isinstance(outcome, Ok) and outcome.value.needs_decision:
            # Nothing changed, no reload needed
            return outcome
        return self._refresh_after(outcome)

    def confirm_completion(
        self,
        task_id: str,
        resolution: CompletionResolution,
    ) -> Result[CompletionResult, TaskError]:
        """Step two of the completion flow."""
        return self._refresh_after(
            completion_service.confirm_completion(self._repository, task_id, resolution)
        )

    def mark_completed(
        self,
        ids: Sequence[str],
        completed: bool = True,
    ) -> Result[list[Task], TaskError]:
        return self._refresh_after(
            completion_service.bulk_mark_completed(self._repository, list(ids), completed)
        )

    def delete(
        self,
        ids: Sequence[str],
        mode: DeleteMode = DeleteMode.SINGLE,
    ) -> Result[DeletionReport, TaskError]:
        """Delete one or more tasks with the given subtask strategy."""
        return self._refresh_after(deletion_service.delete_tasks(self._repository, ids, mode))

