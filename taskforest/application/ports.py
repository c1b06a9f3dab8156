"""Repository ports consumed by the application services.

The task repository persists individual task records. It is atomic per
single-record call and knows nothing about hierarchy beyond checking
that a referenced parent exists; cascading and promotion are built on
top of it by the application services.

The category repository stores categories only. Clearing references
from tasks when a category is deleted is the category service's job.
"""

from typing import Protocol

from taskforest.domain.category import Category, CreateCategoryRequest, UpdateCategoryRequest
from taskforest.domain.shared import Result, TaskError
from taskforest.domain.task import CreateTaskRequest, Task, TaskFilter, UpdateTaskRequest


class TaskRepository(Protocol):
    """CRUD-style persistence for tasks, returning Results."""

    def create_task(self, request: CreateTaskRequest) -> Result[Task, TaskError]:
        """Create a task.

        Fails with ValidationError on an empty title and NotFoundError when
        ``parent_id`` is set but does not reference an existing task.
        """

    def get_task(self, task_id: str) -> Result[Task, TaskError]:
        """Fetch one task, NotFoundError if absent."""

    def update_task(self, task_id: str, request: UpdateTaskRequest) -> Result[Task, TaskError]:
        """Apply a partial update; omitted fields are unchanged."""

    def delete_task(self, task_id: str) -> Result[None, TaskError]:
        """Delete exactly one task. Does not cascade."""

    def toggle_completion(self, task_id: str) -> Result[Task, TaskError]:
        """Flip ``completed`` and bump ``updated_at``."""

    def list_tasks(self, task_filter: TaskFilter | None = None) -> Result[list[Task], TaskError]:
        """List tasks matching a filter, in creation order. No filter lists all."""

    def get_incomplete_subtasks(self, parent_id: str) -> Result[list[Task], TaskError]:
        """All transitive descendants of ``parent_id`` that are not completed."""


class CategoryRepository(Protocol):
    """CRUD-style persistence for categories, returning Results."""

    def create_category(self, request: CreateCategoryRequest) -> Result[Category, TaskError]:
        """Create a category. ValidationError on a blank or duplicate name."""

    def get_category(self, category_id: str) -> Result[Category, TaskError]:
        """Fetch one category, NotFoundError if absent."""

    def list_categories(self) -> Result[list[Category], TaskError]:
        """All categories ordered by name, ignoring case."""

    def update_category(
        self, category_id: str, request: UpdateCategoryRequest
    ) -> Result[Category, TaskError]:
        """Apply a partial update; omitted fields are unchanged."""

    def delete_category(self, category_id: str) -> Result[None, TaskError]:
        """Delete one category. Tasks referencing it are not touched."""
