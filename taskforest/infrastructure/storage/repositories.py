"""Task and category repository implementations.

The in-memory and JSON repositories of each kind implement the matching
port in ``taskforest.application.ports`` with identical semantics; the
JSON variants additionally write the whole collection to disk after
every mutation.

Every mutation builds the next state as a new dict and hands it to
``_commit``; the live state is only replaced once the commit succeeds,
so a failed write leaves the repository unchanged.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from taskforest.domain.category import (
    Category,
    CreateCategoryRequest,
    UpdateCategoryRequest,
    validate_name,
)
from taskforest.domain.shared import (
    Err,
    NotFoundError,
    Ok,
    RepositoryError,
    Result,
    TaskError,
    ValidationError,
)
from taskforest.domain.task import (
    CreateTaskRequest,
    Task,
    TaskFilter,
    UpdateTaskRequest,
    all_descendants_of,
    apply_filter,
    utcnow,
    validate_title,
)
from taskforest.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

# Bumped when the on-disk layout changes
FILE_FORMAT_VERSION = 1


class InMemoryTaskRepository:
    """Dict-backed task repository.

    Tasks are kept in insertion (creation) order, which is the order
    ``list_tasks`` returns them in.
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        """Initialize the repository.

        Args:
            tasks: Optional initial tasks, e.g. loaded from disk.
        """
        self._tasks: dict[str, Task] = {task.id: task for task in tasks or ()}

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of every stored task."""
        return list(self._tasks.values())

    def _commit(self, tasks: dict[str, Task]) -> Result[None, TaskError]:
        """Replace the live state with ``tasks``."""
        self._tasks = tasks
        return Ok(None)

    def _require(self, task_id: str) -> Result[Task, TaskError]:
        task = self._tasks.get(task_id)
        if task is None:
            return Err(NotFoundError.for_task(task_id))
        return Ok(task)

    def create_task(self, request: CreateTaskRequest) -> Result[Task, TaskError]:
        """Create a task from a request.

        Args:
            request: Fields for the new task.

        Returns:
            Ok(Task) with repository-assigned id and timestamps,
            Err(ValidationError) on an empty title, or
            Err(NotFoundError) when the parent does not exist.
        """
        title = validate_title(request.title)
        if isinstance(title, Err):
            return title

        if request.parent_id is not None and request.parent_id not in self._tasks:
            return Err(NotFoundError.for_parent(request.parent_id))

        now = utcnow()
        task = Task(
            title=title.value,
            description=request.description,
            priority=request.priority,
            due_date=request.due_date,
            category_id=request.category_id,
            tags=request.tags,
            parent_id=request.parent_id,
            created_at=now,
            updated_at=now,
        )

        committed = self._commit({**self._tasks, task.id: task})
        if isinstance(committed, Err):
            return committed

        logger.info("Created task %s (parent=%s)", task.id, task.parent_id)
        return Ok(task)

    def get_task(self, task_id: str) -> Result[Task, TaskError]:
        """Fetch one task by id."""
        return self._require(task_id)

    def update_task(self, task_id: str, request: UpdateTaskRequest) -> Result[Task, TaskError]:
        """Apply the explicitly-set fields of ``request`` to a task.

        Only the direct self-parenting case is rejected here; retargeting
        to a descendant is checked by the task service, which sees the
        whole hierarchy.
        """
        current = self._require(task_id)
        if isinstance(current, Err):
            return current

        changes = request.changes()

        if "title" in changes:
            title = validate_title(changes["title"])
            if isinstance(title, Err):
                return title
            changes["title"] = title.value

        new_parent = changes.get("parent_id")
        if new_parent is not None:
            if new_parent == task_id:
                return Err(ValidationError(f"Task {task_id} cannot be its own parent"))
            if new_parent not in self._tasks:
                return Err(NotFoundError.for_parent(new_parent))

        updated = current.value.model_copy(update={**changes, "updated_at": utcnow()})

        committed = self._commit({**self._tasks, task_id: updated})
        if isinstance(committed, Err):
            return committed

        logger.info("Updated task %s: %s", task_id, ", ".join(sorted(changes)) or "no fields")
        return Ok(updated)

    def delete_task(self, task_id: str) -> Result[None, TaskError]:
        """Delete exactly one task; its children are left untouched."""
        current = self._require(task_id)
        if isinstance(current, Err):
            return current

        remaining = {tid: task for tid, task in self._tasks.items() if tid != task_id}
        committed = self._commit(remaining)
        if isinstance(committed, Err):
            return committed

        logger.info("Deleted task %s", task_id)
        return Ok(None)

    def toggle_completion(self, task_id: str) -> Result[Task, TaskError]:
        """Flip a task's ``completed`` flag."""
        current = self._require(task_id)
        if isinstance(current, Err):
            return current

        task = current.value
        toggled = task.model_copy(update={"completed": not task.completed, "updated_at": utcnow()})

        committed = self._commit({**self._tasks, task_id: toggled})
        if isinstance(committed, Err):
            return committed

        logger.info("Toggled task %s to completed=%s", task_id, toggled.completed)
        return Ok(toggled)

    def list_tasks(self, task_filter: TaskFilter | None = None) -> Result[list[Task], TaskError]:
        """List tasks in creation order, optionally filtered."""
        return Ok(apply_filter(self.tasks, task_filter))

    def get_incomplete_subtasks(self, parent_id: str) -> Result[list[Task], TaskError]:
        """Incomplete transitive descendants of a task, depth-first."""
        current = self._require(parent_id)
        if isinstance(current, Err):
            return current

        descendants = all_descendants_of(parent_id, self.tasks)
        return Ok([task for task in descendants if not task.completed])


class JsonTaskRepository(InMemoryTaskRepository):
    """Task repository persisted to a single JSON file.

    The file holds ``{"version": 1, "tasks": [...]}``. The whole
    collection is rewritten on every mutation.

    Example:
        result = JsonTaskRepository.open(Path("~/.taskforest/tasks.json"))
        if isinstance(result, Ok):
            repo = result.value
    """

    def __init__(
        self,
        path: Path,
        tasks: Iterable[Task] | None = None,
        storage: JsonStorage | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            path: JSON file to persist to.
            tasks: Tasks already loaded from ``path``.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        super().__init__(tasks)
        self._path = path
        self._storage = storage or JsonStorage()

    @property
    def path(self) -> Path:
        return self._path

    @classmethod
    def open(
        cls,
        path: Path,
        storage: JsonStorage | None = None,
    ) -> Result["JsonTaskRepository", TaskError]:
        """Load a repository from ``path``.

        A missing file is an empty collection, not an error.

        Returns:
            Ok(JsonTaskRepository), or Err(RepositoryError) if the file
            exists but cannot be read or holds invalid task data.
        """
        storage = storage or JsonStorage()
        if not path.exists():
            logger.debug("No task file at %s, starting empty", path)
            return Ok(cls(path, [], storage))

        loaded = storage.load_json(path)
        if isinstance(loaded, Err):
            return loaded

        try:
            tasks = [Task.model_validate(item) for item in loaded.value.get("tasks", [])]
        except (PydanticValidationError, TypeError) as e:
            return Err(RepositoryError(f"Invalid task data in {path}: {e}"))

        logger.debug("Loaded %d tasks from %s", len(tasks), path)
        return Ok(cls(path, tasks, storage))

    def _commit(self, tasks: dict[str, Task]) -> Result[None, TaskError]:
        data = {
            "version": FILE_FORMAT_VERSION,
            "tasks": [task.model_dump(mode="json") for task in tasks.values()],
        }
        saved = self._storage.save_json(self._path, data)
        if isinstance(saved, Err):
            logger.warning("Failed to persist tasks: %s", saved.error)
            return saved
        return super()._commit(tasks)


# =============================================================================
# Categories
# =============================================================================


class InMemoryCategoryRepository:
    """Dict-backed category repository."""

    def __init__(self, categories: Iterable[Category] | None = None) -> None:
        self._categories: dict[str, Category] = {c.id: c for c in categories or ()}

    @property
    def categories(self) -> list[Category]:
        """Snapshot of every stored category, in creation order."""
        return list(self._categories.values())

    def _commit(self, categories: dict[str, Category]) -> Result[None, TaskError]:
        self._categories = categories
        return Ok(None)

    def _require(self, category_id: str) -> Result[Category, TaskError]:
        category = self._categories.get(category_id)
        if category is None:
            return Err(NotFoundError.for_category(category_id))
        return Ok(category)

    def create_category(self, request: CreateCategoryRequest) -> Result[Category, TaskError]:
        name = validate_name(request.name, self.categories)
        if isinstance(name, Err):
            return name

        category = Category(name=name.value, color=request.color, icon=request.icon)
        committed = self._commit({**self._categories, category.id: category})
        if isinstance(committed, Err):
            return committed

        logger.info("Created category %s (%s)", category.id, category.name)
        return Ok(category)

    def get_category(self, category_id: str) -> Result[Category, TaskError]:
        return self._require(category_id)

    def list_categories(self) -> Result[list[Category], TaskError]:
        return Ok(sorted(self.categories, key=lambda c: c.name.casefold()))

    def update_category(
        self,
        category_id: str,
        request: UpdateCategoryRequest,
    ) -> Result[Category, TaskError]:
        """Apply the explicitly-set fields of ``request`` to a category."""
        current = self._require(category_id)
        if isinstance(current, Err):
            return current

        changes = request.changes()
        if "name" in changes:
            name = validate_name(changes["name"], self.categories, exclude_id=category_id)
            if isinstance(name, Err):
                return name
            changes["name"] = name.value

        updated = current.value.model_copy(update=changes)
        committed = self._commit({**self._categories, category_id: updated})
        if isinstance(committed, Err):
            return committed

        logger.info(
            "Updated category %s: %s", category_id, ", ".join(sorted(changes)) or "no fields"
        )
        return Ok(updated)

    def delete_category(self, category_id: str) -> Result[None, TaskError]:
        current = self._require(category_id)
        if isinstance(current, Err):
            return current

        remaining = {cid: c for cid, c in self._categories.items() if cid != category_id}
        committed = self._commit(remaining)
        if isinstance(committed, Err):
            return committed

        logger.info("Deleted category %s", category_id)
        return Ok(None)


class JsonCategoryRepository(InMemoryCategoryRepository):
    """Category repository persisted to a JSON file.

    The file holds ``{"version": 1, "categories": [...]}`` and is
    rewritten on every mutation.
    """

    def __init__(
        self,
        path: Path,
        categories: Iterable[Category] | None = None,
        storage: JsonStorage | None = None,
    ) -> None:
        super().__init__(categories)
        self._path = path
        self._storage = storage or JsonStorage()

    @property
    def path(self) -> Path:
        return self._path

    @classmethod
    def open(
        cls,
        path: Path,
        storage: JsonStorage | None = None,
    ) -> Result["JsonCategoryRepository", TaskError]:
        """Load a repository from ``path``. A missing file is empty."""
        storage = storage or JsonStorage()
        if not path.exists():
            logger.debug("No category file at %s, starting empty", path)
            return Ok(cls(path, [], storage))

        loaded = storage.load_json(path)
        if isinstance(loaded, Err):
            return loaded

        try:
            categories = [
                Category.model_validate(item) for item in loaded.value.get("categories", [])
            ]
        except (PydanticValidationError, TypeError) as e:
            return Err(RepositoryError(f"Invalid category data in {path}: {e}"))

        logger.debug("Loaded %d categories from %s", len(categories), path)
        return Ok(cls(path, categories, storage))

    def _commit(self, categories: dict[str, Category]) -> Result[None, TaskError]:
        data = {
            "version": FILE_FORMAT_VERSION,
            "categories": [c.model_dump(mode="json") for c in categories.values()],
        }
        saved = self._storage.save_json(self._path, data)
        if isinstance(saved, Err):
            logger.warning("Failed to persist categories: %s", saved.error)
            return saved
        return super()._commit(categories)
