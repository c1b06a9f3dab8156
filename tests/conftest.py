"""Shared fixtures for taskforest tests."""

import pytest

from taskforest.application import TaskStore
from taskforest.domain.shared import Err, Ok, RepositoryError
from taskforest.domain.task import CreateTaskRequest, Task
from taskforest.infrastructure.storage import InMemoryTaskRepository


class FlakyRepository(InMemoryTaskRepository):
    """In-memory repository that fails mutations on chosen task ids.

    ``fail_on`` holds ids whose update/delete/toggle calls return a
    RepositoryError. ``fail_list`` makes ``list_tasks`` fail.
    """

    def __init__(self, tasks=None):
        super().__init__(tasks)
        self.fail_on: set[str] = set()
        self.fail_list = False
        self.calls: list[tuple[str, str]] = []

    def _fail(self, task_id):
        return Err(RepositoryError(f"Write failed for {task_id}"))

    def update_task(self, task_id, request):
        self.calls.append(("update", task_id))
        if task_id in self.fail_on:
            return self._fail(task_id)
        return super().update_task(task_id, request)

    def delete_task(self, task_id):
        self.calls.append(("delete", task_id))
        if task_id in self.fail_on:
            return self._fail(task_id)
        return super().delete_task(task_id)

    def toggle_completion(self, task_id):
        self.calls.append(("toggle", task_id))
        if task_id in self.fail_on:
            return self._fail(task_id)
        return super().toggle_completion(task_id)

    def list_tasks(self, task_filter=None):
        if self.fail_list:
            return Err(RepositoryError("Listing failed"))
        return super().list_tasks(task_filter)


def add(repository, title: str, parent: Task | None = None, **fields) -> Task:
    """Create a task through the repository and return it."""
    result = repository.create_task(
        CreateTaskRequest(title=title, parent_id=parent.id if parent else None, **fields)
    )
    assert isinstance(result, Ok), result
    return result.value


@pytest.fixture
def repository():
    """Empty in-memory repository."""
    return InMemoryTaskRepository()


@pytest.fixture
def flaky_repository():
    """Repository with per-id failure injection."""
    return FlakyRepository()


@pytest.fixture
def store(repository):
    """TaskStore over the in-memory repository."""
    return TaskStore(repository)


def build_project(repository) -> dict[str, Task]:
    """Seed a small forest and return its tasks by title.

    project
      design
        mockups
        review
      build
    chores
    """
    project = add(repository, "project")
    design = add(repository, "design", project)
    mockups = add(repository, "mockups", design)
    review = add(repository, "review", design)
    build = add(repository, "build", project)
    chores = add(repository, "chores")
    return {
        "project": project,
        "design": design,
        "mockups": mockups,
        "review": review,
        "build": build,
        "chores": chores,
    }


@pytest.fixture
def project(repository):
    """The seeded forest in ``repository``."""
    return build_project(repository)


@pytest.fixture
def flaky_project(flaky_repository):
    """The seeded forest in ``flaky_repository``."""
    return build_project(flaky_repository)
