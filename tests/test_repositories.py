"""Tests for the in-memory and JSON task repositories."""

import json

import pytest

from conftest import add

from taskforest.domain.shared import Err, NotFoundError, Ok, RepositoryError, ValidationError
from taskforest.domain.task import CreateTaskRequest, TaskFilter, UpdateTaskRequest
from taskforest.infrastructure.storage import (
    InMemoryTaskRepository,
    JsonStorage,
    JsonTaskRepository,
)


class TestCreate:
    """Task creation rules."""

    def test_assigns_id_and_timestamps(self, repository):
        result = repository.create_task(CreateTaskRequest(title="  Write report  "))

        assert isinstance(result, Ok)
        task = result.value
        assert task.id
        assert task.title == "Write report"
        assert task.created_at == task.updated_at
        assert not task.completed

    def test_empty_title_rejected(self, repository):
        result = repository.create_task(CreateTaskRequest(title="   "))
        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)

    def test_unknown_parent_rejected(self, repository):
        result = repository.create_task(CreateTaskRequest(title="child", parent_id="nope"))
        assert isinstance(result, Err)
        assert result.error == NotFoundError.for_parent("nope")
        assert repository.tasks == []

    def test_subtask(self, repository):
        parent = add(repository, "parent")
        child = add(repository, "child", parent)
        assert child.parent_id == parent.id


class TestUpdate:
    """Partial updates."""

    def test_only_set_fields_change(self, repository):
        task = add(repository, "original", description="notes")
        result = repository.update_task(task.id, UpdateTaskRequest(title="renamed"))

        assert isinstance(result, Ok)
        assert result.value.title == "renamed"
        assert result.value.description == "notes"
        assert result.value.updated_at >= task.updated_at

    def test_explicit_none_clears(self, repository):
        task = add(repository, "task", description="notes")
        result = repository.update_task(task.id, UpdateTaskRequest(description=None))
        assert result.value.description is None

    def test_explicit_none_parent_moves_to_root(self, repository):
        parent = add(repository, "parent")
        child = add(repository, "child", parent)
        result = repository.update_task(child.id, UpdateTaskRequest(parent_id=None))
        assert result.value.parent_id is None

    def test_self_parent_rejected(self, repository):
        task = add(repository, "task")
        result = repository.update_task(task.id, UpdateTaskRequest(parent_id=task.id))
        assert isinstance(result.error, ValidationError)

    def test_unknown_parent_rejected(self, repository):
        task = add(repository, "task")
        result = repository.update_task(task.id, UpdateTaskRequest(parent_id="nope"))
        assert isinstance(result.error, NotFoundError)

    def test_unknown_task(self, repository):
        result = repository.update_task("nope", UpdateTaskRequest(title="x"))
        assert result.error == NotFoundError.for_task("nope")


class TestDeleteAndToggle:
    """Delete never cascades; toggle flips one flag."""

    def test_delete_leaves_children_orphaned(self, repository):
        parent = add(repository, "parent")
        child = add(repository, "child", parent)

        assert isinstance(repository.delete_task(parent.id), Ok)
        assert [t.id for t in repository.tasks] == [child.id]
        assert repository.tasks[0].parent_id == parent.id

    def test_delete_unknown(self, repository):
        assert isinstance(repository.delete_task("nope").error, NotFoundError)

    def test_toggle(self, repository):
        task = add(repository, "task")
        assert repository.toggle_completion(task.id).value.completed
        assert not repository.toggle_completion(task.id).value.completed


class TestQueries:
    """Listing and incomplete-subtask queries."""

    def test_list_in_creation_order(self, repository, project):
        titles = [t.title for t in repository.list_tasks().value]
        assert titles == ["project", "design", "mockups", "review", "build", "chores"]

    def test_list_filtered(self, repository, project):
        result = repository.list_tasks(TaskFilter(parent_id=project["design"].id))
        assert [t.title for t in result.value] == ["mockups", "review"]

    def test_incomplete_subtasks_are_transitive(self, repository, project):
        repository.toggle_completion(project["mockups"].id)
        result = repository.get_incomplete_subtasks(project["project"].id)
        assert [t.title for t in result.value] == ["design", "review", "build"]

    def test_incomplete_subtasks_unknown_parent(self, repository):
        assert isinstance(repository.get_incomplete_subtasks("nope").error, NotFoundError)


class TestJsonTaskRepository:
    """Persistence to a JSON file."""

    def test_missing_file_is_empty(self, tmp_path):
        result = JsonTaskRepository.open(tmp_path / "tasks.json")
        assert isinstance(result, Ok)
        assert result.value.tasks == []

    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "tasks.json"
        repo = JsonTaskRepository.open(path).value
        parent = add(repo, "parent")
        add(repo, "child", parent, tags=["home"])

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert [t["title"] for t in data["tasks"]] == ["parent", "child"]

        reopened = JsonTaskRepository.open(path).value
        assert reopened.tasks == repo.tasks

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json", encoding="utf-8")
        result = JsonTaskRepository.open(path)
        assert isinstance(result.error, RepositoryError)

    def test_invalid_task_data(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps({"version": 1, "tasks": [{"id": "x"}]}), encoding="utf-8")
        result = JsonTaskRepository.open(path)
        assert isinstance(result.error, RepositoryError)

    def test_failed_write_leaves_state_unchanged(self, tmp_path):
        """A write error is reported and the in-memory state is not updated."""

        class BrokenStorage(JsonStorage):
            def save_json(self, path, data, indent=2):
                return Err(RepositoryError("disk full"))

        repo = JsonTaskRepository(tmp_path / "tasks.json", storage=BrokenStorage())
        result = repo.create_task(CreateTaskRequest(title="lost"))

        assert result == Err(RepositoryError("disk full"))
        assert repo.tasks == []


@pytest.mark.parametrize("repo_factory", [InMemoryTaskRepository, None])
def test_repositories_agree(repo_factory, tmp_path):
    """Both implementations give the same answers for the same calls."""
    repo = repo_factory() if repo_factory else JsonTaskRepository(tmp_path / "t.json")
    parent = add(repo, "parent")
    add(repo, "child", parent)
    repo.toggle_completion(parent.id)

    assert [t.title for t in repo.list_tasks(TaskFilter(completed=False)).value] == ["child"]
