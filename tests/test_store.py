"""Tests for the snapshot store."""

from conftest import add

from taskforest.application import CompletionResolution, DeleteMode, TaskStore
from taskforest.domain.shared import Err, Ok, RepositoryError
from taskforest.domain.task import CreateTaskRequest, TaskFilter, UpdateTaskRequest


class TestSnapshot:
    """Loading and derived views."""

    def test_load(self, store, project):
        assert isinstance(store.load(), Ok)
        assert len(store.tasks) == 6

    def test_starts_empty_until_loaded(self, store, project):
        assert store.tasks == []

    def test_progress_ignores_filter(self, store, repository, project):
        """A view hiding completed tasks still counts them for progress."""
        repository.toggle_completion(project["mockups"].id)
        store.task_filter = TaskFilter(completed=False)
        store.load()

        assert project["mockups"].id not in [t.id for t in store.visible_tasks()]
        assert store.progress(project["design"].id).progress_percentage == 50

    def test_hierarchy_uses_filter(self, store, project):
        store.task_filter = TaskFilter(search_query="review")
        store.load()
        assert [n.task.title for n in store.hierarchy()] == ["review"]

    def test_get(self, store, project):
        store.load()
        assert store.get(project["build"].id).title == "build"
        assert store.get("nope") is None


class TestMutations:
    """Mutations go to the repository, then the snapshot reloads."""

    def test_create_refreshes(self, store):
        store.load()
        result = store.create(CreateTaskRequest(title="new"))
        assert [t.id for t in store.tasks] == [result.value.id]

    def test_update_refreshes(self, store, project):
        store.load()
        store.update(project["build"].id, UpdateTaskRequest(title="ship"))
        assert store.get(project["build"].id).title == "ship"

    def test_toggle_needing_decision_changes_nothing(self, store, project):
        store.load()
        outcome = store.request_toggle(project["design"].id)
        assert outcome.value.needs_decision
        assert not store.get(project["design"].id).completed

    def test_completion_flow(self, store, project):
        store.load()
        store.request_toggle(project["design"].id)
        store.confirm_completion(
            project["design"].id, CompletionResolution.COMPLETE_WITH_DESCENDANTS
        )
        assert store.progress(project["design"].id).progress_percentage == 100
        assert store.get(project["design"].id).completed

    def test_mark_completed(self, store, project):
        store.load()
        store.mark_completed([project["build"].id, project["chores"].id])
        assert store.get(project["chores"].id).completed

    def test_delete(self, store, project):
        store.load()
        store.delete([project["design"].id], DeleteMode.PROMOTE)
        assert store.get(project["mockups"].id).parent_id == project["project"].id
        assert store.get(project["design"].id) is None

    def test_failed_mutation_still_reloads(self, flaky_repository, flaky_project):
        """Partial work from a failed bulk operation is visible afterwards."""
        store = TaskStore(flaky_repository)
        store.load()
        flaky_repository.fail_on.add(flaky_project["chores"].id)

        result = store.mark_completed([flaky_project["build"].id, flaky_project["chores"].id])

        assert isinstance(result, Err)
        assert store.get(flaky_project["build"].id).completed

    def test_reload_failure_is_reported(self, flaky_repository):
        store = TaskStore(flaky_repository)
        store.load()
        task = add(flaky_repository, "task")
        flaky_repository.fail_list = True

        result = store.update(task.id, UpdateTaskRequest(title="renamed"))

        assert result == Err(RepositoryError("Listing failed"))
