"""Tests for the Typer CLI."""

import pytest
from typer.testing import CliRunner

from conftest import add, build_project

from taskforest import __version__
from taskforest.domain.task import Task
from taskforest.infrastructure.storage import (
    JsonCategoryRepository,
    JsonStorage,
    JsonTaskRepository,
)
from taskforest.interfaces.cli import app
from taskforest.interfaces.cli.common import get_categories_file

runner = CliRunner()


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    """Task file picked up through TASKFOREST_DATA, with an isolated config dir."""
    path = tmp_path / "tasks.json"
    monkeypatch.setenv("TASKFOREST_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("TASKFOREST_DATA", str(path))
    return path


@pytest.fixture
def project(data_file):
    """Seeded forest persisted to the task file."""
    return build_project(JsonTaskRepository.open(data_file).value)


def saved(data_file) -> dict:
    """Tasks currently on disk, by title."""
    return {t.title: t for t in JsonTaskRepository.open(data_file).value.tasks}


class TestBasics:
    """Version, add and listing."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_add_and_list(self, data_file):
        result = runner.invoke(app, ["add", "Write report", "--priority", "high", "-t", "work"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "Write report" in result.output
        assert "High" in result.output
        assert "#work" in result.output

    def test_add_subtask(self, data_file, project):
        result = runner.invoke(app, ["task", "add", "copy", "--parent", project["design"].id])
        assert result.exit_code == 0
        assert saved(data_file)["copy"].parent_id == project["design"].id

    def test_add_unknown_parent(self, data_file):
        result = runner.invoke(app, ["add", "orphan", "--parent", "nope"])
        assert result.exit_code == 1
        assert "Parent task not found: nope" in result.output

    def test_add_invalid_due(self, data_file):
        result = runner.invoke(app, ["add", "x", "--due", "someday"])
        assert result.exit_code != 0

    def test_list_pending(self, data_file, project):
        repo = JsonTaskRepository.open(data_file).value
        repo.toggle_completion(project["build"].id)

        result = runner.invoke(app, ["list", "--pending"])
        assert "build" not in result.output
        assert "chores" in result.output

    def test_list_empty(self, data_file):
        result = runner.invoke(app, ["list"])
        assert "No tasks found" in result.output

    def test_bad_log_level_in_config(self, data_file, tmp_path):
        home = tmp_path / "home"
        home.mkdir(exist_ok=True)
        (home / "config.json").write_text('{"log_level": "verbose"}', encoding="utf-8")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No tasks found" in result.output


class TestTreeAndProgress:
    """Hierarchical display."""

    def test_tree_indents_and_shows_progress(self, data_file, project):
        repo = JsonTaskRepository.open(data_file).value
        repo.toggle_completion(project["mockups"].id)

        result = runner.invoke(app, ["tree"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        design = next(line for line in lines if "design" in line)
        mockups = next(line for line in lines if "mockups" in line)
        assert design.startswith("  - [ ]")
        assert "1/2 (50%)" in design
        assert mockups.startswith("    - [x]")

    def test_progress(self, data_file, project):
        result = runner.invoke(app, ["progress", project["project"].id])
        assert "project: 0/4 (0%)" in result.output

    def test_progress_leaf(self, data_file, project):
        result = runner.invoke(app, ["progress", project["build"].id])
        assert "no subtasks" in result.output

    def test_progress_unknown(self, data_file, project):
        result = runner.invoke(app, ["progress", "nope"])
        assert result.exit_code == 1


class TestDone:
    """Completion with and without subtasks."""

    def test_leaf(self, data_file, project):
        result = runner.invoke(app, ["done", project["build"].id])
        assert result.exit_code == 0
        assert saved(data_file)["build"].completed

    def test_prompt_yes_completes_subtasks(self, data_file, project):
        result = runner.invoke(app, ["done", project["design"].id], input="y\n")

        assert result.exit_code == 0, result.output
        assert "2 incomplete subtask(s)" in result.output
        tasks = saved(data_file)
        assert tasks["design"].completed
        assert tasks["mockups"].completed and tasks["review"].completed

    def test_prompt_no_completes_parent_only(self, data_file, project):
        result = runner.invoke(app, ["done", project["design"].id], input="n\n")

        assert result.exit_code == 0
        tasks = saved(data_file)
        assert tasks["design"].completed
        assert not tasks["mockups"].completed

    def test_with_subtasks_flag(self, data_file, project):
        result = runner.invoke(app, ["done", project["project"].id, "--with-subtasks"])
        assert result.exit_code == 0
        assert all(t.completed for title, t in saved(data_file).items() if title != "chores")

    def test_parent_only_flag(self, data_file, project):
        runner.invoke(app, ["done", project["design"].id, "--parent-only"])
        tasks = saved(data_file)
        assert tasks["design"].completed
        assert not tasks["review"].completed

    def test_conflicting_flags(self, data_file, project):
        result = runner.invoke(
            app, ["done", project["design"].id, "--with-subtasks", "--parent-only"]
        )
        assert result.exit_code == 1

    def test_already_completed(self, data_file, project):
        runner.invoke(app, ["done", project["build"].id])
        result = runner.invoke(app, ["done", project["build"].id])
        assert "Already completed" in result.output
        assert saved(data_file)["build"].completed

    def test_undo(self, data_file, project):
        runner.invoke(app, ["done", project["design"].id, "--with-subtasks"])
        result = runner.invoke(app, ["undo", project["design"].id])

        assert result.exit_code == 0
        tasks = saved(data_file)
        assert not tasks["design"].completed
        assert tasks["mockups"].completed


class TestRm:
    """Deletion gated on subtasks."""

    def test_refuses_parent_without_mode(self, data_file, project):
        result = runner.invoke(app, ["rm", project["design"].id])

        assert result.exit_code == 1
        assert "--with-subtasks" in result.output
        assert "design" in saved(data_file)

    def test_leaf(self, data_file, project):
        result = runner.invoke(app, ["rm", project["build"].id])
        assert result.exit_code == 0
        assert "build" not in saved(data_file)

    def test_with_subtasks(self, data_file, project):
        result = runner.invoke(app, ["rm", project["design"].id, "--with-subtasks"])
        assert "Deleted 3 task(s)" in result.output
        assert set(saved(data_file)) == {"project", "build", "chores"}

    def test_promote(self, data_file, project):
        result = runner.invoke(app, ["rm", project["design"].id, "--promote"])

        assert "promoted 2 subtask(s)" in result.output
        assert saved(data_file)["review"].parent_id == project["project"].id

    def test_unknown(self, data_file, project):
        result = runner.invoke(app, ["rm", "nope"])
        assert result.exit_code == 1
        assert "Task not found: nope" in result.output


class TestEdit:
    """Partial updates from the command line."""

    def test_rename(self, data_file, project):
        result = runner.invoke(app, ["edit", project["build"].id, "--title", "ship"])
        assert result.exit_code == 0
        assert "ship" in saved(data_file)

    def test_move_to_root(self, data_file, project):
        runner.invoke(app, ["edit", project["design"].id, "--root"])
        assert saved(data_file)["design"].parent_id is None

    def test_move_under_descendant_rejected(self, data_file, project):
        result = runner.invoke(
            app, ["edit", project["project"].id, "--parent", project["mockups"].id]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert saved(data_file)["project"].parent_id is None

    def test_nothing_to_change(self, data_file, project):
        result = runner.invoke(app, ["edit", project["build"].id])
        assert "Nothing to change" in result.output


def test_explicit_data_option_wins(tmp_path, monkeypatch, data_file):
    other = tmp_path / "other.json"
    add(JsonTaskRepository.open(other).value, "elsewhere")

    result = runner.invoke(app, ["list", "--data", str(other)])

    assert "elsewhere" in result.output


def test_tree_of_deep_chain(data_file):
    tasks = [Task(id="t0", title="t0")]
    for i in range(1, 1500):
        tasks.append(Task(id=f"t{i}", title=f"t{i}", parent_id=f"t{i - 1}"))
    JsonStorage().save_json(
        data_file, {"version": 1, "tasks": [t.model_dump(mode="json") for t in tasks]}
    )

    result = runner.invoke(app, ["tree"])

    assert result.exit_code == 0, result.output
    last = result.output.splitlines()[-1]
    assert last.startswith("  " * 1499 + "- [ ] t1499")


class TestCategories:
    """The category command group."""

    def category_ids(self, data_file) -> dict[str, str]:
        path = get_categories_file(data_file)
        return {c.name: c.id for c in JsonCategoryRepository.open(path).value.categories}

    def test_defaults_seeded(self, data_file):
        result = runner.invoke(app, ["category", "list"])

        assert result.exit_code == 0, result.output
        for name in ["Personal", "Work", "Shopping", "Health"]:
            assert name in result.output
        assert get_categories_file(data_file).exists()

    def test_deleted_defaults_stay_deleted(self, data_file):
        runner.invoke(app, ["category", "list"])
        work = self.category_ids(data_file)["Work"]
        runner.invoke(app, ["category", "rm", work])

        runner.invoke(app, ["category", "list"])
        assert "Work" not in self.category_ids(data_file)

    def test_add_and_edit(self, data_file):
        result = runner.invoke(app, ["category", "add", "Errands", "--color", "#112233"])
        assert result.exit_code == 0, result.output
        errands = self.category_ids(data_file)["Errands"]

        result = runner.invoke(app, ["category", "edit", errands, "--name", "Chores"])
        assert result.exit_code == 0, result.output
        assert "Chores" in self.category_ids(data_file)

    def test_add_bad_color(self, data_file):
        result = runner.invoke(app, ["category", "add", "Errands", "--color", "blue"])
        assert result.exit_code == 1
        assert "Invalid category" in result.output

    def test_add_duplicate(self, data_file):
        result = runner.invoke(app, ["category", "add", "work"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_task_with_category(self, data_file):
        runner.invoke(app, ["category", "list"])
        work = self.category_ids(data_file)["Work"]

        result = runner.invoke(app, ["add", "Report", "--category", work])
        assert result.exit_code == 0, result.output
        runner.invoke(app, ["add", "Groceries"])

        result = runner.invoke(app, ["list", "--category", work])
        assert "Report" in result.output
        assert "@Work" in result.output
        assert "Groceries" not in result.output

        result = runner.invoke(app, ["list", "--uncategorized"])
        assert "Groceries" in result.output
        assert "Report" not in result.output

    def test_task_with_unknown_category(self, data_file):
        result = runner.invoke(app, ["add", "Report", "--category", "nope"])
        assert result.exit_code == 1
        assert "Category not found: nope" in result.output

    def test_rm_uncategorizes_tasks(self, data_file):
        runner.invoke(app, ["category", "list"])
        work = self.category_ids(data_file)["Work"]
        runner.invoke(app, ["add", "Report", "--category", work])

        result = runner.invoke(app, ["category", "rm", work])

        assert result.exit_code == 0, result.output
        assert "uncategorized 1 task(s)" in result.output
        assert saved(data_file)["Report"].category_id is None

    def test_edit_uncategorize(self, data_file):
        runner.invoke(app, ["category", "list"])
        work = self.category_ids(data_file)["Work"]
        runner.invoke(app, ["add", "Report", "--category", work])
        report = saved(data_file)["Report"]

        result = runner.invoke(app, ["edit", report.id, "--uncategorize"])

        assert result.exit_code == 0, result.output
        assert saved(data_file)["Report"].category_id is None
