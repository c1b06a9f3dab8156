"""Tests for subtree progress calculation."""

import pytest

from taskforest.domain.task import (
    Task,
    TaskProgress,
    calculate_progress,
    percentage,
    progress_by_task,
)


def task(task_id: str, parent_id: str | None = None, completed: bool = False) -> Task:
    return Task(id=task_id, title=task_id, parent_id=parent_id, completed=completed)


class TestPercentage:
    """Integer percentage, rounded half-up."""

    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [
            (0, 0, 0),
            (0, 3, 0),
            (1, 3, 33),
            (2, 3, 67),
            (1, 2, 50),
            (1, 8, 13),
            (3, 3, 100),
        ],
    )
    def test_rounding(self, completed, total, expected):
        assert percentage(completed, total) == expected


class TestCalculateProgress:
    """Progress over transitive descendants."""

    def test_counts_all_depths(self):
        """Grandchildren count towards the parent, not only direct children."""
        tasks = [
            task("p"),
            task("c1", "p", completed=True),
            task("c2", "p"),
            task("g1", "c2", completed=True),
        ]
        assert calculate_progress("p", tasks) == TaskProgress(
            total_subtasks=3,
            completed_subtasks=2,
            progress_percentage=67,
            has_subtasks=True,
        )

    def test_parent_completion_is_ignored(self):
        """Only descendants count; the task's own flag does not."""
        tasks = [task("p", completed=True), task("c", "p")]
        assert calculate_progress("p", tasks).completed_subtasks == 0

    def test_leaf_has_empty_progress(self):
        tasks = [task("leaf", completed=True)]
        assert calculate_progress("leaf", tasks) == TaskProgress()

    def test_unknown_task_has_empty_progress(self):
        assert calculate_progress("missing", [task("a")]) == TaskProgress()

    def test_progress_by_task(self):
        tasks = [task("p"), task("c", "p", completed=True)]
        result = progress_by_task(tasks)
        assert result["p"].progress_percentage == 100
        assert not result["c"].has_subtasks
