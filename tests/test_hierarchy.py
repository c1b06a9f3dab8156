"""Tests for the hierarchy index over flat task snapshots."""

from taskforest.domain.task import (
    Task,
    all_descendants_of,
    ancestors_of,
    children_of,
    depth_of,
    find_orphans,
    forest_roots,
    has_subtasks,
    is_ancestor_of,
    parent_of,
    root_task,
    view_roots,
)


def task(task_id: str, parent_id: str | None = None, completed: bool = False) -> Task:
    return Task(id=task_id, title=task_id, parent_id=parent_id, completed=completed)


# r1
#   a
#     a1
#     a2
#   b
# r2
TASKS = [
    task("r1"),
    task("a", "r1"),
    task("a1", "a"),
    task("b", "r1"),
    task("r2"),
    task("a2", "a"),
]


class TestChildren:
    """Direct children and subtask checks."""

    def test_children_in_snapshot_order(self):
        """Children keep the order they appear in the snapshot."""
        assert [t.id for t in children_of("r1", TASKS)] == ["a", "b"]
        assert [t.id for t in children_of("a", TASKS)] == ["a1", "a2"]

    def test_leaf_has_no_children(self):
        assert children_of("a1", TASKS) == []
        assert not has_subtasks("a1", TASKS)

    def test_unknown_id_has_no_children(self):
        assert children_of("missing", TASKS) == []
        assert not has_subtasks("missing", TASKS)

    def test_has_subtasks(self):
        assert has_subtasks("r1", TASKS)
        assert has_subtasks("a", TASKS)


class TestDescendants:
    """Transitive descendant expansion."""

    def test_depth_first_pre_order(self):
        """Each child is followed by its own descendants."""
        assert [t.id for t in all_descendants_of("r1", TASKS)] == ["a", "a1", "a2", "b"]

    def test_excludes_the_task_itself(self):
        assert "r1" not in [t.id for t in all_descendants_of("r1", TASKS)]

    def test_unknown_id_has_no_descendants(self):
        assert all_descendants_of("missing", TASKS) == []

    def test_terminates_on_cycle(self):
        """Corrupt cyclic data still yields each task once."""
        cyclic = [task("x", "y"), task("y", "x")]
        assert [t.id for t in all_descendants_of("x", cyclic)] == ["y"]


class TestAncestors:
    """Upward walks: parents, ancestors, roots and depth."""

    def test_parent_of(self):
        by_id = {t.id: t for t in TASKS}
        assert parent_of(by_id["a1"], TASKS).id == "a"
        assert parent_of(by_id["r1"], TASKS) is None

    def test_ancestors_nearest_first(self):
        assert [t.id for t in ancestors_of("a2", TASKS)] == ["a", "r1"]

    def test_is_ancestor_of(self):
        assert is_ancestor_of("r1", "a2", TASKS)
        assert is_ancestor_of("a", "a2", TASKS)
        assert not is_ancestor_of("b", "a2", TASKS)
        assert not is_ancestor_of("a2", "r1", TASKS)

    def test_is_ancestor_of_unknown_descendant(self):
        assert not is_ancestor_of("r1", "missing", TASKS)

    def test_is_ancestor_of_terminates_on_cycle(self):
        cyclic = [task("x", "y"), task("y", "x"), task("z")]
        assert not is_ancestor_of("z", "x", cyclic)

    def test_root_task(self):
        by_id = {t.id: t for t in TASKS}
        assert root_task(by_id["a1"], TASKS).id == "r1"
        assert root_task(by_id["r2"], TASKS).id == "r2"

    def test_orphan_is_its_own_root(self):
        orphan = task("o", "deleted")
        assert root_task(orphan, [*TASKS, orphan]).id == "o"

    def test_depth(self):
        by_id = {t.id: t for t in TASKS}
        assert depth_of(by_id["r1"], TASKS) == 0
        assert depth_of(by_id["a"], TASKS) == 1
        assert depth_of(by_id["a2"], TASKS) == 2


class TestRoots:
    """True roots, orphans and view roots."""

    def test_forest_roots(self):
        assert [t.id for t in forest_roots(TASKS)] == ["r1", "r2"]

    def test_orphans_are_not_forest_roots(self):
        orphan = task("o", "deleted")
        snapshot = [*TASKS, orphan]
        assert [t.id for t in forest_roots(snapshot)] == ["r1", "r2"]
        assert [t.id for t in find_orphans(snapshot)] == ["o"]

    def test_view_roots_include_tasks_with_filtered_out_parent(self):
        """In a filtered subset, a task whose parent is absent is shown at top level."""
        subset = [t for t in TASKS if t.id in {"a1", "b", "r2"}]
        assert [t.id for t in view_roots(subset)] == ["a1", "b", "r2"]
