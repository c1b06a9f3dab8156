"""Hierarchy view builder.

Turns a flat task collection into a depth-annotated forest for
rendering, and flattens it back into display order. Pure functions.

A view root is any task whose parent is not part of the given
collection. For a filtered collection (e.g. "due today") that includes
tasks whose real parent exists elsewhere; that is expected, not an
orphan condition.
"""

from collections.abc import Iterator, Sequence

from .hierarchy import group_by_parent, index_by_id, view_roots
from .models import HierarchyNode, Task


def _build_node(
    task: Task,
    groups: dict[str | None, list[Task]],
    visited: set[str],
) -> HierarchyNode:
    """Build the subtree under ``task`` with an explicit stack.

    A task already in ``visited`` is skipped where it would appear again.
    """
    root = HierarchyNode(task=task, depth=0)
    visited.add(task.id)
    stack = [(root, iter(groups.get(task.id, [])))]

    while stack:
        parent, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            continue
        if child.id in visited:
            continue
        visited.add(child.id)
        node = HierarchyNode(task=child, depth=parent.depth + 1)
        parent.children.append(node)
        stack.append((node, iter(groups.get(child.id, []))))

    return root


def build_hierarchy(tasks: Sequence[Task]) -> list[HierarchyNode]:
    """Group a flat collection into a forest of HierarchyNodes.

    Roots keep their snapshot order, as do children under each parent.
    Tasks caught in a parent cycle (only possible with corrupt data) are
    not reachable from any root; each such cycle is broken at its first
    task in snapshot order, which becomes an extra root, so every task
    appears exactly once.

    Args:
        tasks: Flat task collection, possibly filtered.

    Returns:
        Root nodes of the view, depth 0.
    """
    groups = group_by_parent(tasks)
    visited: set[str] = set()
    nodes = [_build_node(root, groups, visited) for root in view_roots(tasks)]

    for task in tasks:
        if task.id not in visited:
            nodes.append(_build_node(task, groups, visited))

    return nodes


def build_subtree(task_id: str, tasks: Sequence[Task]) -> HierarchyNode | None:
    """Build the node for one task and all of its descendants.

    Returns None when the task is not in the collection.
    """
    task = index_by_id(tasks).get(task_id)
    if task is None:
        return None
    return _build_node(task, group_by_parent(tasks), set())


def walk(nodes: Sequence[HierarchyNode]) -> Iterator[HierarchyNode]:
    """Yield every node of a forest in depth-first pre-order."""
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def flatten(nodes: Sequence[HierarchyNode]) -> list[Task]:
    """Depth-first pre-order list of the tasks in a forest.

    Each parent is immediately followed by its children's subtrees.
    """
    return [node.task for node in walk(nodes)]
