"""Task domain - hierarchy and progress over a flat task collection.

This module provides the domain layer for taskforest's task management.
All exports are pure (no I/O, no side effects).

Key Types:
    Task - A unit of work, optionally nested via parent_id
    Priority - Low / Medium / High
    TaskProgress - Derived completion summary of a task's subtree
    HierarchyNode - Depth-annotated tree node for rendering
    CreateTaskRequest / UpdateTaskRequest - Mutation inputs
    TaskFilter - Listing predicates
    SortConfig - Listing order

Hierarchy Index:
    children_of - Direct children
    all_descendants_of - Transitive descendants, depth-first
    is_ancestor_of - Parent-chain membership
    root_task - Effective root of a task
    forest_roots / find_orphans / view_roots - Root notions

Derived Views:
    calculate_progress - Subtree completion
    build_hierarchy - Flat collection to forest
    flatten / walk - Forest to display order
"""

from .filtering import apply_filter, matches_filter, matches_search
from .hierarchy import (
    all_descendants_of,
    ancestors_of,
    children_of,
    depth_of,
    find_orphans,
    find_task,
    forest_roots,
    group_by_parent,
    has_subtasks,
    index_by_id,
    is_ancestor_of,
    parent_of,
    root_task,
    view_roots,
)
from .models import (
    CreateTaskRequest,
    HierarchyNode,
    Priority,
    SortConfig,
    SortField,
    SortOrder,
    Task,
    TaskFilter,
    TaskProgress,
    UpdateTaskRequest,
    utcnow,
)
from .progress import calculate_progress, percentage, progress_by_task
from .sorting import sort_tasks
from .validation import validate_parent_change, validate_title
from .view import build_hierarchy, build_subtree, flatten, walk

__all__ = [
    # Models
    "Task",
    "Priority",
    "TaskProgress",
    "HierarchyNode",
    "CreateTaskRequest",
    "UpdateTaskRequest",
    "TaskFilter",
    "SortConfig",
    "SortField",
    "SortOrder",
    "utcnow",
    # Hierarchy index
    "index_by_id",
    "group_by_parent",
    "find_task",
    "parent_of",
    "children_of",
    "has_subtasks",
    "all_descendants_of",
    "ancestors_of",
    "is_ancestor_of",
    "root_task",
    "depth_of",
    "forest_roots",
    "find_orphans",
    "view_roots",
    # Progress
    "calculate_progress",
    "progress_by_task",
    "percentage",
    # Views
    "build_hierarchy",
    "build_subtree",
    "flatten",
    "walk",
    # Filtering and sorting
    "apply_filter",
    "matches_filter",
    "matches_search",
    "sort_tasks",
    # Validation
    "validate_title",
    "validate_parent_change",
]
