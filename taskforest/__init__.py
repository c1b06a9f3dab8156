"""taskforest - hierarchical task management core.

Maintains a forest of tasks and subtasks of arbitrary depth, derives
progress from the flat task collection and keeps completion and deletion
consistent between parents and children.
"""

__version__ = "0.1.0"
