"""Request/Response schemas for the taskforest API.

These Pydantic models define the API contract for request and response
bodies that are not domain models themselves. Task creation and partial
updates use ``CreateTaskRequest`` and ``UpdateTaskRequest`` directly.
"""

from typing import Optional

from pydantic import BaseModel, Field

from taskforest.application import CompletionResolution, DeleteMode
from taskforest.domain.task import HierarchyNode, Task, walk


# =============================================================================
# Task Schemas
# =============================================================================


class CompleteTaskRequest(BaseModel):
    """Caller's decision after a toggle reported ``needs_decision``."""

    resolution: CompletionResolution


# =============================================================================
# Hierarchy Schemas
# =============================================================================


class HierarchyRow(BaseModel):
    """One task of a forest view, flattened.

    Rows come in depth-first pre-order, so a row's children follow it
    directly at ``depth + 1``.
    """

    task: Task
    depth: int
    child_count: int

    @classmethod
    def from_nodes(cls, nodes: list[HierarchyNode]) -> list["HierarchyRow"]:
        return [
            cls(task=node.task, depth=node.depth, child_count=len(node.children))
            for node in walk(nodes)
        ]


# =============================================================================
# Bulk Schemas
# =============================================================================


class BulkIdsRequest(BaseModel):
    """A selection of task ids."""

    ids: list[str] = Field(min_length=1)


class BulkDeleteRequest(BulkIdsRequest):
    """Delete a selection with one subtask strategy."""

    mode: DeleteMode = DeleteMode.SINGLE


class BulkCompleteRequest(BulkIdsRequest):
    """Set ``completed`` on a selection."""

    completed: bool = True


class HasSubtasksResponse(BaseModel):
    """Ids from the request that have at least one subtask."""

    ids: list[str]


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorDetail(BaseModel):
    """Body of ``detail`` on an error response."""

    message: str
    task_id: Optional[str] = None
    succeeded: list[str] = Field(default_factory=list)
    failed_id: Optional[str] = None
