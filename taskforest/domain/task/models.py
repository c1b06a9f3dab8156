"""Task domain models.

Pure domain models for the task forest. Tasks are stored flat; the only
structural edge is ``parent_id``. Everything hierarchical (progress, tree
views, depth) is derived from a flat snapshot and never persisted.
"""

from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive datetimes are taken to be UTC so every timestamp compares cleanly
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _unique_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    return list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))


class Priority(str, Enum):
    """Priority of a task."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Ordering weight, Low < Medium < High."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


class Task(BaseModel):
    """A unit of work, optionally nested under a parent task.

    ``completed`` is a fact about this task alone. Aggregate completion of
    a task's subtree is computed on demand by the progress calculator.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    description: str | None = None
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    category_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    parent_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return _unique_tags(value) or []

    def is_root(self) -> bool:
        """True when the task has no parent reference at all.

        An orphan (parent set but missing) is not a root by this test;
        see ``hierarchy.view_roots`` for the renderer's notion of a root.
        """
        return self.parent_id is None


class TaskProgress(BaseModel):
    """Completion summary of a task's transitive subtasks."""

    total_subtasks: int = 0
    completed_subtasks: int = 0
    progress_percentage: int = 0
    has_subtasks: bool = False


class HierarchyNode(BaseModel):
    """A task with its nested children, for rendering.

    ``depth`` starts at 0 for view roots and is a view annotation only.
    """

    task: Task
    children: list["HierarchyNode"] = Field(default_factory=list)
    depth: int = 0


class CreateTaskRequest(BaseModel):
    """Fields accepted when creating a task."""

    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    category_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    parent_id: str | None = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return _unique_tags(value) or []


# Fields where an explicit None is meaningful (clears the value)
_NULLABLE_FIELDS = frozenset({"description", "due_date", "category_id", "parent_id"})


class UpdateTaskRequest(BaseModel):
    """Partial update of a task.

    Only fields that were explicitly set are applied. Setting ``parent_id``
    to None moves the task to the root of the forest.
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    category_id: str | None = None
    tags: list[str] | None = None
    parent_id: str | None = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return _unique_tags(value)

    def changes(self) -> dict[str, Any]:
        """Return the explicitly-set fields to apply to a task."""
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key in _NULLABLE_FIELDS
        }

    def sets_parent(self) -> bool:
        """True when this update retargets ``parent_id``."""
        return "parent_id" in self.model_fields_set


def _expand_date(value: Any, at: time) -> Any:
    """Turn a bare date (or YYYY-MM-DD string) into a UTC datetime at ``at``."""
    if value == "":
        return None
    if isinstance(value, str):
        try:
            day = date.fromisoformat(value)
        except ValueError:
            return value
        return datetime.combine(day, at, tzinfo=UTC)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, at, tzinfo=UTC)
    return value


class TaskFilter(BaseModel):
    """Conjunction of optional predicates for listing tasks.

    Unset fields do not constrain the result. A bare date for
    ``due_before`` means the end of that day and for ``due_after`` the
    start of that day.
    """

    completed: bool | None = None
    priority: Priority | None = None
    category_id: str | None = None
    parent_id: str | None = None
    search_query: str | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None
    no_category: bool | None = None

    @field_validator("due_before", mode="before")
    @classmethod
    def _expand_due_before(cls, value: Any) -> Any:
        return _expand_date(value, time(23, 59, 59))

    @field_validator("due_after", mode="before")
    @classmethod
    def _expand_due_after(cls, value: Any) -> Any:
        return _expand_date(value, time(0, 0, 0))

    @field_validator("due_before", "due_after")
    @classmethod
    def _normalize_bounds(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("category_id", "parent_id", "search_query", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        return None if value == "" else value

    def is_empty(self) -> bool:
        """True when no predicate is set."""
        return not self.model_dump(exclude_none=True)


class SortField(str, Enum):
    """Field to order a task listing by."""

    TITLE = "title"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    PRIORITY = "priority"
    COMPLETED = "completed"


class SortOrder(str, Enum):
    """Direction of a task listing."""

    ASC = "asc"
    DESC = "desc"


class SortConfig(BaseModel):
    """Sort field and direction for a task listing."""

    field: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.ASC

    model_config = {"frozen": True}
