"""Category domain models.

Categories group tasks independently of the hierarchy. A task refers to
at most one category through ``Task.category_id``; the category itself
knows nothing about its tasks.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from taskforest.domain.shared import Err, Ok, Result, ValidationError
from taskforest.domain.task.models import utcnow

DEFAULT_COLOR = "#6B7280"

# Hex colour as shown in the UI, e.g. "#3B82F6"
_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class Category(BaseModel):
    """A named group of tasks."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    color: str = Field(default=DEFAULT_COLOR, pattern=_COLOR_PATTERN)
    icon: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class CreateCategoryRequest(BaseModel):
    """Fields accepted when creating a category."""

    name: str
    color: str = Field(default=DEFAULT_COLOR, pattern=_COLOR_PATTERN)
    icon: str | None = None


class UpdateCategoryRequest(BaseModel):
    """Partial update of a category.

    Only explicitly-set fields are applied; an explicit ``icon: null``
    removes the icon.
    """

    name: str | None = None
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)
    icon: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly-set fields to apply to a category."""
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None or key == "icon"}


class CategoryDeletionReport(BaseModel):
    """Outcome of deleting a category.

    Tasks that referenced the category are kept and become uncategorized.
    """

    category_id: str
    uncategorized_ids: list[str] = Field(default_factory=list)


# Seeded into a new category store
DEFAULT_CATEGORIES: tuple[CreateCategoryRequest, ...] = (
    CreateCategoryRequest(name="Personal", color="#3B82F6", icon="User"),
    CreateCategoryRequest(name="Work", color="#EF4444", icon="Briefcase"),
    CreateCategoryRequest(name="Shopping", color="#10B981", icon="ShoppingCart"),
    CreateCategoryRequest(name="Health", color="#F59E0B", icon="Heart"),
)


def validate_name(
    name: str | None,
    existing: Sequence[Category],
    exclude_id: str | None = None,
) -> Result[str, ValidationError]:
    """Check a category name and return it stripped.

    Names must be non-blank and unique, ignoring case. ``exclude_id``
    skips the category being renamed.
    """
    if name is None or not name.strip():
        return Err(ValidationError("Category name cannot be empty"))

    name = name.strip()
    for category in existing:
        if category.id != exclude_id and category.name.casefold() == name.casefold():
            return Err(ValidationError(f"Category already exists: {category.name}"))
    return Ok(name)
