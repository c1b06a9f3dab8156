"""Category domain package.

This package contains the category aggregate: the model, its create and
update requests, and the default categories a new store starts with.
"""

from taskforest.domain.category.models import (
    DEFAULT_CATEGORIES,
    DEFAULT_COLOR,
    Category,
    CategoryDeletionReport,
    CreateCategoryRequest,
    UpdateCategoryRequest,
    validate_name,
)

__all__ = [
    "Category",
    "CategoryDeletionReport",
    "CreateCategoryRequest",
    "UpdateCategoryRequest",
    "DEFAULT_CATEGORIES",
    "DEFAULT_COLOR",
    "validate_name",
]
