"""Storage infrastructure for taskforest.

Provides task and category repository implementations using Result monads for
explicit error handling.
"""

from taskforest.infrastructure.storage.json_storage import JsonStorage
from taskforest.infrastructure.storage.repositories import (
    InMemoryCategoryRepository,
    InMemoryTaskRepository,
    JsonCategoryRepository,
    JsonTaskRepository,
)

__all__ = [
    "JsonStorage",
    "InMemoryTaskRepository",
    "JsonTaskRepository",
    "InMemoryCategoryRepository",
    "JsonCategoryRepository",
]
