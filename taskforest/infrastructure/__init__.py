"""Infrastructure layer for taskforest.

This module provides the I/O side of the system: task and category
repositories that satisfy the ports in ``taskforest.application.ports``.

Exports:
    Storage:
        - JsonStorage: Low-level JSON file I/O
        - InMemoryTaskRepository: Dict-backed repository
        - JsonTaskRepository: Repository persisted to a JSON file
        - InMemoryCategoryRepository, JsonCategoryRepository: The same for
          categories
"""

from taskforest.infrastructure.storage import (
    InMemoryCategoryRepository,
    InMemoryTaskRepository,
    JsonCategoryRepository,
    JsonStorage,
    JsonTaskRepository,
)

__all__ = [
    "JsonStorage",
    "InMemoryTaskRepository",
    "JsonTaskRepository",
    "InMemoryCategoryRepository",
    "JsonCategoryRepository",
]
