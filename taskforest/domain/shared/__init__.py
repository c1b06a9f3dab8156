"""Shared domain utilities for taskforest.

This package provides common building blocks used across the layers:

- Result monad for explicit error handling
- Typed error values carried on the Err side of a Result

Example usage:
    >>> from taskforest.domain.shared import Err, NotFoundError, Ok, Result
    >>>
    >>> def lookup(task_id: str) -> Result[dict, NotFoundError]:
    ...     if task_id == "missing":
    ...         return Err(NotFoundError.for_task(task_id))
    ...     return Ok({"id": task_id, "title": "Example"})
"""

from taskforest.domain.shared.errors import (
    BulkOperationError,
    NotFoundError,
    RepositoryError,
    TaskError,
    ValidationError,
)
from taskforest.domain.shared.result import (
    Err,
    Ok,
    Result,
    flat_map,
    map_result,
    unwrap_or,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "map_result",
    "flat_map",
    "unwrap_or",
    # Errors
    "TaskError",
    "ValidationError",
    "NotFoundError",
    "RepositoryError",
    "BulkOperationError",
]
