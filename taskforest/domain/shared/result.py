"""Result monad for explicit error handling in task operations.

Every fallible operation in taskforest (repository calls, hierarchy-aware
services, bulk mutations) returns a Result instead of raising for expected
failures. The error side carries a typed value from
``taskforest.domain.shared.errors`` so callers can branch on the kind of
failure without parsing messages.

Example usage:
    >>> from taskforest.domain.shared.errors import NotFoundError
    >>> def find_title(titles: dict[str, str], task_id: str) -> Result[str, NotFoundError]:
    ...     if task_id not in titles:
    ...         return Err(NotFoundError.for_task(task_id))
    ...     return Ok(titles[task_id])
    ...
    >>> result = find_title({"t1": "Write report"}, "t1")
    >>> if isinstance(result, Ok):
    ...     print(result.value)
    Write report
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Apply a function to the value inside an Ok result.

    Args:
        result: The result to transform.
        fn: Function to apply to the Ok value.

    Returns:
        A new Result with the transformed value, or the original Err.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def flat_map(result: Ok[T] | Err[E], fn: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Chain operations that return Results.

    Used to sequence repository calls where each step may fail, e.g.
    fetching a task and then updating it.

    Args:
        result: The result to chain from.
        fn: Function that takes the Ok value and returns a new Result.

    Returns:
        The Result from applying fn, or the original Err.
    """
    if isinstance(result, Ok):
        return fn(result.value)
    return result


def unwrap_or(result: Ok[T] | Err[E], default: T) -> T:
    """Extract the value from a Result, using a default if it's an error."""
    if isinstance(result, Ok):
        return result.value
    return default
