"""Typed error values for task operations.

Errors are carried on the ``Err`` side of a Result rather than raised.
They are frozen dataclasses so they can be compared in tests and safely
shared between the layers that report them.

Taxonomy:
    ValidationError - malformed input to a mutation (empty title, a
        parent retarget that would create a cycle)
    NotFoundError - a referenced task id does not exist
    RepositoryError - transient failure from the persistence layer
    BulkOperationError - a multi-call operation stopped part way; reports
        which ids were processed before the failure
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskError:
    """Base class for all task operation errors.

    Attributes:
        message: Human-readable description of the failure.
    """

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationError(TaskError):
    """Input to a mutation was rejected before reaching storage."""


@dataclass(frozen=True)
class NotFoundError(TaskError):
    """A referenced task (or category) does not exist at the time of the operation.

    Attributes:
        task_id: The id that failed to resolve. For categories this is
            the category id.
    """

    task_id: str = ""

    @classmethod
    def for_task(cls, task_id: str) -> "NotFoundError":
        return cls(message=f"Task not found: {task_id}", task_id=task_id)

    @classmethod
    def for_parent(cls, parent_id: str) -> "NotFoundError":
        return cls(message=f"Parent task not found: {parent_id}", task_id=parent_id)

    @classmethod
    def for_category(cls, category_id: str) -> "NotFoundError":
        return cls(message=f"Category not found: {category_id}", task_id=category_id)


@dataclass(frozen=True)
class RepositoryError(TaskError):
    """The persistence layer failed (I/O error, corrupt data, ...)."""


@dataclass(frozen=True)
class BulkOperationError(TaskError):
    """A bulk operation aborted after a partial run.

    No rollback is attempted. The caller gets the ids that were processed
    successfully so it can retry the remainder or repair manually.

    Attributes:
        succeeded: Ids processed before the failure, in processing order.
        failed_id: The id whose repository call failed.
        cause: The underlying error for ``failed_id``.
    """

    succeeded: tuple[str, ...] = ()
    failed_id: str | None = None
    cause: TaskError | None = None

    @classmethod
    def from_failure(
        cls,
        operation: str,
        succeeded: list[str],
        failed_id: str,
        cause: TaskError,
    ) -> "BulkOperationError":
        return cls(
            message=(
                f"{operation} failed at task {failed_id} after "
                f"{len(succeeded)} successful update(s): {cause.message}"
            ),
            succeeded=tuple(succeeded),
            failed_id=failed_id,
            cause=cause,
        )
