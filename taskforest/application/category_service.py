"""Category service - create, rename and delete categories.

Categories live in their own repository. The only link to tasks is
``Task.category_id``, so the operations that cross that link are here:
checking that a referenced category exists, and clearing the reference
from every task when a category is deleted.
"""

import logging

from taskforest.application.ports import CategoryRepository, TaskRepository
from taskforest.domain.category import (
    DEFAULT_CATEGORIES,
    Category,
    CategoryDeletionReport,
    CreateCategoryRequest,
    UpdateCategoryRequest,
)
from taskforest.domain.shared import (
    BulkOperationError,
    Err,
    Ok,
    Result,
    TaskError,
    map_result,
    unwrap_or,
)
from taskforest.domain.task import TaskFilter, UpdateTaskRequest

logger = logging.getLogger(__name__)


def create_category(
    categories: CategoryRepository,
    request: CreateCategoryRequest,
) -> Result[Category, TaskError]:
    """Create a category. Names are unique, ignoring case."""
    return categories.create_category(request)


def get_category(categories: CategoryRepository, category_id: str) -> Result[Category, TaskError]:
    return categories.get_category(category_id)


def list_categories(categories: CategoryRepository) -> Result[list[Category], TaskError]:
    """All categories, ordered by name."""
    return categories.list_categories()


def update_category(
    categories: CategoryRepository,
    category_id: str,
    request: UpdateCategoryRequest,
) -> Result[Category, TaskError]:
    return categories.update_category(category_id, request)


def delete_category(
    categories: CategoryRepository,
    tasks: TaskRepository,
    category_id: str,
) -> Result[CategoryDeletionReport, TaskError]:
    """Delete a category and uncategorize the tasks that used it.

    Tasks are never deleted with their category. Each referencing task
    gets ``category_id`` cleared first, then the category is removed.
    The first failing call stops the run; the tasks already cleared are
    reported in a BulkOperationError and stay uncategorized.

    Returns:
        Ok(CategoryDeletionReport), Err(NotFoundError) for an unknown
        category, or Err(BulkOperationError) after a partial run.
    """
    existing = categories.get_category(category_id)
    if isinstance(existing, Err):
        return existing

    referencing = tasks.list_tasks(TaskFilter(category_id=category_id))
    if isinstance(referencing, Err):
        return referencing

    cleared: list[str] = []
    for task in referencing.value:
        result = tasks.update_task(task.id, UpdateTaskRequest(category_id=None))
        if isinstance(result, Err):
            return Err(
                BulkOperationError.from_failure(
                    "Uncategorizing tasks", cleared, task.id, result.error
                )
            )
        cleared.append(task.id)

    deleted = categories.delete_category(category_id)
    if isinstance(deleted, Err):
        if not cleared:
            return deleted
        return Err(
            BulkOperationError.from_failure(
                "Deleting category", cleared, category_id, deleted.error
            )
        )

    logger.info("Deleted category %s, uncategorized %d task(s)", category_id, len(cleared))
    return Ok(CategoryDeletionReport(category_id=category_id, uncategorized_ids=cleared))


def seed_default_categories(categories: CategoryRepository) -> Result[list[Category], TaskError]:
    """Create each default category whose name is not taken yet.

    Returns:
        Ok(list of the categories created), possibly empty.
    """
    listed = categories.list_categories()
    if isinstance(listed, Err):
        return listed

    taken = {c.name.casefold() for c in listed.value}
    created: list[Category] = []
    for request in DEFAULT_CATEGORIES:
        if request.name.casefold() in taken:
            continue
        result = categories.create_category(request)
        if isinstance(result, Err):
            return result
        created.append(result.value)

    if created:
        logger.debug("Seeded %d default categories", len(created))
    return Ok(created)


def check_category(
    categories: CategoryRepository,
    category_id: str | None,
) -> Result[None, TaskError]:
    """Ok when ``category_id`` is None or names an existing category."""
    if category_id is None:
        return Ok(None)
    return map_result(categories.get_category(category_id), lambda _: None)


def category_label(categories: CategoryRepository, category_id: str) -> str:
    """Display name for a category reference, or the raw id if it is unknown."""
    named = map_result(categories.get_category(category_id), lambda c: c.name)
    return unwrap_or(named, category_id)
