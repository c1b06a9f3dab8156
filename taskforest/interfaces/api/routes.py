"""FastAPI routes for taskforest.

Every route is a thin wrapper over an application service. Services
return Results; ``unwrap`` turns an Err into an HTTPException with a
status code chosen by error type:

    ValidationError     -> 400
    NotFoundError       -> 404
    BulkOperationError  -> 409 (detail lists the ids already processed)
    RepositoryError     -> 500

The task and category repositories are stored on ``app.state`` by
``create_app`` and injected with ``Depends(get_repository)`` and
``Depends(get_categories)``.
"""

import logging
from typing import Optional, TypeVar

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from pydantic import ValidationError as PydanticValidationError

from taskforest import __version__
from taskforest.application import (
    CategoryRepository,
    CompletionResult,
    DeleteMode,
    DeletionReport,
    TaskRepository,
    ToggleOutcome,
    bulk_mark_completed,
    check_have_subtasks,
    confirm_completion,
    create_category,
    create_task,
    delete_and_promote_descendants,
    delete_category,
    delete_single,
    delete_tasks,
    delete_with_descendants,
    get_category,
    get_hierarchy,
    get_incomplete_subtasks,
    get_progress,
    get_subtree,
    get_task,
    list_categories,
    list_tasks,
    request_toggle,
    update_category,
    update_task,
)
from taskforest.domain.category import (
    Category,
    CategoryDeletionReport,
    CreateCategoryRequest,
    UpdateCategoryRequest,
)
from taskforest.domain.shared import (
    BulkOperationError,
    Err,
    NotFoundError,
    Result,
    TaskError,
    ValidationError,
)
from taskforest.domain.task import (
    CreateTaskRequest,
    Priority,
    SortConfig,
    SortField,
    SortOrder,
    Task,
    TaskFilter,
    TaskProgress,
    UpdateTaskRequest,
)
from taskforest.infrastructure.storage import InMemoryCategoryRepository
from taskforest.interfaces.api.schemas import (
    BulkCompleteRequest,
    BulkDeleteRequest,
    BulkIdsRequest,
    CompleteTaskRequest,
    ErrorDetail,
    HasSubtasksResponse,
    HierarchyRow,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Helpers
# =============================================================================


def get_repository(request: Request) -> TaskRepository:
    """Repository configured for this app."""
    return request.app.state.repository


def get_categories(request: Request) -> CategoryRepository:
    """Category repository configured for this app."""
    return request.app.state.categories


def error_status(error: TaskError) -> int:
    """HTTP status code for a task error."""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, BulkOperationError):
        return 409
    return 500


def error_detail(error: TaskError) -> dict:
    detail = ErrorDetail(message=error.message)
    if isinstance(error, NotFoundError):
        detail.task_id = error.task_id
    if isinstance(error, BulkOperationError):
        detail.succeeded = list(error.succeeded)
        detail.failed_id = error.failed_id
    return detail.model_dump()


def unwrap(result: Result[T, TaskError]) -> T:
    """Return the Ok value or raise the matching HTTPException."""
    if isinstance(result, Err):
        status = error_status(result.error)
        if status >= 500:
            logger.error("Request failed: %s", result.error)
        raise HTTPException(status_code=status, detail=error_detail(result.error))
    return result.value


def task_filter_params(
    completed: Optional[bool] = None,
    priority: Optional[Priority] = None,
    category_id: Optional[str] = None,
    parent_id: Optional[str] = None,
    search: Optional[str] = None,
    due_before: Optional[str] = Query(None, description="ISO date or datetime"),
    due_after: Optional[str] = Query(None, description="ISO date or datetime"),
    no_category: Optional[bool] = None,
) -> TaskFilter:
    """Build a TaskFilter from query parameters."""
    try:
        return TaskFilter(
            completed=completed,
            priority=priority,
            category_id=category_id,
            parent_id=parent_id,
            search_query=search,
            due_before=due_before,
            due_after=due_after,
            no_category=no_category,
        )
    except PydanticValidationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)}) from e


def sort_params(
    sort: Optional[SortField] = None,
    order: SortOrder = SortOrder.ASC,
) -> Optional[SortConfig]:
    """Build a SortConfig from query parameters; None keeps creation order."""
    if sort is None:
        return None
    return SortConfig(field=sort, order=order)


# =============================================================================
# Router
# =============================================================================


router = APIRouter(prefix="/api")


# =============================================================================
# Bulk Operations
# =============================================================================
# Registered before /tasks/{task_id}/... so "bulk" is never read as an id.


@router.post("/tasks/bulk/delete", response_model=DeletionReport)
def bulk_delete(req: BulkDeleteRequest, repository: TaskRepository = Depends(get_repository)):
    """Delete several tasks with one subtask strategy."""
    return unwrap(delete_tasks(repository, req.ids, req.mode))


@router.post("/tasks/bulk/complete", response_model=list[Task])
def bulk_complete(req: BulkCompleteRequest, repository: TaskRepository = Depends(get_repository)):
    """Set ``completed`` on several tasks. No hierarchy rules apply."""
    return unwrap(bulk_mark_completed(repository, req.ids, req.completed))


@router.post("/tasks/bulk/has-subtasks", response_model=HasSubtasksResponse)
def bulk_has_subtasks(req: BulkIdsRequest, repository: TaskRepository = Depends(get_repository)):
    """Which of the given tasks have subtasks."""
    return HasSubtasksResponse(ids=unwrap(check_have_subtasks(repository, req.ids)))


# =============================================================================
# Tasks
# =============================================================================


@router.get("/tasks", response_model=list[Task])
def list_all_tasks(
    task_filter: TaskFilter = Depends(task_filter_params),
    sort: Optional[SortConfig] = Depends(sort_params),
    repository: TaskRepository = Depends(get_repository),
):
    """List tasks, filtered and sorted by query parameters."""
    return unwrap(list_tasks(repository, task_filter, sort))


@router.post("/tasks", response_model=Task, status_code=201)
def create(
    req: CreateTaskRequest,
    repository: TaskRepository = Depends(get_repository),
    categories: CategoryRepository = Depends(get_categories),
):
    """Create a task, optionally under a parent."""
    return unwrap(create_task(repository, req, categories))


@router.get("/tasks/{task_id}", response_model=Task)
def read(task_id: str, repository: TaskRepository = Depends(get_repository)):
    """Get a task by ID."""
    return unwrap(get_task(repository, task_id))


@router.patch("/tasks/{task_id}", response_model=Task)
def patch(
    task_id: str,
    req: UpdateTaskRequest,
    repository: TaskRepository = Depends(get_repository),
    categories: CategoryRepository = Depends(get_categories),
):
    """Update the fields present in the body. ``"parent_id": null`` moves to root."""
    return unwrap(update_task(repository, task_id, req, categories))


@router.delete("/tasks/{task_id}", response_model=DeletionReport)
def delete(
    task_id: str,
    mode: DeleteMode = DeleteMode.SINGLE,
    repository: TaskRepository = Depends(get_repository),
):
    """Delete a task; ``mode`` decides what happens to its subtasks."""
    if mode == DeleteMode.WITH_SUBTASKS:
        return unwrap(delete_with_descendants(repository, task_id))
    if mode == DeleteMode.PROMOTE:
        return unwrap(delete_and_promote_descendants(repository, task_id))
    return unwrap(delete_single(repository, task_id))


# =============================================================================
# Completion
# =============================================================================


@router.post("/tasks/{task_id}/toggle", response_model=ToggleOutcome)
def toggle(task_id: str, repository: TaskRepository = Depends(get_repository)):
    """Toggle completion, or report that a decision is needed.

    When the response has ``needs_decision`` true nothing was changed;
    follow up with ``POST /tasks/{task_id}/complete``.
    """
    return unwrap(request_toggle(repository, task_id))


@router.post("/tasks/{task_id}/complete", response_model=CompletionResult)
def complete(
    task_id: str,
    req: CompleteTaskRequest,
    repository: TaskRepository = Depends(get_repository),
):
    """Complete a task with or without its incomplete subtasks."""
    return unwrap(confirm_completion(repository, task_id, req.resolution))


@router.get("/tasks/{task_id}/incomplete-subtasks", response_model=list[Task])
def incomplete_subtasks(task_id: str, repository: TaskRepository = Depends(get_repository)):
    return unwrap(get_incomplete_subtasks(repository, task_id))


# =============================================================================
# Derived Views
# =============================================================================


@router.get("/tasks/{task_id}/progress", response_model=TaskProgress)
def progress(task_id: str, repository: TaskRepository = Depends(get_repository)):
    """Subtree progress, always over the full collection."""
    return unwrap(get_progress(repository, task_id))


@router.get("/tasks/{task_id}/subtree", response_model=list[HierarchyRow])
def subtree(task_id: str, repository: TaskRepository = Depends(get_repository)):
    """The task followed by its descendants, as flattened rows."""
    return HierarchyRow.from_nodes([unwrap(get_subtree(repository, task_id))])


@router.get("/hierarchy", response_model=list[HierarchyRow])
def hierarchy(
    task_filter: TaskFilter = Depends(task_filter_params),
    sort: Optional[SortConfig] = Depends(sort_params),
    repository: TaskRepository = Depends(get_repository),
):
    """Forest view as rows in display order.

    Tasks whose parent is filtered out appear as roots at depth 0.
    """
    return HierarchyRow.from_nodes(unwrap(get_hierarchy(repository, task_filter, sort)))


# =============================================================================
# Categories
# =============================================================================


@router.get("/categories", response_model=list[Category])
def all_categories(categories: CategoryRepository = Depends(get_categories)):
    """Categories ordered by name."""
    return unwrap(list_categories(categories))


@router.post("/categories", response_model=Category, status_code=201)
def add_category(
    req: CreateCategoryRequest,
    categories: CategoryRepository = Depends(get_categories),
):
    return unwrap(create_category(categories, req))


@router.get("/categories/{category_id}", response_model=Category)
def read_category(category_id: str, categories: CategoryRepository = Depends(get_categories)):
    return unwrap(get_category(categories, category_id))


@router.patch("/categories/{category_id}", response_model=Category)
def patch_category(
    category_id: str,
    req: UpdateCategoryRequest,
    categories: CategoryRepository = Depends(get_categories),
):
    """Rename or recolour a category. ``"icon": null`` removes the icon."""
    return unwrap(update_category(categories, category_id, req))


@router.delete("/categories/{category_id}", response_model=CategoryDeletionReport)
def remove_category(
    category_id: str,
    categories: CategoryRepository = Depends(get_categories),
    repository: TaskRepository = Depends(get_repository),
):
    """Delete a category. Tasks that used it are kept, uncategorized."""
    return unwrap(delete_category(categories, repository, category_id))


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    repository: TaskRepository,
    categories: Optional[CategoryRepository] = None,
) -> FastAPI:
    """Create the FastAPI application serving ``repository``.

    Without ``categories`` an empty in-memory category repository is used.
    """
    app = FastAPI(
        title="taskforest",
        description="Hierarchical task management",
        version=__version__,
    )
    app.state.repository = repository
    app.state.categories = categories if categories is not None else InMemoryCategoryRepository()
    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "taskforest", "version": __version__}

    return app
