"""Task API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_task_service
from api.schemas.common import ErrorResponse
from api.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.task import Task, TaskStatus
from domain.services.task_service import TaskService

router = APIRouter(prefix="/task", tags=["tasks"])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    responses={
        201: {"description": "Task created successfully"},
        404: {"model": ErrorResponse, "description": "User or parent task not found"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_task(
    request: Request,
    body: TaskCreate,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Create a new task owned by the authenticated user.

    If `parentTaskId` is provided, the task is created as a subtask of it.
    New tasks always start as `pending`.
    """
    task = await service.create_task(
        owner_id=user.id,
        title=body.title,
        description=body.description,
        parent_task_id=body.parent_task_id,
    )
    return _build_task_response(task)


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="List the user's tasks",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_tasks(
    request: Request,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
    task_status: TaskStatus | None = Query(None, alias="status", description="Filter by status"),
) -> list[TaskResponse]:
    """
    Get every task of the authenticated user as a flat list.

    Each task carries its direct subtasks only; subtasks also appear as
    entries of their own.
    """
    tasks = await service.list_for_owner(user.id, task_status)
    return [_build_task_response(t) for t in tasks]


@router.get(
    "/status",
    response_model=list[TaskResponse],
    summary="Filter the user's tasks by status",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def filter_tasks_by_status(
    request: Request,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
    task_status: TaskStatus = Query(..., alias="status", description="Status to match"),
) -> list[TaskResponse]:
    """Get the authenticated user's tasks with the given status."""
    tasks = await service.filter_by_status(user.id, task_status)
    return [_build_task_response(t) for t in tasks]


@router.get(
    "/tree",
    response_model=list[TaskResponse],
    summary="List all task trees",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_task_trees(
    request: Request,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    """
    Get every root task with its complete subtree, nested at any depth.

    This is a global view: roots of all users are included.
    """
    forest = await service.list_all_trees()
    return [_build_task_response(t) for t in forest]


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task with its subtree",
    responses={
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Get a task and all of its descendants."""
    task = await service.get_task_tree(task_id, user.id)
    return _build_task_response(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
    responses={
        200: {"description": "Task updated successfully"},
        404: {"model": ErrorResponse, "description": "Task not found"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_task(
    request: Request,
    task_id: UUID,
    body: TaskUpdate,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Update an existing task. All fields are optional (partial update).

    Missing or empty fields keep their current value.
    """
    task = await service.update_task(
        task_id=task_id,
        owner_id=user.id,
        title=body.title,
        description=body.description,
        status=body.status,
    )
    return _build_task_response(task)


@router.patch(
    "/{task_id}/complete",
    response_model=TaskResponse,
    summary="Mark a task as completed",
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def complete_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Set the task's status to `completed`."""
    task = await service.mark_completed(task_id, user.id)
    return _build_task_response(task)


@router.patch(
    "/{task_id}/pending",
    response_model=TaskResponse,
    summary="Mark a task as pending",
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def reopen_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Set the task's status back to `pending`."""
    task = await service.mark_pending(task_id, user.id)
    return _build_task_response(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={
        204: {"description": "Task deleted successfully"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> None:
    """Delete a task and all its descendants (cascade delete)."""
    await service.delete_task(task_id, user.id)
    return None


def _build_task_response(task: Task) -> TaskResponse:
    """Convert a domain entity (and its populated subtasks) to the response schema."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        user_id=task.user_id,
        parent_task_id=task.parent_task_id,
        created_at=task.created_at,
        updated_at=task.updated_at,
        subtasks=[_build_task_response(child) for child in task.subtasks],
    )
