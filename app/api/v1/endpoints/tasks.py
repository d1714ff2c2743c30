from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from app.core.dependencies import get_current_db_user, get_task_service
from app.database.models import User
from app.schemas.enums import TaskStatus
from app.schemas.task import (
    TaskCommentCreate,
    TaskCommentResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskResponse,
    TaskUpdate,
)
from app.services.task_service import TaskService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "",
    summary="List tasks",
    description="Tasks assigned to or by a user, optionally filtered by status",
    operation_id="list_tasks",
)
async def list_tasks(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
    user_id: Optional[UUID] = Query(None, alias="userId"),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
):
    tasks = await task_service.list_tasks(
        user_id=user_id,
        status=task_status.value if task_status else None,
    )
    return create_api_response(
        data=[TaskResponse.model_validate(task) for task in tasks],
        message="Tasks retrieved successfully",
        request=request,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    operation_id="create_task",
)
async def create_task(
    request: Request,
    payload: TaskCreate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    task = await task_service.create_task(payload, creator_id=current_user.id)
    return create_api_response(
        data=TaskResponse.model_validate(task),
        message="Task created successfully",
        request=request,
    )


@router.get(
    "/{task_id}",
    summary="Get a task with its comments",
    operation_id="get_task",
)
async def get_task(
    request: Request,
    task_id: UUID,
    current_user: Annotated[User, Depends(get_current_db_user)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    task = await task_service.get_task(task_id)
    return create_api_response(
        data=TaskDetailResponse.model_validate(task),
        message="Task retrieved successfully",
        request=request,
    )


@router.put(
    "/{task_id}",
    summary="Update a task",
    description="Completing a task without a completion date stamps it with the current time",
    operation_id="update_task",
)
async def update_task(
    request: Request,
    task_id: UUID,
    payload: TaskUpdate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    task = await task_service.update_task(task_id, payload)
    return create_api_response(
        data=TaskResponse.model_validate(task),
        message="Task updated successfully",
        request=request,
    )


@router.delete(
    "/{task_id}",
    summary="Delete a task",
    operation_id="delete_task",
)
async def delete_task(
    request: Request,
    task_id: UUID,
    current_user: Annotated[User, Depends(get_current_db_user)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    await task_service.delete_task(task_id)
    return create_api_response(
        data={"id": str(task_id)},
        message="Task deleted successfully",
        request=request,
    )


@router.post(
    "/{task_id}/comments",
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a task",
    operation_id="add_task_comment",
)
async def add_task_comment(
    request: Request,
    task_id: UUID,
    payload: TaskCommentCreate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    comment = await task_service.add_comment(task_id, payload, author_id=current_user.id)
    return create_api_response(
        data=TaskCommentResponse.model_validate(comment),
        message="Comment added successfully",
        request=request,
    )
