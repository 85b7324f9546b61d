"""
TaskTrack Backend - Task Route Handlers
=======================================

What:  Per-user task CRUD.

Route Inventory:
    GET    /tasks/{user_id}   list a user's tasks
    POST   /tasks/{user_id}   create a task for a user
    DELETE /tasks/{task_id}   delete a task
    PATCH  /tasks/{task_id}   set a task's completion flag

GET and POST address the owning user; DELETE and PATCH address the task.
Ids must be integers in 1..2147483647 (the range of the INTEGER key
columns); anything else fails request validation (400) before the store
is queried.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path

from tasktrack.schemas.common import ErrorResponse, MessageResponse
from tasktrack.schemas.task import (
    TaskCreateRequest,
    TaskMutationResponse,
    TaskResponse,
    TaskStateUpdateRequest,
)
from tasktrack.services.gateway import PersistenceGateway, get_gateway
from tasktrack.services.task_service import task_service

logger = logging.getLogger(__name__)

RowId = Annotated[int, Path(ge=1, le=2_147_483_647)]

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get(
    "/{user_id}",
    response_model=List[TaskResponse],
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all tasks of a user",
    description="Tasks come back in store order; clients sort them if they need to.",
)
async def list_tasks(
    user_id: RowId,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> List[TaskResponse]:
    return await task_service.list_tasks(gateway, user_id)


@router.post(
    "/{user_id}",
    status_code=201,
    response_model=TaskMutationResponse,
    responses={
        400: {"description": "Missing or invalid task_name", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a task for a user",
)
async def create_task(
    user_id: RowId,
    payload: TaskCreateRequest,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> TaskMutationResponse:
    return await task_service.create_task(gateway, user_id, payload.task_name)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Task not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a task",
)
async def delete_task(
    task_id: RowId,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> MessageResponse:
    return await task_service.delete_task(gateway, task_id)


@router.patch(
    "/{task_id}",
    response_model=TaskMutationResponse,
    responses={
        400: {"description": "Missing or invalid state", "model": ErrorResponse},
        404: {"description": "Task not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Set a task's completion state",
)
async def update_task_state(
    task_id: RowId,
    payload: TaskStateUpdateRequest,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> TaskMutationResponse:
    return await task_service.update_task_state(gateway, task_id, payload.state)
