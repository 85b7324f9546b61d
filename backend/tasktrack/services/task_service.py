"""
TaskTrack Backend - Task Service
================================

What:  Per-user task CRUD rules.
Who:   Called by the /tasks route handlers.

Ordering, in every operation:
    1. validate input (ValidationError → 400)
    2. check the referenced user/task exists (NotFoundError → 404)
    3. perform the mutation through the gateway
A rejected request therefore never leaves a row behind.

For HTTP requests the body rules of step 1 (non-empty string `task_name`,
boolean `state`) are already enforced by the request schemas, so a bad body
is answered with 400 before the handler runs. The checks here apply to
other callers of the service.
"""

import logging
from typing import Any, List

from tasktrack.exceptions import NotFoundError, ValidationError
from tasktrack.schemas.task import TaskMutationResponse, TaskResponse
from tasktrack.schemas.common import MessageResponse
from tasktrack.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class TaskService:

    async def list_tasks(self, gateway: PersistenceGateway, user_id: int) -> List[TaskResponse]:
        """All tasks owned by `user_id`, in store order. Unknown user → 404."""
        user = await gateway.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        tasks = await gateway.list_tasks_for_user(user_id)
        return [TaskResponse.model_validate(task) for task in tasks]

    async def create_task(
        self, gateway: PersistenceGateway, user_id: int, task_name: Any
    ) -> TaskMutationResponse:
        """
        Create a task for an existing user.

        Raises:
            ValidationError: task_name missing, empty or not a string
            NotFoundError:   no user with `user_id`
        """
        if not isinstance(task_name, str) or not task_name:
            raise ValidationError(
                message="Field 'task_name' must be a non-empty string",
                field="task_name",
            )

        user = await gateway.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        task = await gateway.create_task(user_id=user_id, task_name=task_name)
        return TaskMutationResponse(
            message="Task created successfully",
            task=TaskResponse.model_validate(task),
        )

    async def delete_task(self, gateway: PersistenceGateway, task_id: int) -> MessageResponse:
        task = await gateway.find_task(task_id)
        if task is None:
            raise NotFoundError(resource="task", resource_id=task_id)

        # Lost a race with another delete
        if not await gateway.delete_task(task_id):
            raise NotFoundError(resource="task", resource_id=task_id)

        return MessageResponse(message="Task deleted successfully")

    async def update_task_state(
        self, gateway: PersistenceGateway, task_id: int, state: Any
    ) -> TaskMutationResponse:
        """Set the completion flag; no transition rules apply."""
        if state is None:
            raise ValidationError(
                message="Field 'state' is required (true or false)",
                field="state",
            )

        task = await gateway.find_task(task_id)
        if task is None:
            raise NotFoundError(resource="task", resource_id=task_id)

        updated = await gateway.update_task_state(task_id, state)
        if updated is None:
            raise NotFoundError(resource="task", resource_id=task_id)

        logger.info("Task %s state set to %s", task_id, state)
        return TaskMutationResponse(
            message="Task state updated successfully",
            task=TaskResponse.model_validate(updated),
        )


task_service = TaskService()
