"""
TaskTrack Backend - Task Request/Response Schemas
=================================================

What:  API contract for the /tasks routes.
How:   Request bodies use strict types, so a number sent as `task_name` or a
       string sent as `state` is rejected with 400 before any store call.
"""

from pydantic import BaseModel, Field, StrictBool, StrictStr


class TaskCreateRequest(BaseModel):
    """Body of POST /tasks/{user_id}."""
    task_name: StrictStr = Field(
        min_length=1,
        max_length=255,
        description="Task title (non-empty string)",
    )


class TaskStateUpdateRequest(BaseModel):
    """Body of PATCH /tasks/{task_id}. Any value may follow any other."""
    state: StrictBool = Field(description="Completion flag (true or false)")


class TaskResponse(BaseModel):
    id: int = Field(description="Store-assigned task identifier")
    task_name: str = Field(description="Task title")
    state: bool = Field(description="Completion flag")
    user_id: int = Field(description="Owning user identifier")

    model_config = {"from_attributes": True}


class TaskMutationResponse(BaseModel):
    """Returned by create and state-update: confirmation plus the task."""
    message: str = Field(description="Human-readable confirmation")
    task: TaskResponse = Field(description="The task as stored after the operation")
