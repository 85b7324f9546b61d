"""
TaskTrack Backend - Account Request/Response Schemas
====================================================

What:  API contract for /register and /login.

The password is accepted on input only. `LoginResponse` has no password
field, so it can never be serialized back to a client.
"""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, StrictStr, field_validator

from tasktrack.schemas.task import TaskResponse


class RegisterRequest(BaseModel):
    user_name: StrictStr = Field(min_length=1, max_length=100, description="Display name")
    email: StrictStr = Field(min_length=1, max_length=255, description="Unique login email")
    password: StrictStr = Field(min_length=1, max_length=255, description="Account secret")


class LoginRequest(BaseModel):
    email: StrictStr = Field(min_length=1, description="Account email")
    password: StrictStr = Field(min_length=1, description="Account secret")


class LoginResponse(BaseModel):
    """
    What:  User summary returned by a successful login.
    Who:   The frontend keeps `id` to address /tasks/{user_id} afterwards.
    """
    id: int = Field(description="User identifier")
    user_name: str = Field(description="Display name")
    email: str = Field(description="Account email")
    created_in: datetime = Field(description="Account creation time (UTC)")
    tasks: List[TaskResponse] = Field(default_factory=list, description="All tasks of the user")

    model_config = {"from_attributes": True}

    @field_validator("created_in")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
