"""
TaskTrack Backend - Shared Response Schemas
===========================================

What:  Response models used by more than one router: plain messages, the
       error envelope and the health payload.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Body of responses that only confirm an action (register, delete)."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Uniform error body produced by the global exception handlers.

    Example:
        {
            "error": "validation_error",
            "message": "Field 'task_name' is required",
            "details": {"field": "task_name"},
            "request_id": "3f9a1c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
