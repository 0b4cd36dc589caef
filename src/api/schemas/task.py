"""Pydantic schemas for Task API."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from domain.entities.task import TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a Task."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    parent_task_id: UUID | None = Field(
        None,
        validation_alias=AliasChoices("parentTaskId", "parent_task_id"),
    )


class TaskUpdate(BaseModel):
    """Schema for updating a Task (all fields optional).

    Empty strings are accepted and leave the stored value unchanged.
    """

    title: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: TaskStatus | None = None


class TaskResponse(BaseModel):
    """Schema for Task response, with nested subtasks."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Write release notes",
                "description": "Cover the API changes",
                "status": "pending",
                "user_id": "9b2e4567-e89b-12d3-a456-426614174000",
                "parent_task_id": None,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
                "subtasks": [],
            }
        },
    )

    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    user_id: UUID
    parent_task_id: UUID | None
    created_at: datetime
    updated_at: datetime
    subtasks: list["TaskResponse"] = []


TaskResponse.model_rebuild()
