"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models import TaskPriority, TaskStatus

TASK_READ_EXAMPLE = {
    "task_id": "65f1c0ffee0ddba11ca7f00d",
    "name": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "priority": TaskPriority.MEDIUM.value,
    "due_date": "2024-04-01T17:00:00Z",
    "status": TaskStatus.PENDING.value,
    "created_at": "2024-03-13T09:30:00Z",
}


class TaskCreate(BaseModel):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "priority": TaskPriority.MEDIUM.value,
                "due_date": "2024-04-01T17:00:00Z",
            }
        }
    )

    name: str = Field(min_length=1, max_length=255)
    description: str
    priority: TaskPriority = Field(default=TaskPriority.LOW)
    due_date: datetime
    status: TaskStatus | None = Field(default=None)


class TaskUpdate(BaseModel):
    """Replacement values for an existing task.

    Omitted ``priority`` or ``status`` keep the stored value.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Update API documentation",
                "description": "Refresh the endpoint reference.",
                "due_date": "2024-04-08T17:00:00Z",
                "status": TaskStatus.IN_PROGRESS.value,
            }
        }
    )

    name: str = Field(min_length=1, max_length=255)
    description: str
    priority: TaskPriority | None = Field(default=None)
    due_date: datetime
    status: TaskStatus | None = Field(default=None)


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    task_id: str
    name: str
    description: str
    priority: TaskPriority
    due_date: datetime
    status: TaskStatus
    created_at: datetime


class OwnedTaskRead(TaskRead):
    """A task annotated with its owner's username."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": {**TASK_READ_EXAMPLE, "username": "jane"}},
    )

    username: str


__all__ = ["OwnedTaskRead", "TaskCreate", "TaskRead", "TaskUpdate"]
