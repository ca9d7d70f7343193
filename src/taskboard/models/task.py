"""Task models embedded inside user documents."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from .common import normalise_timestamp, utcnow


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, Enum):
    """Enumeration of possible task states."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


def generate_task_id() -> str:
    """Return a fresh, globally unique task identifier."""

    return str(ObjectId())


class Task(BaseModel):
    """A work item owned by exactly one user and stored inside that user's document."""

    task_id: str = Field(default_factory=generate_task_id)
    name: str = Field(min_length=1)
    description: str
    priority: TaskPriority = TaskPriority.LOW
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("due_date", "created_at")
    @classmethod
    def _normalise_timestamps(cls, value: datetime) -> datetime:
        return normalise_timestamp(value)

    def to_document(self) -> dict[str, Any]:
        """Return the BSON-ready representation stored in the ``tasks`` array."""

        document = self.model_dump()
        document["priority"] = self.priority.value
        document["status"] = self.status.value
        return document


__all__ = ["Task", "TaskPriority", "TaskStatus", "generate_task_id"]
