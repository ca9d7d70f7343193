"""Domain models exposed by the task board."""

from __future__ import annotations

from .common import normalise_timestamp, utcnow
from .task import Task, TaskPriority, TaskStatus, generate_task_id
from .user import User, UserRole

__all__ = [
    "Task",
    "TaskPriority",
    "TaskStatus",
    "User",
    "UserRole",
    "generate_task_id",
    "normalise_timestamp",
    "utcnow",
]
