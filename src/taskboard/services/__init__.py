"""Domain service layer package."""

from __future__ import annotations

from .auth import AuthService
from .tasks import OwnedTask, TaskService

__all__ = ["AuthService", "OwnedTask", "TaskService"]
