"""Service layer encapsulating task operations on embedded task collections."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.security import Identity
from ..errors import ForbiddenError, OwnerNotFoundError, TaskNotFoundError
from ..models import Task, TaskPriority, TaskStatus, normalise_timestamp
from ..repositories import UserRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OwnedTask:
    """A task paired with the username of the user that owns it."""

    username: str
    task: Task


class TaskService:
    """High-level business orchestration for tasks owned by users."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def create_task(
        self,
        owner_id: str,
        *,
        name: str,
        description: str,
        due_date: datetime,
        priority: TaskPriority = TaskPriority.LOW,
        status: TaskStatus | None = None,
    ) -> Task:
        """Create a task and append it to the owner's collection."""
        task = Task(
            name=name,
            description=description,
            priority=priority,
            due_date=due_date,
            status=status or TaskStatus.PENDING,
        )
        if not await self._repository.push_task(owner_id, task):
            raise OwnerNotFoundError()
        logger.info("Task created", extra={"task_id": task.task_id, "owner_id": owner_id})
        return task

    async def list_own(self, owner_id: str) -> list[Task]:
        """Return the owner's tasks in storage order."""
        owner = await self._repository.get(owner_id)
        if owner is None:
            raise OwnerNotFoundError()
        return list(owner.tasks)

    async def list_all(self) -> list[OwnedTask]:
        """Return every task across all users, annotated with the owner's username."""
        return [
            OwnedTask(username=user.username, task=task)
            for user in await self._repository.list()
            for task in user.tasks
        ]

    async def update_task(
        self,
        owner_id: str,
        task_id: str,
        *,
        name: str,
        description: str,
        due_date: datetime,
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        """Overwrite a task belonging to ``owner_id``."""
        fields: dict[str, Any] = {
            "name": name,
            "description": description,
            "due_date": normalise_timestamp(due_date),
        }
        if priority is not None:
            fields["priority"] = priority.value
        if status is not None:
            fields["status"] = status.value

        task = await self._repository.set_task_fields(owner_id, task_id, fields)
        if task is None:
            raise TaskNotFoundError()
        logger.info(
            "Task updated",
            extra={"task_id": task_id, "owner_id": owner_id, "fields": sorted(fields)},
        )
        return task

    async def delete_task(self, task_id: str, *, requester: Identity) -> None:
        """Delete a task after resolving its owner and authorising the requester."""
        owner = await self._repository.find_owner_of_task(task_id)
        if owner is None:
            raise TaskNotFoundError()

        owner_id = str(owner.id)
        if owner_id != requester.user_id and not requester.is_admin:
            logger.warning(
                "Rejected delete of another user's task",
                extra={"task_id": task_id, "requester_id": requester.user_id},
            )
            raise ForbiddenError("You are not permitted to delete this task.")

        if not await self._repository.pull_task(owner_id, task_id):
            raise TaskNotFoundError()
        logger.info(
            "Task deleted",
            extra={"task_id": task_id, "owner_id": owner_id, "requester_id": requester.user_id},
        )


__all__ = ["OwnedTask", "TaskService"]
