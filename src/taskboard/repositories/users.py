"""Repository for user documents and their embedded tasks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from beanie import PydanticObjectId
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from ..db import get_users_collection
from ..models import Task, User


def _object_id(user_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(user_id):
        return None
    return ObjectId(user_id)


class UserRepository:
    """Encapsulate ``User`` persistence, including atomic task array updates.

    Every task mutation is a single-document update filtered on the owner so
    MongoDB's per-document atomicity is the only consistency guarantee needed.
    """

    def __init__(self, collection: AsyncIOMotorCollection | None = None) -> None:
        self._collection = collection

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self._collection is None:
            self._collection = get_users_collection()
        return self._collection

    async def get(self, user_id: str) -> User | None:
        """Retrieve a user by identifier, ``None`` for unknown or malformed ids."""
        if _object_id(user_id) is None:
            return None
        return await User.get(PydanticObjectId(user_id))

    async def get_by_email(self, email: str) -> User | None:
        return await User.find_one(User.email == email)

    async def list(self) -> list[User]:
        """Return all users in storage order."""
        return await User.find_all().to_list()

    async def add(self, user: User) -> User:
        await user.insert()
        return user

    async def find_owner_of_task(self, task_id: str) -> User | None:
        """Return the user whose task collection contains ``task_id``."""
        return await User.find_one({"tasks.task_id": task_id})

    async def push_task(self, user_id: str, task: Task) -> bool:
        """Append ``task`` to the owner's collection, ``False`` if the owner is missing."""
        object_id = _object_id(user_id)
        if object_id is None:
            return False
        document = await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$push": {"tasks": task.to_document()}},
            projection={"_id": 1},
        )
        return document is not None

    async def set_task_fields(
        self,
        user_id: str,
        task_id: str,
        fields: Mapping[str, Any],
    ) -> Task | None:
        """Overwrite ``fields`` on one of the owner's tasks and return the result."""
        object_id = _object_id(user_id)
        if object_id is None:
            return None
        document = await self.collection.find_one_and_update(
            {"_id": object_id, "tasks.task_id": task_id},
            {"$set": {f"tasks.$.{key}": value for key, value in fields.items()}},
            projection={"tasks": 1},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            return None
        for item in document.get("tasks", []):
            if item.get("task_id") == task_id:
                return Task.model_validate(item)
        return None

    async def pull_task(self, user_id: str, task_id: str) -> bool:
        """Remove ``task_id`` from the owner's collection, ``True`` iff it was removed."""
        object_id = _object_id(user_id)
        if object_id is None:
            return False
        result = await self.collection.update_one(
            {"_id": object_id, "tasks.task_id": task_id},
            {"$pull": {"tasks": {"task_id": task_id}}},
        )
        return result.modified_count == 1
