"""MongoDB client lifecycle and Beanie initialisation."""

from __future__ import annotations

import asyncio
import logging

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING

from ..core.config import Settings
from ..models import User

logger = logging.getLogger(__name__)

USERS_EMAIL_INDEX = "users_email_unique"
USERS_TASK_ID_INDEX = "users_tasks_task_id"

_client: AsyncIOMotorClient | None = None
_initialized = False
_lock = asyncio.Lock()


def set_client(client: AsyncIOMotorClient | None) -> None:
    """Inject a custom motor client instance (primarily for tests)."""

    global _client, _initialized
    _client = client
    _initialized = False


async def _ensure_indexes() -> None:
    collection = get_users_collection()
    await collection.create_index([("email", ASCENDING)], name=USERS_EMAIL_INDEX, unique=True)
    await collection.create_index([("tasks.task_id", ASCENDING)], name=USERS_TASK_ID_INDEX)


async def init_store(
    settings: Settings,
    *,
    client: AsyncIOMotorClient | None = None,
    force: bool = False,
) -> None:
    """Connect to MongoDB, register the document models and ensure indexes."""

    global _client, _initialized

    async with _lock:
        if client is not None:
            set_client(client)

        if _initialized and not force:
            return

        if _client is None:
            _client = AsyncIOMotorClient(settings.mongo_url, tz_aware=True, uuidRepresentation="standard")

        await init_beanie(database=_client[settings.mongo_database], document_models=[User])
        await _ensure_indexes()
        _initialized = True
        logger.info("Credential store initialised", extra={"database": settings.mongo_database})


async def close_store() -> None:
    """Dispose the MongoDB client."""

    global _client, _initialized
    client = _client
    if client is not None:
        client.close()
    _client = None
    _initialized = False


def store_ready() -> bool:
    """Return whether the document models have been bound to a database."""

    return _initialized


def get_users_collection() -> AsyncIOMotorCollection:
    """Return the MongoDB collection backing ``User`` documents."""

    return User.get_motor_collection()


__all__ = [
    "USERS_EMAIL_INDEX",
    "USERS_TASK_ID_INDEX",
    "close_store",
    "get_users_collection",
    "init_store",
    "set_client",
    "store_ready",
]
