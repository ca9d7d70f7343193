"""Database related helpers."""

from __future__ import annotations

from .connection import (
    USERS_EMAIL_INDEX,
    USERS_TASK_ID_INDEX,
    close_store,
    get_users_collection,
    init_store,
    set_client,
    store_ready,
)

__all__ = [
    "USERS_EMAIL_INDEX",
    "USERS_TASK_ID_INDEX",
    "close_store",
    "get_users_collection",
    "init_store",
    "set_client",
    "store_ready",
]
