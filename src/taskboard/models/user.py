"""User documents persisted with Beanie."""

from __future__ import annotations

from enum import Enum

from beanie import Document
from pydantic import Field

from .task import Task


class UserRole(str, Enum):
    """Roles supported by the authentication system."""

    USER = "user"
    ADMIN = "admin"


class User(Document):
    """A registered account together with its embedded task collection."""

    username: str = Field(min_length=1)
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    tasks: list[Task] = Field(default_factory=list)

    class Settings:
        name = "users"


__all__ = ["User", "UserRole"]
