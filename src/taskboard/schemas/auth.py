"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models import UserRole


class RegisterRequest(BaseModel):
    """Incoming payload for registering a new user.

    ``role`` is optional at the schema level so that its absence surfaces as
    the dedicated "Role is required." error rather than a generic one.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "jane",
                "email": "jane@example.com",
                "password": "StrongPass123!",
                "role": UserRole.USER.value,
            }
        }
    )

    username: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)
    role: UserRole | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _blank_role_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    message: str = "Login successful!"
    role: UserRole


class DashboardResponse(BaseModel):
    message: str
    role: UserRole


class TokenPayload(BaseModel):
    """Validated identity claim carried by an access token."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    role: UserRole
    username: str
    iat: datetime
    exp: datetime


__all__ = [
    "DashboardResponse",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "TokenPayload",
]
