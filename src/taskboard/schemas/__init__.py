"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import (
    DashboardResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    TokenPayload,
)
from .system import ErrorResponse, HealthCheckResponse, MessageResponse, RootResponse
from .task import OwnedTaskRead, TaskCreate, TaskRead, TaskUpdate

__all__ = [
    "DashboardResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "OwnedTaskRead",
    "RegisterRequest",
    "RootResponse",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "TokenPayload",
]
