"""Per-request correlation state shared with the logging layer."""

from __future__ import annotations

from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"
UNSET = "-"

_request_id: ContextVar[str] = ContextVar("taskboard_request_id", default=UNSET)
_user_id: ContextVar[str] = ContextVar("taskboard_user_id", default=UNSET)


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


def get_user_id() -> str:
    """Return the authenticated user for the current request, or ``UNSET``."""

    return _user_id.get()


def bind_user_id(user_id: str) -> Token[str]:
    """Record the verified caller so later log lines in the request carry it."""

    return _user_id.set(user_id)


__all__ = [
    "REQUEST_ID_HEADER",
    "UNSET",
    "bind_request_id",
    "bind_user_id",
    "get_request_id",
    "get_user_id",
    "reset_request_id",
]
