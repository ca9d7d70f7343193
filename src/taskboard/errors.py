"""Application-level exception handling helpers."""

from __future__ import annotations

import logging
from contextvars import Token
from http import HTTPStatus
from typing import Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    default_message = "Application error."
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApplicationError):
    """Business validation failure for client supplied input."""

    default_message = "Validation failed."
    status_code = status.HTTP_400_BAD_REQUEST


class RoleRequiredError(ValidationError):
    default_message = "Role is required."


class EmailInUseError(ValidationError):
    default_message = "Email already in use."


class UserNotFoundError(ValidationError):
    default_message = "User not found."


class InvalidPasswordError(ValidationError):
    default_message = "Invalid password."


class NotFoundError(ApplicationError):
    """Error representing missing resources."""

    default_message = "Resource not found."
    status_code = status.HTTP_404_NOT_FOUND


class OwnerNotFoundError(NotFoundError):
    default_message = "User not found."


class TaskNotFoundError(NotFoundError):
    default_message = "Task not found."


class AuthenticationError(ApplicationError):
    """The request does not carry a usable identity claim."""

    default_message = "Access denied."
    status_code = status.HTTP_403_FORBIDDEN


class UnauthenticatedError(AuthenticationError):
    default_message = "Access denied."


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid token."


class TokenExpiredError(InvalidTokenError):
    default_message = "Token has expired."


class ForbiddenError(ApplicationError):
    """The identity is valid but lacks permission for the operation."""

    default_message = "Not enough permissions."
    status_code = status.HTTP_403_FORBIDDEN


class ServerError(ApplicationError):
    """Error representing unexpected server failures."""

    default_message = "Internal server error."
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _bind_request_context(request: Request) -> Token[str] | None:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return None
    return bind_request_id(request_id)


def _reset_request_context(token: Token[str] | None) -> None:
    if token is not None:
        reset_request_id(token)


def _error_response(
    request: Request,
    *,
    status_code: int,
    message: str,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(message=message)
    response = JSONResponse(status_code=status_code, content=payload.model_dump())
    if headers:
        response.headers.update(headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _http_exception_message(status_code: int, detail: object) -> str:
    if isinstance(detail, str) and detail:
        return detail
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(
        request: Request,
        exc: ApplicationError,
    ) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "Application error encountered",
                extra={
                    "error": type(exc).__name__,
                    "status_code": exc.status_code,
                    "path": request.url.path,
                },
            )
            return _error_response(request, status_code=exc.status_code, message=exc.message)
        finally:
            _reset_request_context(token)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            logger.warning("Request validation failed", extra={"errors": exc.errors()})
            return _error_response(
                request,
                status_code=status.HTTP_400_BAD_REQUEST,
                message="Request validation failed.",
            )
        finally:
            _reset_request_context(token)

    @app.exception_handler(PyMongoError)
    async def _handle_database_error(
        request: Request,
        exc: PyMongoError,
    ) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            logger.error("Database operation failed.", exc_info=exc)
            return _error_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="Database operation failed.",
            )
        finally:
            _reset_request_context(token)

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "HTTP exception raised",
                extra={"status_code": exc.status_code, "path": request.url.path},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                message=_http_exception_message(exc.status_code, exc.detail),
                headers=exc.headers or None,
            )
        finally:
            _reset_request_context(token)

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            logger.exception("Unhandled application error.")
            return _error_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="Internal server error.",
            )
        finally:
            _reset_request_context(token)


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "EmailInUseError",
    "ForbiddenError",
    "InvalidPasswordError",
    "InvalidTokenError",
    "NotFoundError",
    "OwnerNotFoundError",
    "RoleRequiredError",
    "ServerError",
    "TaskNotFoundError",
    "TokenExpiredError",
    "UnauthenticatedError",
    "UserNotFoundError",
    "ValidationError",
    "register_exception_handlers",
]
