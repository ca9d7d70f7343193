"""Reusable FastAPI dependencies, including the authentication gate."""

from __future__ import annotations

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from .core.config import Settings, get_settings
from .core.context import bind_user_id
from .core.security import Identity, TokenIssuer, build_password_context
from .errors import ForbiddenError, InvalidTokenError, UnauthenticatedError
from .repositories import UserRepository
from .services import AuthService, TaskService

logger = logging.getLogger(__name__)

SettingsDependency = Annotated[Settings, Depends(get_settings)]

_bearer_scheme = HTTPBearer(auto_error=False)
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)]


@lru_cache()
def _token_issuer(secret: str, algorithm: str, lifetime_minutes: int) -> TokenIssuer:
    return TokenIssuer(secret=secret, algorithm=algorithm, lifetime=timedelta(minutes=lifetime_minutes))


def get_token_issuer(settings: SettingsDependency) -> TokenIssuer:
    return _token_issuer(
        settings.jwt_secret_key,
        settings.jwt_algorithm,
        settings.access_token_expire_minutes,
    )


@lru_cache()
def _password_context(rounds: int) -> CryptContext:
    return build_password_context(rounds)


def get_password_context(settings: SettingsDependency) -> CryptContext:
    return _password_context(settings.password_hash_rounds)


def get_user_repository() -> UserRepository:
    return UserRepository()


TokenIssuerDependency = Annotated[TokenIssuer, Depends(get_token_issuer)]
UserRepositoryDependency = Annotated[UserRepository, Depends(get_user_repository)]


def get_auth_service(
    repository: UserRepositoryDependency,
    issuer: TokenIssuerDependency,
    password_context: Annotated[CryptContext, Depends(get_password_context)],
) -> AuthService:
    return AuthService(repository, issuer, password_context=password_context)


def get_task_service(repository: UserRepositoryDependency) -> TaskService:
    return TaskService(repository)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]


def _extract_token(
    request: Request,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name) or None


async def get_current_identity(
    request: Request,
    settings: SettingsDependency,
    issuer: TokenIssuerDependency,
    credentials: BearerCredentials,
) -> Identity:
    """Verify the caller's token and return the identity it asserts.

    The bearer header wins over the cookie when both are present. The store is
    never consulted here; validity depends only on signature and expiry.
    """

    token = _extract_token(request, settings, credentials)
    if token is None:
        logger.info("Rejected request without credentials", extra={"path": request.url.path})
        raise UnauthenticatedError()

    try:
        payload = issuer.verify(token)
    except InvalidTokenError as exc:
        logger.info(
            "Rejected request with unusable token",
            extra={"path": request.url.path, "reason": exc.message},
        )
        raise

    identity = Identity.from_payload(payload)
    request.state.identity = identity
    bind_user_id(identity.user_id)
    logger.debug("Verified identity", extra={"role": identity.role.value})
    return identity


CurrentIdentityDependency = Annotated[Identity, Depends(get_current_identity)]


async def require_admin(identity: CurrentIdentityDependency) -> Identity:
    if not identity.is_admin:
        raise ForbiddenError()
    return identity



async def authorize_task_feed(
    request: Request,
    settings: SettingsDependency,
    issuer: TokenIssuerDependency,
    credentials: BearerCredentials,
) -> Identity | None:
    """Gate the cross-user task feed: public by default, admin-only otherwise."""

    if settings.public_task_feed:
        return None
    identity = await get_current_identity(request, settings, issuer, credentials)
    return await require_admin(identity)


TaskFeedAccessDependency = Annotated[Identity | None, Depends(authorize_task_feed)]


__all__ = [
    "AuthServiceDependency",
    "CurrentIdentityDependency",
    "SettingsDependency",
    "TaskFeedAccessDependency",
    "TaskServiceDependency",
    "TokenIssuerDependency",
    "UserRepositoryDependency",
    "get_auth_service",
    "get_current_identity",
    "get_password_context",
    "get_task_service",
    "get_token_issuer",
    "get_user_repository",
]
