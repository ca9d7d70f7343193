"""Authentication service encapsulating registration and login flows."""

from __future__ import annotations

import logging

from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError
from starlette.concurrency import run_in_threadpool

from ..core.security import (
    GeneratedToken,
    TokenIssuer,
    get_password_hash,
    pwd_context,
    verify_password,
)
from ..errors import (
    EmailInUseError,
    InvalidPasswordError,
    RoleRequiredError,
    ServerError,
    UserNotFoundError,
)
from ..models import User, UserRole
from ..repositories import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Register accounts and exchange credentials for signed identity claims."""

    def __init__(
        self,
        repository: UserRepository,
        issuer: TokenIssuer,
        *,
        password_context: CryptContext = pwd_context,
    ) -> None:
        self._repository = repository
        self._issuer = issuer
        self._password_context = password_context

    async def register_user(
        self,
        *,
        username: str,
        email: str,
        password: str,
        role: UserRole | None,
    ) -> User:
        if role is None:
            raise RoleRequiredError()
        if await self._repository.get_by_email(email) is not None:
            raise EmailInUseError()

        password_hash = await run_in_threadpool(
            get_password_hash,
            password,
            context=self._password_context,
        )
        user = User(username=username, email=email, password_hash=password_hash, role=role)
        try:
            await self._repository.add(user)
        except DuplicateKeyError as exc:
            raise EmailInUseError() from exc

        logger.info("User registered", extra={"user_id": str(user.id), "role": role.value})
        return user

    async def authenticate_user(self, *, email: str, password: str) -> User:
        user = await self._repository.get_by_email(email)
        if user is None:
            raise UserNotFoundError()
        valid = await run_in_threadpool(
            verify_password,
            password,
            user.password_hash,
            context=self._password_context,
        )
        if not valid:
            logger.info("Rejected login with invalid password", extra={"user_id": str(user.id)})
            raise InvalidPasswordError()
        return user

    def issue_token(self, user: User) -> GeneratedToken:
        if user.id is None:
            raise ServerError("User must be persisted before issuing tokens.")
        return self._issuer.issue(user_id=str(user.id), role=user.role, username=user.username)

    async def login(self, *, email: str, password: str) -> tuple[User, GeneratedToken]:
        user = await self.authenticate_user(email=email, password=password)
        token = self.issue_token(user)
        logger.info("User logged in", extra={"user_id": str(user.id), "role": user.role.value})
        return user, token


__all__ = ["AuthService"]
