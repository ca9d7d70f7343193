"""Security helpers for password hashing and JWT identity claims."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from ..errors import InvalidTokenError, TokenExpiredError
from ..models import UserRole
from ..schemas.auth import TokenPayload
from .config import Settings

DEFAULT_BCRYPT_ROUNDS = 10


def build_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """Return a bcrypt ``CryptContext`` using the given cost factor."""

    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


pwd_context = build_password_context()


def get_password_hash(password: str, *, context: CryptContext = pwd_context) -> str:
    """Return a hashed representation of ``password``."""

    return context.hash(password)


def verify_password(
    plain_password: str,
    hashed_password: str,
    *,
    context: CryptContext = pwd_context,
) -> bool:
    """Verify a plain password against its hashed counterpart."""

    return context.verify(plain_password, hashed_password)


@dataclass(frozen=True, slots=True)
class Identity:
    """The verified caller attached to a request by the auth gate."""

    user_id: str
    role: UserRole
    username: str

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> "Identity":
        return cls(user_id=payload.sub, role=payload.role, username=payload.username)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass(slots=True)
class GeneratedToken:
    """A signed identity claim together with its absolute expiry."""

    token: str
    expires_at: datetime


class TokenIssuer:
    """Create and validate signed, time-limited identity claims.

    The signing secret is fixed for the lifetime of the issuer; there is no
    refresh or revocation, so a token stays valid until ``exp`` passes.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=1),
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(minutes=settings.access_token_expire_minutes),
        )

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(
        self,
        *,
        user_id: str,
        role: UserRole,
        username: str,
        issued_at: datetime | None = None,
    ) -> GeneratedToken:
        """Sign a claim for ``user_id`` expiring one lifetime after ``issued_at``."""

        now = issued_at or datetime.now(timezone.utc)
        expires_at = now + self._lifetime
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "role": UserRole(role).value,
            "username": username,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return GeneratedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> TokenPayload:
        """Decode ``token``, raising ``TokenExpiredError`` or ``InvalidTokenError``."""

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except JWTError as exc:
            raise InvalidTokenError() from exc

        try:
            return TokenPayload.model_validate(claims)
        except ValidationError as exc:
            raise InvalidTokenError() from exc


__all__ = [
    "DEFAULT_BCRYPT_ROUNDS",
    "GeneratedToken",
    "Identity",
    "TokenIssuer",
    "build_password_context",
    "get_password_hash",
    "pwd_context",
    "verify_password",
]
