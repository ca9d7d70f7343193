"""Session endpoints: register, login and logout."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from ...deps import AuthServiceDependency, SettingsDependency
from ...schemas import LoginRequest, LoginResponse, MessageResponse, RegisterRequest

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Register a new user account",
)
async def register(payload: RegisterRequest, service: AuthServiceDependency) -> MessageResponse:
    await service.register_user(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    return MessageResponse(message="User registered successfully!")


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate using email and password",
)
async def login(
    payload: LoginRequest,
    response: Response,
    service: AuthServiceDependency,
    settings: SettingsDependency,
) -> LoginResponse:
    """Issue a signed token and hand it back in an HTTP-only cookie."""
    user, token = await service.login(email=payload.email, password=payload.password)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token.token,
        max_age=settings.access_token_lifetime_seconds,
        expires=token.expires_at,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return LoginResponse(role=user.role)


@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Clear the authentication cookie",
)
async def logout(response: Response, settings: SettingsDependency) -> MessageResponse:
    # Tokens are not revoked server-side; a copied token stays valid until it expires.
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return MessageResponse(message="Logged out successfully!")
