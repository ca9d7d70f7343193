from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from itertools import count

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from taskboard.core.config import Settings, get_settings
from taskboard.core.security import TokenIssuer
from taskboard.db import close_store, init_store
from taskboard.main import create_app
from taskboard.models import UserRole


@dataclass(slots=True)
class RegisteredUser:
    username: str
    email: str
    password: str
    role: UserRole
    token: str | None

    @property
    def headers(self) -> dict[str, str]:
        if not self.token:
            raise RuntimeError("User has not been authenticated.")
        return {"Authorization": f"Bearer {self.token}"}


UserFactory = Callable[..., Awaitable[RegisteredUser]]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="test",
        mongo_database="taskboard_test",
        jwt_secret_key="test-secret",
        password_hash_rounds=4,
    )


@pytest.fixture()
def issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


@pytest_asyncio.fixture()
async def store(settings: Settings) -> AsyncIterator[None]:
    await init_store(settings, client=AsyncMongoMockClient(), force=True)
    try:
        yield
    finally:
        await close_store()


@pytest_asyncio.fixture()
async def app(settings: Settings, store: None) -> AsyncIterator[FastAPI]:
    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture()
async def registered_user(client: AsyncClient) -> UserFactory:
    """Register (and by default log in) users through the public endpoints.

    The login cookie is dropped from the client jar afterwards so each test
    picks its caller explicitly through ``RegisteredUser.headers``.
    """

    counter = count()

    async def _factory(
        *,
        username: str | None = None,
        email: str | None = None,
        password: str = "StrongPass123!",
        role: UserRole = UserRole.USER,
        login: bool = True,
    ) -> RegisteredUser:
        index = next(counter)
        actual_username = username or f"user{index}"
        actual_email = email or f"user-{index}@example.com"
        response = await client.post(
            "/register",
            json={
                "username": actual_username,
                "email": actual_email,
                "password": password,
                "role": role.value,
            },
        )
        assert response.status_code == 200, response.text

        token: str | None = None
        if login:
            login_response = await client.post(
                "/login",
                json={"email": actual_email, "password": password},
            )
            assert login_response.status_code == 200, login_response.text
            token = login_response.cookies.get("token")
            assert token
            client.cookies.clear()

        return RegisteredUser(
            username=actual_username,
            email=actual_email,
            password=password,
            role=role,
            token=token,
        )

    return _factory
