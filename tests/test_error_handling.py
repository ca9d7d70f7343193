from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

from taskboard.core.logging import RequestContextFilter
from taskboard.errors import ApplicationError, NotFoundError

pytestmark = pytest.mark.asyncio


async def test_application_error_response_schema(app: FastAPI, client: AsyncClient) -> None:
    @app.get("/error/application")
    async def trigger_application_error() -> None:  # pragma: no cover - defined in test
        raise ApplicationError("Example failure", status_code=status.HTTP_418_IM_A_TEAPOT)

    response = await client.get("/error/application")

    assert response.status_code == status.HTTP_418_IM_A_TEAPOT
    assert response.json() == {"message": "Example failure"}
    assert response.headers["X-Request-ID"]


async def test_default_messages_are_used(app: FastAPI, client: AsyncClient) -> None:
    @app.get("/error/not-found")
    async def trigger_not_found() -> None:  # pragma: no cover - defined in test
        raise NotFoundError()

    response = await client.get("/error/not-found")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Resource not found."}


async def test_unknown_route_uses_message_envelope(client: AsyncClient) -> None:
    response = await client.get("/does-not-exist")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Not Found"}
    assert response.headers["X-Request-ID"]


async def test_incoming_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/dashboard", headers={"X-Request-ID": "req-abc"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.headers["X-Request-ID"] == "req-abc"


async def test_database_error_is_reported_generically(app: FastAPI, client: AsyncClient) -> None:
    @app.get("/error/database")
    async def trigger_database_error() -> None:  # pragma: no cover - defined in test
        raise ServerSelectionTimeoutError("mongo-0:27017 unreachable")

    response = await client.get("/error/database")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Database operation failed."}
    assert "mongo-0" not in response.text


async def test_unhandled_error_hides_internal_details(app: FastAPI) -> None:
    @app.get("/error/unhandled")
    async def trigger_unhandled_error() -> None:  # pragma: no cover - defined in test
        raise RuntimeError("Sensitive detail")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/error/unhandled")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Internal server error."}
    assert "Sensitive" not in response.text


class _InMemoryHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.INFO)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


async def test_request_id_attached_to_logs(app: FastAPI, client: AsyncClient) -> None:
    logger = logging.getLogger("tests.error_handling")
    handler = _InMemoryHandler()
    handler.addFilter(RequestContextFilter())
    logger.addHandler(handler)
    original_level = logger.level
    logger.setLevel(logging.INFO)

    @app.get("/log")
    async def emit_log() -> dict[str, str]:  # pragma: no cover - defined in test
        logger.info("Log entry")
        return {"status": "ok"}

    try:
        response = await client.get("/log")
    finally:
        logger.removeHandler(handler)
        logger.setLevel(original_level)
        handler.close()

    request_id = response.headers["X-Request-ID"]
    matching = [record for record in handler.records if record.getMessage() == "Log entry"]
    assert matching
    assert getattr(matching[0], "request_id", None) == request_id
