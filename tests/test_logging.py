from __future__ import annotations

import io
import json
import logging

import pytest
from httpx import AsyncClient

from taskboard.core.config import Settings
from taskboard.core.context import bind_request_id, reset_request_id
from taskboard.core.logging import RequestContextFilter, configure_logging
from taskboard.core.security import TokenIssuer

from .conftest import UserFactory


def _capture(settings: Settings, emit) -> dict:
    configure_logging(settings)

    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"

    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)
    try:
        emit()
    finally:
        handler.flush()
        handler.setStream(previous_stream)

    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    return json.loads(log_lines[-1])


def test_configure_logging_outputs_json_with_request_id() -> None:
    settings = Settings(environment="test", log_level="INFO")

    def emit() -> None:
        token = bind_request_id("req-json-1")
        try:
            logging.getLogger("taskboard.tests.logging").info(
                "structured log event",
                extra={"component": "unit-test", "task_id": "abc"},
            )
        finally:
            reset_request_id(token)

    payload = _capture(settings, emit)

    assert payload["message"] == "structured log event"
    assert payload["request_id"] == "req-json-1"
    assert payload["environment"] == settings.environment
    assert payload["level"] == "INFO"
    assert payload["component"] == "unit-test"
    assert payload["task_id"] == "abc"
    assert payload["service"] == settings.project_name


def test_log_records_outside_requests_use_placeholder_id() -> None:
    settings = Settings(environment="ci")

    def emit() -> None:
        logging.getLogger("taskboard.tests.logging").warning("background event", extra={"payload": object()})

    payload = _capture(settings, emit)

    assert payload["request_id"] == "-"
    assert payload["user_id"] == "-"
    assert payload["level"] == "WARNING"
    assert payload["payload"].startswith("<object object")


def test_exceptions_are_serialised() -> None:
    settings = Settings(environment="ci")

    def emit() -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("taskboard.tests.logging").exception("failed")

    payload = _capture(settings, emit)

    assert payload["message"] == "failed"
    assert "RuntimeError: boom" in payload["exception"]


class _RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.INFO)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.mark.asyncio
async def test_authenticated_request_logs_carry_user_id(
    client: AsyncClient,
    issuer: TokenIssuer,
    registered_user: UserFactory,
) -> None:
    user = await registered_user()
    user_id = issuer.verify(user.token).sub

    logger = logging.getLogger("taskboard")
    handler = _RecordingHandler()
    handler.addFilter(RequestContextFilter())
    logger.addHandler(handler)
    original_level = logger.level
    logger.setLevel(logging.INFO)
    try:
        response = await client.post(
            "/tasks",
            json={"name": "Logged", "description": "", "due_date": "2030-01-01T00:00:00Z"},
            headers={**user.headers, "X-Request-ID": "req-task-1"},
        )
    finally:
        logger.removeHandler(handler)
        logger.setLevel(original_level)
        handler.close()

    assert response.status_code == 201
    created = [record for record in handler.records if record.getMessage() == "Task created"]
    assert created
    assert created[0].user_id == user_id
    assert created[0].request_id == "req-task-1"

    access = [record for record in handler.records if record.name == "taskboard.access"]
    assert access
    assert access[-1].status_code == 201
    assert access[-1].path == "/tasks"
    assert access[-1].request_id == "req-task-1"
    assert access[-1].user_id == user_id


@pytest.mark.asyncio
async def test_session_logs_keep_explicit_user_id(
    client: AsyncClient,
    issuer: TokenIssuer,
    registered_user: UserFactory,
) -> None:
    user = await registered_user(login=False)

    logger = logging.getLogger("taskboard")
    handler = _RecordingHandler()
    handler.addFilter(RequestContextFilter())
    logger.addHandler(handler)
    original_level = logger.level
    logger.setLevel(logging.INFO)
    try:
        response = await client.post("/login", json={"email": user.email, "password": user.password})
    finally:
        logger.removeHandler(handler)
        logger.setLevel(original_level)
        handler.close()
        client.cookies.clear()

    assert response.status_code == 200
    user_id = issuer.verify(response.cookies["token"]).sub
    logged_in = [record for record in handler.records if record.getMessage() == "User logged in"]
    assert logged_in
    assert logged_in[0].user_id == user_id
    assert logged_in[0].request_id == response.headers["X-Request-ID"]
