from __future__ import annotations

import pytest
from httpx import AsyncClient

from taskboard import __version__
from taskboard.db import close_store

pytestmark = pytest.mark.asyncio


async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__, "store": "ready"}


async def test_health_check_reports_closed_store(client: AsyncClient) -> None:
    await close_store()

    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["store"] == "unavailable"


async def test_root_reports_service_metadata(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "name": "Taskboard",
        "environment": "test",
        "version": __version__,
        "api_prefix": "",
    }
