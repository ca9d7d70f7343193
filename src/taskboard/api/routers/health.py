"""Liveness endpoint reporting service version and store state."""

from __future__ import annotations

from fastapi import APIRouter

from ...db import store_ready
from ...deps import SettingsDependency
from ...schemas.system import HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get("/healthz", response_model=HealthCheckResponse, summary="Health check")
async def read_health(settings: SettingsDependency) -> HealthCheckResponse:
    # Liveness only: an uninitialised store is reported, not treated as a failure.
    return HealthCheckResponse(
        version=settings.version,
        store="ready" if store_ready() else "unavailable",
    )
