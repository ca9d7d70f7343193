"""Role-aware landing endpoint for authenticated users."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import CurrentIdentityDependency
from ...schemas import DashboardResponse

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse, summary="Greet the authenticated user")
async def read_dashboard(identity: CurrentIdentityDependency) -> DashboardResponse:
    if identity.is_admin:
        message = "Welcome Admin! You have full access."
    else:
        message = f"Welcome User {identity.username}! You can only manage your tasks."
    return DashboardResponse(message=message, role=identity.role)
