# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Platform admin API endpoints.

- GET /dashboard - Every organization with owner, plan and usage
"""

from fastapi import APIRouter

from src.api.dependencies import AdminServiceDep, PlatformAdmin
from src.models.admin import AdminDashboardResponse

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=AdminDashboardResponse,
    summary="Admin dashboard",
    description="Platform admins only.",
)
async def dashboard(
    current_user: PlatformAdmin,
    service: AdminServiceDep,
) -> AdminDashboardResponse:
    return await service.dashboard(current_user.id)
