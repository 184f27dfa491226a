# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Platform admin dashboard models."""

from pydantic import BaseModel

from src.models.organization import PlanResponse


class AdminOrganizationRow(BaseModel):
    id: str
    name: str
    type: str | None
    plan: str
    owner_id: str
    owner_name: str | None
    owner_email: str | None
    current_team_members: int
    current_students: int
    current_projects: int


class AdminDashboardResponse(BaseModel):
    """Platform-wide organization overview."""

    total_organizations: int
    free_organizations: int
    pro_organizations: int
    organizations: list[AdminOrganizationRow]
    plans: list[PlanResponse]
