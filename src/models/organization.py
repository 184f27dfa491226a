# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization, plan, usage, billing, member and settings models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

from src.models.common import MemberRole, ORMModel

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# =========================================================================
# Organizations
# =========================================================================


class OrganizationCreateRequest(BaseModel):
    """New organization owned by the caller."""

    name: str = Field(min_length=1, max_length=255)
    type: str | None = Field(default=None, max_length=50)
    plan: str | None = Field(default=None, description="Plan name; defaults to the free plan")


class OrganizationRenameRequest(BaseModel):
    """Rename an organization."""

    name: str = Field(min_length=1, max_length=255)


class OrganizationResponse(ORMModel):
    """Organization details."""

    id: str
    name: str
    type: str | None
    plan: str
    owner_id: str
    billing_status: str | None = None
    created_at: datetime


class OrganizationMembershipResponse(OrganizationResponse):
    """Organization as seen by one of its members."""

    role: str


class UsageResponse(BaseModel):
    """Live usage figures against the plan ceilings."""

    organization_id: str
    plan_id: str
    plan_name: str
    current_team_members: int
    current_students: int
    current_projects: int
    max_team_members: int | None
    max_students: int | None
    max_projects: int | None


class PermissionsResponse(BaseModel):
    """What the caller's role may do, per resource."""

    role: str | None
    permissions: dict[str, list[str]]


# =========================================================================
# Plans and billing
# =========================================================================


class PlanResponse(ORMModel):
    """Subscription plan."""

    id: str
    name: str
    display_name: str
    description: str | None
    price: Decimal
    currency: str
    max_team_members: int | None
    max_students: int | None
    max_projects: int | None


class ChangePlanRequest(BaseModel):
    """Switch the organization to another plan."""

    plan_id: str


class BillingHistoryResponse(ORMModel):
    """One billing history entry."""

    id: str
    plan_id: str | None
    plan_display_name: str | None = None
    amount: Decimal
    status: str
    description: str | None
    created_at: datetime


class BillingOverviewResponse(BaseModel):
    """Current plan, billing status and usage."""

    plan: PlanResponse
    billing_status: str | None
    usage: UsageResponse


# =========================================================================
# Members
# =========================================================================


class MemberCreateRequest(BaseModel):
    """Add a user to the organization by email."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    role: MemberRole = MemberRole.MEMBER
    address: str | None = None
    birthdate: date | None = None


class MemberUpdateRequest(BaseModel):
    """Editable membership fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    role: MemberRole | None = None
    address: str | None = None
    birthdate: date | None = None


class MemberResponse(ORMModel):
    """Team member."""

    id: str
    organization_id: str
    user_id: str
    name: str
    email: str
    role: str
    address: str | None
    birthdate: date | None
    created_at: datetime


class MemberCreatedResponse(BaseModel):
    """New membership; generated_password is set only when a user account was created."""

    member: MemberResponse
    generated_password: str | None = None


class RoleResponse(BaseModel):
    """Assignable role."""

    value: str
    label: str


# =========================================================================
# Numbering and theme
# =========================================================================


class NumberingSettingUpdateRequest(BaseModel):
    """Edit a numbering scheme."""

    prefix: str | None = Field(default=None, max_length=20)
    next_number: int | None = Field(default=None, ge=1)
    format: str | None = Field(default=None, min_length=1, max_length=100)
    padding: int | None = Field(default=None, ge=1, le=12)


class NumberingSettingResponse(BaseModel):
    """Numbering scheme with a preview of the next identifier."""

    type: str
    prefix: str
    next_number: int
    format: str
    padding: int
    preview: str


class ThemeRequest(BaseModel):
    """Brand colors."""

    primary_color: str = Field(pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field(pattern=HEX_COLOR_PATTERN)
    accent_color: str = Field(pattern=HEX_COLOR_PATTERN)


class ThemeResponse(BaseModel):
    """Brand colors, defaults included."""

    organization_id: str
    primary_color: str
    secondary_color: str
    accent_color: str
    is_default: bool
