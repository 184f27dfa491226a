# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Team member API endpoints.

This module provides endpoints for team management:
- GET /roles - Assignable roles
- GET /organizations/{organization_id}/members - List members
- POST /organizations/{organization_id}/members - Add a member (owner only)
- PATCH /organizations/{organization_id}/members/{member_id} - Edit a member
- DELETE /organizations/{organization_id}/members/{member_id} - Remove a member

Adding an email that has no account creates one with a generated
password, returned once in the response.
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import AuthenticatedUser, MemberServiceDep, Membership
from src.models.organization import (
    MemberCreatedResponse,
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
    RoleResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/roles",
    response_model=list[RoleResponse],
    summary="List assignable roles",
)
async def list_roles(
    current_user: AuthenticatedUser,
    service: MemberServiceDep,
) -> list[RoleResponse]:
    return service.list_roles()


@router.get(
    "/organizations/{organization_id}/members",
    response_model=list[MemberResponse],
    summary="List members",
)
async def list_members(
    actor: Membership,
    service: MemberServiceDep,
) -> list[MemberResponse]:
    return await service.list_members(actor)


@router.post(
    "/organizations/{organization_id}/members",
    response_model=MemberCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add member",
    description="Owner only. Fails with limit_exceeded when the plan's team ceiling is reached.",
)
async def add_member(
    data: MemberCreateRequest,
    actor: Membership,
    service: MemberServiceDep,
) -> MemberCreatedResponse:
    logger.info(
        "Adding member: email=%s, role=%s, org=%s, by=%s",
        data.email,
        data.role,
        actor.organization_id,
        actor.user_id,
    )
    return await service.add_member(actor, data)


@router.patch(
    "/organizations/{organization_id}/members/{member_id}",
    response_model=MemberResponse,
    summary="Update member",
)
async def update_member(
    member_id: str,
    data: MemberUpdateRequest,
    actor: Membership,
    service: MemberServiceDep,
) -> MemberResponse:
    return await service.update_member(actor, member_id, data)


@router.delete(
    "/organizations/{organization_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove member",
)
async def remove_member(
    member_id: str,
    actor: Membership,
    service: MemberServiceDep,
) -> None:
    await service.remove_member(actor, member_id)
