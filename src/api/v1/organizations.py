# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization API endpoints.

This module provides endpoints for organizations:
- POST / - Create an organization owned by the caller
- GET / - List the caller's organizations with their role
- GET /{organization_id} - Organization details
- PATCH /{organization_id} - Rename (owner only)
- DELETE /{organization_id} - Delete with all its data (owner only)
- GET /{organization_id}/usage - Live usage against the plan ceilings
- GET /{organization_id}/permissions - What the caller's role may do

Every path under /{organization_id} resolves the caller's membership
first; non-members get 403.
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    AuthenticatedUser,
    AuthServiceDep,
    Membership,
    OrganizationServiceDep,
    RequireAction,
)
from src.domains.access import Action, Actor, Resource
from src.models.organization import (
    OrganizationCreateRequest,
    OrganizationMembershipResponse,
    OrganizationRenameRequest,
    OrganizationResponse,
    PermissionsResponse,
    UsageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=OrganizationMembershipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create organization",
    description="Create an organization with the caller as owner, bound to a plan.",
)
async def create_organization(
    data: OrganizationCreateRequest,
    current_user: AuthenticatedUser,
    auth_service: AuthServiceDep,
    service: OrganizationServiceDep,
) -> OrganizationMembershipResponse:
    """Create an organization.

    The organization, the owner membership and the usage row are written
    in one transaction.
    """
    logger.info("Creating organization: name=%s, by=%s", data.name, current_user.id)
    user = await auth_service.get_user(current_user.id)
    return await service.create_organization(user, data)


@router.get(
    "",
    response_model=list[OrganizationMembershipResponse],
    summary="List my organizations",
)
async def list_organizations(
    current_user: AuthenticatedUser,
    service: OrganizationServiceDep,
) -> list[OrganizationMembershipResponse]:
    return await service.list_for_user(current_user.id)


@router.get(
    "/{organization_id}",
    response_model=OrganizationMembershipResponse,
    summary="Get organization",
)
async def get_organization(
    actor: Membership,
    service: OrganizationServiceDep,
) -> OrganizationMembershipResponse:
    return await service.get_organization(actor)


@router.patch(
    "/{organization_id}",
    response_model=OrganizationResponse,
    summary="Rename organization",
    description="Owner only.",
)
async def rename_organization(
    data: OrganizationRenameRequest,
    actor: Membership,
    service: OrganizationServiceDep,
) -> OrganizationResponse:
    return await service.rename_organization(actor, data.name)


@router.delete(
    "/{organization_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete organization",
    description="Owner only. Removes projects and every scoped row first.",
)
async def delete_organization(
    service: OrganizationServiceDep,
    actor: Actor = Depends(RequireAction(Action.DELETE, Resource.ORGANIZATION)),
) -> None:
    await service.delete_organization(actor)


@router.get(
    "/{organization_id}/usage",
    response_model=UsageResponse,
    summary="Get usage",
    description="Counters are recomputed from the rows before they are returned.",
)
async def get_usage(
    actor: Membership,
    service: OrganizationServiceDep,
) -> UsageResponse:
    return await service.get_usage(actor)


@router.get(
    "/{organization_id}/permissions",
    response_model=PermissionsResponse,
    summary="Get my permissions",
    description="The same policy the server enforces, for the caller's role.",
)
async def get_permissions(
    actor: Membership,
    service: OrganizationServiceDep,
) -> PermissionsResponse:
    return service.get_permissions(actor)
