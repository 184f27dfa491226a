# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization service.

This module provides the OrganizationService class for:
- Creating an organization together with its owner membership and usage row
- Listing the organizations a user belongs to
- Renaming and deleting organizations
- Reporting live usage and the caller's permissions
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationFailedError
from src.domains.access import Action, Actor, Resource, authorize, permissions_for
from src.domains.organization.usage import UsageGuard
from src.infrastructure.database.models import (
    Organization,
    OrganizationUsage,
    Project,
    SubscriptionPlan,
    TeamMember,
    User,
)
from src.models.common import MemberRole
from src.models.organization import (
    OrganizationCreateRequest,
    OrganizationMembershipResponse,
    OrganizationResponse,
    PermissionsResponse,
    UsageResponse,
)

logger = logging.getLogger(__name__)


class OrganizationServiceError(Exception):
    """Base exception for organization service errors."""

    pass


class OrganizationNotFoundError(OrganizationServiceError, NotFoundError):
    """Raised when an organization does not exist."""

    pass


class PlanNotFoundError(OrganizationServiceError, ValidationFailedError):
    """Raised when the requested plan does not exist or is inactive."""

    pass


class OrganizationService:
    """Service for organization lifecycle and usage.

    Attributes:
        db: Async database session.
        usage: Usage guard sharing the same session.
    """

    def __init__(self, db: AsyncSession, default_plan: str = "free") -> None:
        """Initialize organization service.

        Args:
            db: Async database session.
            default_plan: Plan name used when the request names none.
        """
        self.db = db
        self.usage = UsageGuard(db)
        self._default_plan = default_plan

    async def create_organization(
        self,
        user: User,
        request: OrganizationCreateRequest,
    ) -> OrganizationMembershipResponse:
        """Create an organization owned by the user.

        The organization, the owner membership and the usage row are
        written in one transaction; a failure leaves none of them behind.

        Args:
            user: Creating user, who becomes the owner.
            request: Organization data.

        Returns:
            The new organization with the caller's role.

        Raises:
            PlanNotFoundError: If the plan name is unknown.
        """
        plan_name = request.plan or self._default_plan
        plan = await self._get_plan_by_name(plan_name)

        organization = Organization(
            name=request.name,
            type=request.type,
            plan=plan.name,
            owner_id=user.id,
            billing_status="active" if plan.price == 0 else "pending",
        )
        self.db.add(organization)
        await self.db.flush()

        self.db.add(
            TeamMember(
                organization_id=organization.id,
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=MemberRole.OWNER.value,
            )
        )
        self.db.add(
            OrganizationUsage(
                organization_id=organization.id,
                plan_id=plan.id,
                current_team_members=1,
                current_students=0,
                current_projects=0,
            )
        )

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(organization)

        logger.info(
            "Created organization: id=%s, name=%s, owner=%s, plan=%s",
            organization.id,
            organization.name,
            user.id,
            plan.name,
        )

        return OrganizationMembershipResponse(
            **OrganizationResponse.model_validate(organization).model_dump(),
            role=MemberRole.OWNER.value,
        )

    async def list_for_user(self, user_id: str) -> list[OrganizationMembershipResponse]:
        """List organizations the user is a member of, newest first."""
        result = await self.db.execute(
            select(Organization, TeamMember.role)
            .join(TeamMember, TeamMember.organization_id == Organization.id)
            .where(TeamMember.user_id == user_id)
            .order_by(Organization.created_at.desc())
        )

        return [
            OrganizationMembershipResponse(
                **OrganizationResponse.model_validate(org).model_dump(),
                role=role,
            )
            for org, role in result.all()
        ]

    async def get_organization(self, actor: Actor) -> OrganizationMembershipResponse:
        """Get the actor's organization."""
        authorize(actor, Action.VIEW, Resource.ORGANIZATION)
        organization = await self._get_organization(actor.organization_id)
        return OrganizationMembershipResponse(
            **OrganizationResponse.model_validate(organization).model_dump(),
            role=actor.role.value,
        )

    async def rename_organization(self, actor: Actor, name: str) -> OrganizationResponse:
        """Rename the organization. Owner only."""
        authorize(actor, Action.UPDATE, Resource.ORGANIZATION)
        organization = await self._get_organization(actor.organization_id)

        old_name = organization.name
        organization.name = name
        await self.db.commit()
        await self.db.refresh(organization)

        logger.info(
            "Renamed organization: id=%s, from=%s, to=%s, by=%s",
            organization.id,
            old_name,
            name,
            actor.user_id,
        )
        return OrganizationResponse.model_validate(organization)

    async def delete_organization(self, actor: Actor) -> None:
        """Delete the organization and everything scoped to it. Owner only.

        Projects go first so rows that reference them with SET NULL are
        not rewritten just before they are removed.
        """
        authorize(actor, Action.DELETE, Resource.ORGANIZATION)
        organization = await self._get_organization(actor.organization_id)

        await self.db.execute(delete(Project).where(Project.organization_id == organization.id))
        await self.db.execute(delete(Organization).where(Organization.id == organization.id))
        await self.db.commit()

        logger.info("Deleted organization: id=%s, by=%s", organization.id, actor.user_id)

    async def get_usage(self, actor: Actor) -> UsageResponse:
        """Recompute and return the organization's usage."""
        authorize(actor, Action.VIEW, Resource.ORGANIZATION)
        await self._get_organization(actor.organization_id)
        usage = await self.usage.snapshot(actor.organization_id)
        await self.db.commit()
        return usage

    def get_permissions(self, actor: Actor) -> PermissionsResponse:
        """Report what the actor's role may do."""
        return PermissionsResponse(
            role=actor.role.value if actor.role else None,
            permissions=permissions_for(actor.role),
        )

    async def _get_organization(self, organization_id: str) -> Organization:
        organization = await self.db.get(Organization, organization_id)
        if not organization:
            raise OrganizationNotFoundError(f"Organization {organization_id} not found")
        return organization

    async def _get_plan_by_name(self, name: str) -> SubscriptionPlan:
        result = await self.db.execute(
            select(SubscriptionPlan).where(
                SubscriptionPlan.name == name,
                SubscriptionPlan.is_active.is_(True),
            )
        )
        plan = result.scalar_one_or_none()
        if not plan:
            raise PlanNotFoundError(f"Plan '{name}' not found")
        return plan
