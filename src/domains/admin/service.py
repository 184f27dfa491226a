# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Platform admin dashboard service."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import PermissionDeniedError
from src.domains.organization.usage import UsageKind
from src.infrastructure.database.models import Organization, SubscriptionPlan, User
from src.models.admin import AdminDashboardResponse, AdminOrganizationRow
from src.models.organization import PlanResponse

logger = logging.getLogger(__name__)


class AdminServiceError(Exception):
    """Base exception for admin service errors."""

    pass


class AdminAccessDeniedError(AdminServiceError, PermissionDeniedError):
    """Raised when a non platform admin opens the dashboard."""

    pass


class AdminService:
    """Read-only, cross-organization views for platform administrators.

    Usage columns are computed with grouped count queries rather than read
    from the cached counters, so the dashboard never shows stale values.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def dashboard(self, user_id: str) -> AdminDashboardResponse:
        """Build the organization overview.

        Args:
            user_id: Caller's user ID.

        Returns:
            Every organization with its owner, plan and usage, plan counts
            and the plan list.

        Raises:
            AdminAccessDeniedError: If the caller is not a platform admin.
        """
        user = await self.db.get(User, user_id)
        if not user or not user.is_platform_admin:
            raise AdminAccessDeniedError("Administrator access required")

        result = await self.db.execute(
            select(Organization, User.name, User.email)
            .join(User, User.id == Organization.owner_id)
            .order_by(Organization.created_at.desc())
        )
        rows = result.all()

        counts = {kind: await self._counts_by_organization(kind) for kind in UsageKind}

        organizations = [
            AdminOrganizationRow(
                id=org.id,
                name=org.name,
                type=org.type,
                plan=org.plan,
                owner_id=org.owner_id,
                owner_name=owner_name,
                owner_email=owner_email,
                current_team_members=counts[UsageKind.TEAM_MEMBERS].get(org.id, 0),
                current_students=counts[UsageKind.STUDENTS].get(org.id, 0),
                current_projects=counts[UsageKind.PROJECTS].get(org.id, 0),
            )
            for org, owner_name, owner_email in rows
        ]

        plans = await self.db.execute(
            select(SubscriptionPlan).order_by(SubscriptionPlan.price, SubscriptionPlan.name)
        )

        logger.info("Admin dashboard viewed: by=%s, organizations=%d", user_id, len(organizations))
        return AdminDashboardResponse(
            total_organizations=len(organizations),
            free_organizations=sum(1 for o in organizations if o.plan == "free"),
            pro_organizations=sum(1 for o in organizations if o.plan == "pro"),
            organizations=organizations,
            plans=[PlanResponse.model_validate(p) for p in plans.scalars().all()],
        )

    async def _counts_by_organization(self, kind: UsageKind) -> dict[str, int]:
        model = kind.model
        result = await self.db.execute(
            select(model.organization_id, func.count()).group_by(model.organization_id)
        )
        return {org_id: count for org_id, count in result.all()}
