# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Plan ceilings and usage counters.

The counters on organization_usage are never incremented or decremented.
They are recomputed from count queries in the same transaction as the
insert or delete that changed them, so they always equal the live counts
once that transaction commits.

Before an insert, reserve() locks the usage row (SELECT ... FOR UPDATE on
PostgreSQL) so concurrent inserts for the same organization queue behind
each other and cannot both pass the ceiling check.
"""

import logging
from enum import Enum

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import LimitExceededError, NotFoundError
from src.infrastructure.database.models import (
    OrganizationUsage,
    Project,
    Student,
    SubscriptionPlan,
    TeamMember,
)
from src.models.organization import UsageResponse

logger = logging.getLogger(__name__)


class UsageKind(str, Enum):
    """Resources limited by a subscription plan."""

    TEAM_MEMBERS = "team_members"
    STUDENTS = "students"
    PROJECTS = "projects"

    @property
    def model(self) -> type:
        return _MODELS[self]

    @property
    def counter(self) -> str:
        return f"current_{self.value}"

    @property
    def ceiling(self) -> str:
        return f"max_{self.value}"


_MODELS = {
    UsageKind.TEAM_MEMBERS: TeamMember,
    UsageKind.STUDENTS: Student,
    UsageKind.PROJECTS: Project,
}


class UsageLimitExceededError(LimitExceededError):
    """Raised when an insert would pass the plan ceiling.

    Attributes:
        kind: Always "limit_exceeded".
        usage_kind: Which resource hit its ceiling.
        current: Live count at the time of the check.
        maximum: Plan ceiling.
    """

    def __init__(self, usage_kind: UsageKind, current: int, maximum: int) -> None:
        label = usage_kind.value.replace("_", " ")
        super().__init__(
            f"Plan limit reached for {label}: {current} of {maximum} used. "
            "Upgrade the plan to add more."
        )
        self.usage_kind = usage_kind
        self.current = current
        self.maximum = maximum


class UsageNotFoundError(NotFoundError):
    """Raised when an organization has no usage row."""


class UsageGuard:
    """Counts, checks and refreshes plan usage of one organization.

    Never commits; callers own the transaction.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def count(self, organization_id: str, kind: UsageKind) -> int:
        """Count live rows of one kind for an organization."""
        model = kind.model
        result = await self.db.execute(
            select(func.count()).select_from(model).where(model.organization_id == organization_id)
        )
        return result.scalar_one()

    async def lock(
        self,
        organization_id: str,
    ) -> tuple[OrganizationUsage, SubscriptionPlan]:
        """Lock the usage row and load its plan.

        Raises:
            UsageNotFoundError: If the organization has no usage row.
        """
        result = await self.db.execute(
            select(OrganizationUsage, SubscriptionPlan)
            .join(SubscriptionPlan, SubscriptionPlan.id == OrganizationUsage.plan_id)
            .where(OrganizationUsage.organization_id == organization_id)
            .with_for_update(of=OrganizationUsage)
        )
        row = result.first()
        if row is None:
            raise UsageNotFoundError(f"No usage record for organization {organization_id}")
        return row[0], row[1]

    async def reserve(self, organization_id: str, kind: UsageKind) -> None:
        """Check that one more row of this kind fits in the plan.

        Must be called before the insert, inside the inserting transaction.

        Raises:
            UsageLimitExceededError: If the live count already reached the ceiling.
        """
        _, plan = await self.lock(organization_id)
        maximum = getattr(plan, kind.ceiling)
        if maximum is None:
            return

        current = await self.count(organization_id, kind)
        if current >= maximum:
            logger.info(
                "Plan limit reached: org=%s, kind=%s, current=%d, max=%d",
                organization_id,
                kind.value,
                current,
                maximum,
            )
            raise UsageLimitExceededError(kind, current, maximum)

    async def check_plan_fits(self, organization_id: str, plan: SubscriptionPlan) -> None:
        """Check that current counts fit under another plan's ceilings.

        Raises:
            UsageLimitExceededError: If any count is above the new ceiling.
        """
        for kind in UsageKind:
            maximum = getattr(plan, kind.ceiling)
            if maximum is None:
                continue
            current = await self.count(organization_id, kind)
            if current > maximum:
                raise UsageLimitExceededError(kind, current, maximum)

    async def refresh(self, organization_id: str) -> OrganizationUsage:
        """Rewrite all counters from count queries and flush."""
        usage, _ = await self.lock(organization_id)
        for kind in UsageKind:
            setattr(usage, kind.counter, await self.count(organization_id, kind))
        await self.db.flush()
        return usage

    async def snapshot(self, organization_id: str) -> UsageResponse:
        """Refresh the counters and report them with the plan ceilings."""
        usage = await self.refresh(organization_id)
        plan = await self.db.get(SubscriptionPlan, usage.plan_id)
        return UsageResponse(
            organization_id=organization_id,
            plan_id=usage.plan_id,
            plan_name=plan.name if plan else "",
            current_team_members=usage.current_team_members,
            current_students=usage.current_students,
            current_projects=usage.current_projects,
            max_team_members=plan.max_team_members if plan else None,
            max_students=plan.max_students if plan else None,
            max_projects=plan.max_projects if plan else None,
        )
