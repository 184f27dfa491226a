# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Billing service for subscription plans.

This module provides the BillingService class for:
- Listing available subscription plans
- Showing the current plan, billing status and usage
- Changing plans with a billing history entry
- Listing billing history
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationFailedError
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.organization.usage import UsageGuard
from src.infrastructure.database.models import (
    BillingHistory,
    Organization,
    SubscriptionPlan,
)
from src.models.organization import (
    BillingHistoryResponse,
    BillingOverviewResponse,
    PlanResponse,
)

logger = logging.getLogger(__name__)


class BillingServiceError(Exception):
    """Base exception for billing service errors."""

    pass


class PlanNotFoundError(BillingServiceError, NotFoundError):
    """Raised when a plan does not exist or is not active."""

    pass


class SamePlanError(BillingServiceError, ValidationFailedError):
    """Raised when switching to the plan already in use."""

    pass


class BillingService:
    """Service for plans and billing history.

    Attributes:
        db: Async database session.
        usage: Usage guard sharing the same session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.usage = UsageGuard(db)

    async def list_plans(self) -> list[PlanResponse]:
        """List active plans, cheapest first."""
        result = await self.db.execute(
            select(SubscriptionPlan)
            .where(SubscriptionPlan.is_active.is_(True))
            .order_by(SubscriptionPlan.price, SubscriptionPlan.name)
        )
        return [PlanResponse.model_validate(p) for p in result.scalars().all()]

    async def get_overview(self, actor: Actor) -> BillingOverviewResponse:
        """Current plan, billing status and live usage."""
        authorize(actor, Action.VIEW, Resource.BILLING)
        organization = await self.db.get(Organization, actor.organization_id)
        usage = await self.usage.snapshot(actor.organization_id)
        plan = await self.db.get(SubscriptionPlan, usage.plan_id)
        await self.db.commit()

        return BillingOverviewResponse(
            plan=PlanResponse.model_validate(plan),
            billing_status=organization.billing_status if organization else None,
            usage=usage,
        )

    async def change_plan(self, actor: Actor, plan_id: str) -> BillingHistoryResponse:
        """Switch the organization to another plan.

        The organization's plan name, the usage row's plan and a billing
        history entry are written in one transaction. Free plans are
        recorded as paid; paid plans stay pending until settled.

        Args:
            actor: Acting owner.
            plan_id: Target plan.

        Returns:
            The billing history entry.

        Raises:
            PlanNotFoundError: If the plan is unknown or inactive.
            SamePlanError: If the organization already uses the plan.
            UsageLimitExceededError: If current usage exceeds the new plan.
        """
        authorize(actor, Action.UPDATE, Resource.BILLING)
        plan = await self._get_plan(plan_id)

        usage, current_plan = await self.usage.lock(actor.organization_id)
        if current_plan.id == plan.id:
            raise SamePlanError(f"Organization is already on the {plan.display_name} plan")

        await self.usage.check_plan_fits(actor.organization_id, plan)

        organization = await self.db.get(Organization, actor.organization_id)
        is_free = plan.price == 0
        organization.plan = plan.name
        organization.billing_status = "active" if is_free else "pending"
        usage.plan_id = plan.id

        entry = BillingHistory(
            organization_id=actor.organization_id,
            plan_id=plan.id,
            amount=plan.price,
            status="paid" if is_free else "pending",
            description=f"Plan changed from {current_plan.display_name} to {plan.display_name}",
        )
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)

        logger.info(
            "Changed plan: org=%s, from=%s, to=%s, by=%s",
            actor.organization_id,
            current_plan.name,
            plan.name,
            actor.user_id,
        )

        return self._to_history_response(entry, plan)

    async def billing_history(self, actor: Actor) -> list[BillingHistoryResponse]:
        """List billing history, newest first."""
        authorize(actor, Action.VIEW, Resource.BILLING)
        result = await self.db.execute(
            select(BillingHistory, SubscriptionPlan)
            .outerjoin(SubscriptionPlan, SubscriptionPlan.id == BillingHistory.plan_id)
            .where(BillingHistory.organization_id == actor.organization_id)
            .order_by(BillingHistory.created_at.desc())
        )
        return [self._to_history_response(entry, plan) for entry, plan in result.all()]

    async def _get_plan(self, plan_id: str) -> SubscriptionPlan:
        plan = await self.db.get(SubscriptionPlan, plan_id)
        if not plan or not plan.is_active:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        return plan

    def _to_history_response(
        self,
        entry: BillingHistory,
        plan: SubscriptionPlan | None,
    ) -> BillingHistoryResponse:
        return BillingHistoryResponse(
            id=entry.id,
            plan_id=entry.plan_id,
            plan_display_name=plan.display_name if plan else None,
            amount=entry.amount,
            status=entry.status,
            description=entry.description,
            created_at=entry.created_at,
        )
