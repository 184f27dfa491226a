# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Subscription plan and billing API endpoints.

This module provides endpoints for plans and billing:
- GET /plans - Active plans, cheapest first
- GET /organizations/{organization_id}/billing - Current plan and usage
- POST /organizations/{organization_id}/billing/plan - Change plan (owner only)
- GET /organizations/{organization_id}/billing/history - Billing history
"""

import logging

from fastapi import APIRouter

from src.api.dependencies import AuthenticatedUser, BillingServiceDep, Membership
from src.models.organization import (
    BillingHistoryResponse,
    BillingOverviewResponse,
    ChangePlanRequest,
    PlanResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/plans",
    response_model=list[PlanResponse],
    summary="List plans",
)
async def list_plans(
    current_user: AuthenticatedUser,
    service: BillingServiceDep,
) -> list[PlanResponse]:
    return await service.list_plans()


@router.get(
    "/organizations/{organization_id}/billing",
    response_model=BillingOverviewResponse,
    summary="Get billing overview",
)
async def get_billing(
    actor: Membership,
    service: BillingServiceDep,
) -> BillingOverviewResponse:
    return await service.get_overview(actor)


@router.post(
    "/organizations/{organization_id}/billing/plan",
    response_model=BillingHistoryResponse,
    summary="Change plan",
    description=(
        "Switch plans and record a billing history entry. A downgrade whose "
        "ceilings are below current usage is rejected."
    ),
)
async def change_plan(
    data: ChangePlanRequest,
    actor: Membership,
    service: BillingServiceDep,
) -> BillingHistoryResponse:
    logger.info("Changing plan: org=%s, plan=%s, by=%s", actor.organization_id, data.plan_id, actor.user_id)
    return await service.change_plan(actor, data.plan_id)


@router.get(
    "/organizations/{organization_id}/billing/history",
    response_model=list[BillingHistoryResponse],
    summary="List billing history",
)
async def billing_history(
    actor: Membership,
    service: BillingServiceDep,
) -> list[BillingHistoryResponse]:
    return await service.billing_history(actor)
