# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Billing and Admin services."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.core.errors import PermissionDeniedError
from src.domains.access import Actor
from src.domains.admin.service import AdminAccessDeniedError, AdminService
from src.domains.billing.service import BillingService, PlanNotFoundError, SamePlanError
from src.models.common import MemberRole


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.get = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def owner_actor():
    """Create an owner actor."""
    return Actor(user_id=str(uuid4()), organization_id=str(uuid4()), role=MemberRole.OWNER)


def make_plan(name: str, price: str = "0", is_active: bool = True):
    plan = MagicMock()
    plan.id = str(uuid4())
    plan.name = name
    plan.display_name = name.title()
    plan.price = Decimal(price)
    plan.is_active = is_active
    return plan


class TestBillingServiceChangePlan:
    """Tests for plan changes."""

    @pytest.mark.asyncio
    async def test_change_plan_owner_only(self, mock_db, owner_actor):
        """Test that admins cannot change the plan."""
        service = BillingService(mock_db)
        admin = owner_actor._replace(role=MemberRole.ADMIN)

        with pytest.raises(PermissionDeniedError):
            await service.change_plan(admin, str(uuid4()))

        mock_db.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_change_plan_unknown_plan(self, mock_db, owner_actor):
        """Test switching to a plan that does not exist."""
        mock_db.get.return_value = None
        service = BillingService(mock_db)

        with pytest.raises(PlanNotFoundError):
            await service.change_plan(owner_actor, str(uuid4()))

    @pytest.mark.asyncio
    async def test_change_plan_inactive_plan(self, mock_db, owner_actor):
        """Test that retired plans cannot be chosen."""
        plan = make_plan("legacy", is_active=False)
        mock_db.get.return_value = plan
        service = BillingService(mock_db)

        with pytest.raises(PlanNotFoundError):
            await service.change_plan(owner_actor, plan.id)

    @pytest.mark.asyncio
    async def test_change_plan_same_plan(self, mock_db, owner_actor):
        """Test that switching to the current plan is rejected."""
        plan = make_plan("free")
        mock_db.get.return_value = plan
        service = BillingService(mock_db)
        service.usage.lock = AsyncMock(return_value=(MagicMock(), plan))
        service.usage.check_plan_fits = AsyncMock()

        with pytest.raises(SamePlanError, match="already on the Free plan"):
            await service.change_plan(owner_actor, plan.id)

        service.usage.check_plan_fits.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_change_plan_to_paid_is_pending(self, mock_db, owner_actor):
        """Test that a paid plan writes a pending history entry."""
        free, pro = make_plan("free"), make_plan("pro", price="1400")
        usage = MagicMock()
        organization = MagicMock()
        mock_db.get.side_effect = [pro, organization]
        service = BillingService(mock_db)
        service.usage.lock = AsyncMock(return_value=(usage, free))
        service.usage.check_plan_fits = AsyncMock()

        async def mock_refresh(obj):
            obj.id = str(uuid4())
            obj.created_at = datetime.now(timezone.utc)

        mock_db.refresh.side_effect = mock_refresh

        result = await service.change_plan(owner_actor, pro.id)

        assert organization.plan == "pro"
        assert organization.billing_status == "pending"
        assert usage.plan_id == pro.id
        entry = mock_db.add.call_args.args[0]
        assert entry.status == "pending"
        assert entry.amount == Decimal("1400")
        assert result.plan_display_name == "Pro"
        service.usage.check_plan_fits.assert_awaited_once_with(owner_actor.organization_id, pro)


class TestBillingServiceOverview:
    """Tests for billing visibility."""

    @pytest.mark.asyncio
    async def test_faculty_cannot_view_billing(self, mock_db, owner_actor):
        """Test that billing is hidden from faculty."""
        service = BillingService(mock_db)
        faculty = owner_actor._replace(role=MemberRole.FACULTY)

        with pytest.raises(PermissionDeniedError):
            await service.get_overview(faculty)

        with pytest.raises(PermissionDeniedError):
            await service.billing_history(faculty)


class TestAdminService:
    """Tests for the platform admin dashboard."""

    @pytest.mark.asyncio
    async def test_dashboard_unknown_user(self, mock_db):
        """Test that a missing user is refused."""
        mock_db.get.return_value = None

        with pytest.raises(AdminAccessDeniedError):
            await AdminService(mock_db).dashboard(str(uuid4()))

    @pytest.mark.asyncio
    async def test_dashboard_regular_user(self, mock_db):
        """Test that ordinary accounts are refused."""
        user = MagicMock()
        user.is_platform_admin = False
        mock_db.get.return_value = user

        with pytest.raises(AdminAccessDeniedError) as exc_info:
            await AdminService(mock_db).dashboard(str(uuid4()))

        assert exc_info.value.kind == "permission_denied"
        mock_db.execute.assert_not_called()
