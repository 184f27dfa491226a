# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for database seed scripts."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from src.domains.auth.password import verify_password
from src.infrastructure.database.models import SubscriptionPlan, User
from src.infrastructure.database.seeds import seed_database, seed_plans, seed_super_admin

pytestmark = pytest.mark.integration


class TestPlanSeeds:
    """Test subscription plan seeds."""

    @pytest.mark.asyncio
    async def test_seed_plans_creates_free_and_pro(self, db_sessionmaker):
        """Verify seed_plans creates the default plans."""
        async with db_sessionmaker() as session:
            plans = await seed_plans(session)
            await session.commit()

        by_name = {plan.name: plan for plan in plans}
        assert set(by_name) == {"free", "pro"}

        free = by_name["free"]
        assert free.price == Decimal("0")
        assert (free.max_team_members, free.max_students, free.max_projects) == (5, 100, 1)

        pro = by_name["pro"]
        assert pro.price == Decimal("1400")
        assert pro.max_team_members is None
        assert pro.max_students is None
        assert pro.max_projects is None

    @pytest.mark.asyncio
    async def test_seed_plans_is_idempotent(self, db_sessionmaker):
        """Verify a second run creates nothing."""
        async with db_sessionmaker() as session:
            await seed_plans(session)
            await session.commit()

            again = await seed_plans(session)
            await session.commit()

            count = await session.execute(select(func.count()).select_from(SubscriptionPlan))

        assert again == []
        assert count.scalar_one() == 2


class TestAdminSeeds:
    """Test platform admin seeds."""

    @pytest.mark.asyncio
    async def test_seed_super_admin(self, db_sessionmaker):
        """Verify the super-admin is created with a reset flag."""
        async with db_sessionmaker() as session:
            admin = await seed_super_admin(session, "Root@Registrar.test", "TestPassword123!")
            await session.commit()

        assert admin.email == "root@registrar.test"
        assert admin.platform_role == "super-admin"
        assert admin.must_change_password is True
        assert verify_password("TestPassword123!", admin.password_hash)

    @pytest.mark.asyncio
    async def test_seed_super_admin_skips_existing_email(self, db_sessionmaker):
        """Verify an existing account is never overwritten."""
        async with db_sessionmaker() as session:
            await seed_super_admin(session, "root@registrar.test", "first-password")
            await session.commit()

            second = await seed_super_admin(session, "ROOT@registrar.test", "second-password")
            await session.commit()

            users = (await session.execute(select(User))).scalars().all()

        assert second is None
        assert len(users) == 1
        assert verify_password("first-password", users[0].password_hash)

    @pytest.mark.asyncio
    async def test_seed_database(self, db_sessionmaker):
        """Verify the full seed commits plans and the admin together."""
        async with db_sessionmaker() as session:
            result = await seed_database(
                session,
                admin_email="root@registrar.test",
                admin_password="TestPassword123!",
            )

        assert len(result["plans"]) == 2
        assert result["super_admin"] is not None

        async with db_sessionmaker() as session:
            plans = await session.execute(select(func.count()).select_from(SubscriptionPlan))
            users = await session.execute(select(func.count()).select_from(User))

        assert plans.scalar_one() == 2
        assert users.scalar_one() == 1
