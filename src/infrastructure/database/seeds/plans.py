# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Registrar seed data.

This module provides seed data for a fresh database:
- Subscription plans: free and pro
- Platform users: initial super-admin

Every seed is idempotent; existing rows are left untouched.
"""

import asyncio
import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.password import hash_password
from src.infrastructure.database.models import SubscriptionPlan, User

logger = logging.getLogger(__name__)

PLANS_DATA = [
    {
        "name": "free",
        "display_name": "Free",
        "description": "For small schools getting started",
        "price": Decimal("0"),
        "currency": "PHP",
        "max_team_members": 5,
        "max_students": 100,
        "max_projects": 1,
    },
    {
        "name": "pro",
        "display_name": "Pro",
        "description": "Unlimited team members, students and projects",
        "price": Decimal("1400"),
        "currency": "PHP",
        "max_team_members": None,
        "max_students": None,
        "max_projects": None,
    },
]


async def seed_plans(session: AsyncSession) -> list[SubscriptionPlan]:
    """Insert the default subscription plans that are missing.

    Args:
        session: Database session.

    Returns:
        List of created plans.
    """
    result = await session.execute(select(SubscriptionPlan.name))
    existing = set(result.scalars().all())

    plans = []
    for data in PLANS_DATA:
        if data["name"] in existing:
            continue
        plan = SubscriptionPlan(**data)
        session.add(plan)
        plans.append(plan)

    await session.flush()
    logger.info("Seeded %d subscription plans", len(plans))
    return plans


async def seed_super_admin(
    session: AsyncSession,
    admin_email: str,
    admin_password: str,
) -> User | None:
    """Create the platform super-admin unless the email is already taken.

    Args:
        session: Database session.
        admin_email: Admin email address.
        admin_password: Admin password.

    Returns:
        The created user, or None if it already existed.
    """
    email = admin_email.lower()
    result = await session.execute(select(User).where(func.lower(User.email) == email))
    if result.scalar_one_or_none():
        return None

    user = User(
        email=email,
        name="Platform Administrator",
        password_hash=hash_password(admin_password),
        platform_role="super-admin",
        must_change_password=True,
    )
    session.add(user)
    await session.flush()
    logger.info("Seeded super-admin: %s", email)
    return user


async def seed_database(
    session: AsyncSession,
    admin_email: str | None = None,
    admin_password: str | None = None,
) -> dict:
    """Seed plans and, when credentials are given, the super-admin.

    Args:
        session: Database session.
        admin_email: Optional super-admin email.
        admin_password: Optional super-admin password.

    Returns:
        Dictionary with seeded entities.
    """
    logger.info("Seeding database...")

    plans = await seed_plans(session)
    admin = None
    if admin_email and admin_password:
        admin = await seed_super_admin(session, admin_email, admin_password)

    await session.commit()
    logger.info("Database seeding complete")

    return {"plans": plans, "super_admin": admin}


if __name__ == "__main__":
    from src.core.config import get_settings
    from src.infrastructure.database.connection import (
        close_database,
        get_session,
        init_database,
    )

    async def main() -> None:
        settings = get_settings()
        await init_database(settings)
        try:
            async with get_session() as session:
                await seed_database(
                    session,
                    admin_email=settings.registrar.seed_admin_email,
                    admin_password=settings.registrar.seed_admin_password.get_secret_value(),
                )
        finally:
            await close_database()

    asyncio.run(main())
