# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Membership role resolution."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.access.policy import Actor
from src.infrastructure.database.models import TeamMember
from src.models.common import MemberRole

logger = logging.getLogger(__name__)


class AccessService:
    """Resolves the role a user holds in an organization.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve_role(
        self,
        user_id: str | None,
        organization_id: str | None,
    ) -> MemberRole | None:
        """Look up the membership role of a user.

        Args:
            user_id: User identifier.
            organization_id: Organization identifier.

        Returns:
            The role, or None when either id is missing, the user is not a
            member, or the stored role is not a known role.
        """
        if not user_id or not organization_id:
            return None

        result = await self.db.execute(
            select(TeamMember.role).where(
                TeamMember.organization_id == organization_id,
                TeamMember.user_id == user_id,
            )
        )
        role = result.scalar_one_or_none()
        if role is None:
            return None

        try:
            return MemberRole(role)
        except ValueError:
            logger.warning(
                "Unknown role stored for user=%s, org=%s: %s",
                user_id,
                organization_id,
                role,
            )
            return None

    async def build_actor(self, user_id: str, organization_id: str) -> Actor:
        """Create the Actor for a user acting in an organization."""
        role = await self.resolve_role(user_id, organization_id)
        return Actor(user_id=user_id, organization_id=organization_id, role=role)
