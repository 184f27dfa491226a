# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization theme colors."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.access import Action, Actor, Resource, authorize
from src.infrastructure.database.models import OrganizationTheme
from src.models.organization import ThemeRequest, ThemeResponse

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_COLOR = "#800020"
DEFAULT_SECONDARY_COLOR = "#D4AF37"
DEFAULT_ACCENT_COLOR = "#FFD700"


class ThemeService:
    """Reads and stores an organization's brand colors.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_theme(self, actor: Actor) -> ThemeResponse:
        """Stored colors, or the defaults when none are stored."""
        authorize(actor, Action.VIEW, Resource.ORGANIZATION)
        theme = await self.db.get(OrganizationTheme, actor.organization_id)
        if theme is None:
            return ThemeResponse(
                organization_id=actor.organization_id,
                primary_color=DEFAULT_PRIMARY_COLOR,
                secondary_color=DEFAULT_SECONDARY_COLOR,
                accent_color=DEFAULT_ACCENT_COLOR,
                is_default=True,
            )
        return self._to_response(theme)

    async def update_theme(self, actor: Actor, request: ThemeRequest) -> ThemeResponse:
        """Insert or replace the organization's colors."""
        authorize(actor, Action.UPDATE, Resource.SETTINGS)
        theme = await self.db.get(OrganizationTheme, actor.organization_id)
        if theme is None:
            theme = OrganizationTheme(organization_id=actor.organization_id)
            self.db.add(theme)

        theme.primary_color = request.primary_color.upper()
        theme.secondary_color = request.secondary_color.upper()
        theme.accent_color = request.accent_color.upper()
        await self.db.commit()
        await self.db.refresh(theme)

        logger.info("Updated theme: org=%s, by=%s", actor.organization_id, actor.user_id)
        return self._to_response(theme)

    async def reset_theme(self, actor: Actor) -> ThemeResponse:
        """Drop stored colors so the defaults apply again."""
        authorize(actor, Action.UPDATE, Resource.SETTINGS)
        theme = await self.db.get(OrganizationTheme, actor.organization_id)
        if theme is not None:
            await self.db.delete(theme)
            await self.db.commit()
        return await self.get_theme(actor)

    def _to_response(self, theme: OrganizationTheme) -> ThemeResponse:
        return ThemeResponse(
            organization_id=theme.organization_id,
            primary_color=theme.primary_color,
            secondary_color=theme.secondary_color,
            accent_color=theme.accent_color,
            is_default=False,
        )
