# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Sequential applicant and student numbers.

Each organization has one numbering setting per type. A number is claimed
by locking the setting row, rendering its next_number and incrementing it
in the caller's transaction, so two concurrent claims never render the
same value.

Format strings use {prefix}, {number} and {year}; {number} is zero padded
to the setting's padding. Other text is copied as-is.

Example:
    >>> render_number("{prefix}{year}-{number}", prefix="A", number=7, padding=5, year=2025)
    'A2025-00007'
"""

import logging
from enum import Enum

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ValidationFailedError
from src.domains.access import Action, Actor, Resource, authorize
from src.infrastructure.database.models import NumberingSetting
from src.models.organization import NumberingSettingResponse, NumberingSettingUpdateRequest
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "{prefix}{year}-{number}"
DEFAULT_PADDING = 5


class NumberingType(str, Enum):
    """Identifier sequences kept per organization."""

    APPLICANT_NO = "applicant_no"
    STUDENT_NO = "student_no"


DEFAULT_PREFIXES = {
    NumberingType.APPLICANT_NO: "A",
    NumberingType.STUDENT_NO: "S",
}


class NumberingServiceError(Exception):
    """Base exception for numbering service errors."""

    pass


class InvalidFormatError(NumberingServiceError, ValidationFailedError):
    """Raised when a format string cannot produce unique numbers."""

    pass


def render_number(
    format: str,
    prefix: str,
    number: int,
    padding: int,
    year: int | None = None,
) -> str:
    """Render one identifier from a numbering format.

    Args:
        format: Template with {prefix}, {number} and optional {year}.
        prefix: Text substituted for {prefix}.
        number: Sequence value substituted for {number}.
        padding: Minimum digits of {number}.
        year: Value substituted for {year}; defaults to the current year.

    Returns:
        The rendered identifier.
    """
    if year is None:
        year = utc_now().year
    return (
        format.replace("{prefix}", prefix)
        .replace("{year}", str(year))
        .replace("{number}", str(number).zfill(padding))
    )


def validate_format(format: str) -> None:
    """Reject formats that would render the same value twice.

    Raises:
        InvalidFormatError: If {number} is missing.
    """
    if "{number}" not in format:
        raise InvalidFormatError("Numbering format must contain {number}")


class NumberingService:
    """Service for numbering settings and number claims.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_settings(self, actor: Actor) -> list[NumberingSettingResponse]:
        """List both numbering settings, creating missing ones with defaults."""
        authorize(actor, Action.VIEW, Resource.SETTINGS)
        settings = [await self._get_or_create(actor.organization_id, t) for t in NumberingType]
        await self.db.commit()
        return [self._to_response(s) for s in settings]

    async def update_setting(
        self,
        actor: Actor,
        numbering_type: NumberingType,
        request: NumberingSettingUpdateRequest,
    ) -> NumberingSettingResponse:
        """Edit a numbering setting.

        Raises:
            InvalidFormatError: If the new format lacks {number}.
        """
        authorize(actor, Action.UPDATE, Resource.SETTINGS)
        if request.format is not None:
            validate_format(request.format)

        setting = await self._get_or_create(actor.organization_id, numbering_type, lock=True)
        for field, value in request.model_dump(exclude_none=True).items():
            setattr(setting, field, value)
        await self.db.commit()
        await self.db.refresh(setting)

        logger.info(
            "Updated numbering: org=%s, type=%s, by=%s",
            actor.organization_id,
            numbering_type.value,
            actor.user_id,
        )
        return self._to_response(setting)

    async def claim_next(self, organization_id: str, numbering_type: NumberingType) -> str:
        """Claim the next identifier of a sequence.

        Locks the setting row, renders the current next_number and
        increments it. Does not commit; the claim becomes permanent with
        the caller's transaction and is released if that rolls back.

        Args:
            organization_id: Owning organization.
            numbering_type: Which sequence to draw from.

        Returns:
            The rendered identifier.
        """
        setting = await self._get_or_create(organization_id, numbering_type, lock=True)
        value = render_number(setting.format, setting.prefix, setting.next_number, setting.padding)
        setting.next_number += 1
        await self.db.flush()

        logger.debug(
            "Claimed number: org=%s, type=%s, value=%s",
            organization_id,
            numbering_type.value,
            value,
        )
        return value

    async def _get_or_create(
        self,
        organization_id: str,
        numbering_type: NumberingType,
        lock: bool = False,
    ) -> NumberingSetting:
        setting = await self._find(organization_id, numbering_type, lock)
        if setting:
            return setting

        try:
            async with self.db.begin_nested():
                self.db.add(
                    NumberingSetting(
                        organization_id=organization_id,
                        type=numbering_type.value,
                        prefix=DEFAULT_PREFIXES[numbering_type],
                        next_number=1,
                        format=DEFAULT_FORMAT,
                        padding=DEFAULT_PADDING,
                    )
                )
        except IntegrityError:
            # Created concurrently; fall through to the winner's row
            pass

        return await self._find(organization_id, numbering_type, lock)

    async def _find(
        self,
        organization_id: str,
        numbering_type: NumberingType,
        lock: bool,
    ) -> NumberingSetting | None:
        query = select(NumberingSetting).where(
            NumberingSetting.organization_id == organization_id,
            NumberingSetting.type == numbering_type.value,
        )
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    def _to_response(self, setting: NumberingSetting) -> NumberingSettingResponse:
        return NumberingSettingResponse(
            type=setting.type,
            prefix=setting.prefix,
            next_number=setting.next_number,
            format=setting.format,
            padding=setting.padding,
            preview=render_number(
                setting.format, setting.prefix, setting.next_number, setting.padding
            ),
        )
