# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic catalog service.

This module provides the CatalogService class for CRUD over the four
catalog entities of an organization: academic levels, academic programs,
colleges and courses. All four share the same rules: rows are scoped to
the organization, their code is unique per organization, and a row still
referenced elsewhere cannot be deleted.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    is_unique_violation,
    translate_integrity_error,
)
from src.domains.access import Action, Actor, Resource, authorize
from src.infrastructure.database.models import (
    AcademicLevel,
    AcademicProgram,
    College,
    Course,
)
from src.models.catalog import (
    AcademicLevelResponse,
    AcademicProgramRequest,
    AcademicProgramResponse,
    CollegeResponse,
    CourseResponse,
)

logger = logging.getLogger(__name__)


class CatalogKind(str, Enum):
    """Catalog entity families."""

    ACADEMIC_LEVELS = "academic-levels"
    ACADEMIC_PROGRAMS = "academic-programs"
    COLLEGES = "colleges"
    COURSES = "courses"


@dataclass(frozen=True)
class _CatalogEntity:
    model: type
    response: type[BaseModel]
    code_field: str
    label: str


_ENTITIES = {
    CatalogKind.ACADEMIC_LEVELS: _CatalogEntity(
        AcademicLevel, AcademicLevelResponse, "academic_level", "Academic level"
    ),
    CatalogKind.ACADEMIC_PROGRAMS: _CatalogEntity(
        AcademicProgram, AcademicProgramResponse, "program_code", "Program"
    ),
    CatalogKind.COLLEGES: _CatalogEntity(College, CollegeResponse, "cc_code", "College"),
    CatalogKind.COURSES: _CatalogEntity(Course, CourseResponse, "course_code", "Course"),
}


class CatalogServiceError(Exception):
    """Base exception for catalog service errors."""

    pass


class CatalogItemNotFoundError(CatalogServiceError, NotFoundError):
    """Raised when a catalog row does not exist in the organization."""

    pass


class DuplicateCodeError(CatalogServiceError, ConflictError):
    """Raised when a code is already used in the organization."""

    pass


class CatalogItemInUseError(CatalogServiceError, ConflictError):
    """Raised when deleting a row that other rows still reference."""

    pass


class InvalidAcademicLevelError(CatalogServiceError, ValidationFailedError):
    """Raised when a program points at another organization's level."""

    pass


class CatalogService:
    """Service for the academic catalog.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_items(self, actor: Actor, kind: CatalogKind) -> list[BaseModel]:
        """List catalog rows ordered by their code."""
        authorize(actor, Action.VIEW, Resource.CATALOG)
        entity = _ENTITIES[kind]
        result = await self.db.execute(
            select(entity.model)
            .where(entity.model.organization_id == actor.organization_id)
            .order_by(getattr(entity.model, entity.code_field))
        )
        return [entity.response.model_validate(row) for row in result.scalars().all()]

    async def get_item(self, actor: Actor, kind: CatalogKind, item_id: str) -> BaseModel:
        authorize(actor, Action.VIEW, Resource.CATALOG)
        entity = _ENTITIES[kind]
        row = await self.get_scoped(kind, actor.organization_id, item_id)
        return entity.response.model_validate(row)

    async def create_item(self, actor: Actor, kind: CatalogKind, request: BaseModel) -> BaseModel:
        """Create a catalog row.

        Raises:
            DuplicateCodeError: If the code is taken.
            InvalidAcademicLevelError: If a program's level is not in the organization.
        """
        authorize(actor, Action.CREATE, Resource.CATALOG)
        entity = _ENTITIES[kind]
        await self._check_references(actor, request)

        row = entity.model(organization_id=actor.organization_id, **request.model_dump())
        self.db.add(row)
        await self._commit(entity, request)
        await self.db.refresh(row)

        logger.info(
            "Created %s: %s, org=%s, by=%s",
            entity.label.lower(),
            getattr(row, entity.code_field),
            actor.organization_id,
            actor.user_id,
        )
        return entity.response.model_validate(row)

    async def update_item(
        self,
        actor: Actor,
        kind: CatalogKind,
        item_id: str,
        request: BaseModel,
    ) -> BaseModel:
        """Replace a catalog row's fields.

        Curricula that already copied a course keep their copy.
        """
        authorize(actor, Action.UPDATE, Resource.CATALOG)
        entity = _ENTITIES[kind]
        row = await self.get_scoped(kind, actor.organization_id, item_id)
        await self._check_references(actor, request)

        for field, value in request.model_dump().items():
            setattr(row, field, value)
        await self._commit(entity, request)
        await self.db.refresh(row)

        logger.info("Updated %s: %s, by=%s", entity.label.lower(), item_id, actor.user_id)
        return entity.response.model_validate(row)

    async def delete_item(self, actor: Actor, kind: CatalogKind, item_id: str) -> None:
        """Delete a catalog row.

        Raises:
            CatalogItemInUseError: If offerings or programs still reference it.
        """
        authorize(actor, Action.DELETE, Resource.CATALOG)
        entity = _ENTITIES[kind]
        row = await self.get_scoped(kind, actor.organization_id, item_id)

        await self.db.delete(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise CatalogItemInUseError(f"{entity.label} is still in use")

        logger.info("Deleted %s: %s, by=%s", entity.label.lower(), item_id, actor.user_id)

    async def get_scoped(self, kind: CatalogKind, organization_id: str, item_id: str):
        """Load a catalog row of the organization.

        Raises:
            CatalogItemNotFoundError: If missing or owned by another organization.
        """
        entity = _ENTITIES[kind]
        result = await self.db.execute(
            select(entity.model).where(
                entity.model.id == item_id,
                entity.model.organization_id == organization_id,
            )
        )
        row = result.scalar_one_or_none()
        if not row:
            raise CatalogItemNotFoundError(f"{entity.label} {item_id} not found")
        return row

    async def _check_references(self, actor: Actor, request: BaseModel) -> None:
        if not isinstance(request, AcademicProgramRequest):
            return
        try:
            await self.get_scoped(
                CatalogKind.ACADEMIC_LEVELS, actor.organization_id, request.academic_level_id
            )
        except CatalogItemNotFoundError:
            raise InvalidAcademicLevelError(
                f"Academic level {request.academic_level_id} not found"
            )

    async def _commit(self, entity: _CatalogEntity, request: BaseModel) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if is_unique_violation(e):
                raise DuplicateCodeError(
                    f"{entity.label} '{getattr(request, entity.code_field)}' already exists"
                )
            raise translate_integrity_error(e, f"{entity.label} could not be saved")
