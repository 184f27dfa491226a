# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum service.

This module provides the CurriculumService class for:
- Creating, listing and deleting curricula
- Building the year and semester tree on demand
- Placing, moving and removing course snapshots
- Returning the labeled tree

Year and semester nodes are get-or-create. The UNIQUE constraints on
(curriculum_id, year_level) and (year_id, semester) settle concurrent
creation: the losing insert fails inside a SAVEPOINT and the winner's row
is read back, so repeated calls always return the same node.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.errors import NotFoundError, ValidationFailedError, translate_integrity_error
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.curriculum.labels import semester_label, year_label
from src.infrastructure.database.models import (
    Course,
    Curriculum,
    CurriculumCourse,
    CurriculumSemester,
    CurriculumYear,
    Project,
)
from src.models.curriculum import (
    CurriculumCourseAddRequest,
    CurriculumCourseMoveRequest,
    CurriculumCourseResponse,
    CurriculumCreateRequest,
    CurriculumResponse,
    CurriculumSemesterNode,
    CurriculumTreeResponse,
    CurriculumYearNode,
)

logger = logging.getLogger(__name__)


class CurriculumServiceError(Exception):
    """Base exception for curriculum service errors."""

    pass


class CurriculumNotFoundError(CurriculumServiceError, NotFoundError):
    """Raised when a curriculum does not exist in the organization."""

    pass


class CurriculumCourseNotFoundError(CurriculumServiceError, NotFoundError):
    """Raised when a placed course does not exist in the curriculum."""

    pass


class InvalidCourseReferenceError(CurriculumServiceError, ValidationFailedError):
    """Raised when a catalog course or project is not in the organization."""

    pass


class CurriculumService:
    """Service for curricula and their course tree.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_curricula(
        self,
        actor: Actor,
        project_id: str | None = None,
    ) -> list[CurriculumResponse]:
        authorize(actor, Action.VIEW, Resource.CURRICULUM)
        query = select(Curriculum).where(Curriculum.organization_id == actor.organization_id)
        if project_id:
            query = query.where(Curriculum.project_id == project_id)
        result = await self.db.execute(
            query.order_by(Curriculum.school_year.desc(), Curriculum.program_name)
        )
        return [CurriculumResponse.model_validate(c) for c in result.scalars().all()]

    async def create_curriculum(
        self,
        actor: Actor,
        request: CurriculumCreateRequest,
    ) -> CurriculumResponse:
        authorize(actor, Action.CREATE, Resource.CURRICULUM)
        if request.project_id:
            await self._require_project(actor.organization_id, request.project_id)

        curriculum = Curriculum(organization_id=actor.organization_id, **request.model_dump())
        self.db.add(curriculum)
        await self.db.commit()
        await self.db.refresh(curriculum)

        logger.info(
            "Created curriculum: id=%s, program=%s, school_year=%s, by=%s",
            curriculum.id,
            curriculum.program_name,
            curriculum.school_year,
            actor.user_id,
        )
        return CurriculumResponse.model_validate(curriculum)

    async def delete_curriculum(self, actor: Actor, curriculum_id: str) -> None:
        authorize(actor, Action.DELETE, Resource.CURRICULUM)
        curriculum = await self._get_curriculum(actor.organization_id, curriculum_id)
        await self.db.delete(curriculum)
        await self.db.commit()
        logger.info("Deleted curriculum: id=%s, by=%s", curriculum_id, actor.user_id)

    async def ensure_year(self, curriculum_id: str, year_level: int) -> CurriculumYear:
        """Get or create the year node. Does not commit."""
        return await self._get_or_create(
            CurriculumYear,
            curriculum_id=curriculum_id,
            year_level=year_level,
        )

    async def ensure_semester(self, year_id: str, semester: int) -> CurriculumSemester:
        """Get or create the semester node. Does not commit."""
        return await self._get_or_create(
            CurriculumSemester,
            year_id=year_id,
            semester=semester,
        )

    async def add_course(
        self,
        actor: Actor,
        curriculum_id: str,
        request: CurriculumCourseAddRequest,
    ) -> CurriculumCourseResponse:
        """Place a copy of a catalog course in a year and semester.

        Code, description and units are copied now; later catalog edits
        do not reach the curriculum.

        Raises:
            InvalidCourseReferenceError: If the catalog course is not in the organization.
            ConflictError: If the semester already holds that course code.
        """
        authorize(actor, Action.UPDATE, Resource.CURRICULUM)
        curriculum = await self._get_curriculum(actor.organization_id, curriculum_id)
        course = await self._get_catalog_course(actor.organization_id, request.course_id)

        year = await self.ensure_year(curriculum.id, request.year_level)
        semester = await self.ensure_semester(year.id, request.semester)

        placed = CurriculumCourse(
            semester_id=semester.id,
            source_course_id=course.id,
            course_code=course.course_code,
            course_name=course.course_desc,
            units=course.units,
        )
        self.db.add(placed)
        await self._commit(f"{course.course_code} is already in that semester")
        await self.db.refresh(placed)

        logger.info(
            "Added course to curriculum: curriculum=%s, course=%s, year=%d, semester=%d",
            curriculum.id,
            course.course_code,
            request.year_level,
            request.semester,
        )
        return CurriculumCourseResponse.model_validate(placed)

    async def move_course(
        self,
        actor: Actor,
        curriculum_id: str,
        curriculum_course_id: str,
        request: CurriculumCourseMoveRequest,
    ) -> CurriculumCourseResponse:
        """Move a placed course to another year and semester."""
        authorize(actor, Action.UPDATE, Resource.CURRICULUM)
        curriculum = await self._get_curriculum(actor.organization_id, curriculum_id)
        placed = await self._get_placed_course(curriculum.id, curriculum_course_id)

        year = await self.ensure_year(curriculum.id, request.year_level)
        semester = await self.ensure_semester(year.id, request.semester)
        placed.semester_id = semester.id
        await self._commit(f"{placed.course_code} is already in that semester")
        await self.db.refresh(placed)

        logger.info(
            "Moved curriculum course: id=%s, year=%d, semester=%d",
            placed.id,
            request.year_level,
            request.semester,
        )
        return CurriculumCourseResponse.model_validate(placed)

    async def remove_course(
        self,
        actor: Actor,
        curriculum_id: str,
        curriculum_course_id: str,
    ) -> None:
        authorize(actor, Action.UPDATE, Resource.CURRICULUM)
        curriculum = await self._get_curriculum(actor.organization_id, curriculum_id)
        placed = await self._get_placed_course(curriculum.id, curriculum_course_id)
        await self.db.delete(placed)
        await self.db.commit()
        logger.info("Removed curriculum course: id=%s", curriculum_course_id)

    async def get_tree(self, actor: Actor, curriculum_id: str) -> CurriculumTreeResponse:
        """Curriculum with labeled years and semesters, in order."""
        authorize(actor, Action.VIEW, Resource.CURRICULUM)
        result = await self.db.execute(
            select(Curriculum)
            .options(
                selectinload(Curriculum.years)
                .selectinload(CurriculumYear.semesters)
                .selectinload(CurriculumSemester.courses)
            )
            .where(
                Curriculum.id == curriculum_id,
                Curriculum.organization_id == actor.organization_id,
            )
            .execution_options(populate_existing=True)
        )
        curriculum = result.scalar_one_or_none()
        if not curriculum:
            raise CurriculumNotFoundError(f"Curriculum {curriculum_id} not found")

        years = [
            CurriculumYearNode(
                id=year.id,
                year_level=year.year_level,
                label=year_label(year.year_level),
                semesters=[
                    CurriculumSemesterNode(
                        id=sem.id,
                        semester=sem.semester,
                        label=semester_label(sem.semester),
                        total_units=sum((c.units for c in sem.courses), Decimal("0")),
                        courses=[CurriculumCourseResponse.model_validate(c) for c in sem.courses],
                    )
                    for sem in year.semesters
                ],
            )
            for year in curriculum.years
        ]
        return CurriculumTreeResponse(
            curriculum=CurriculumResponse.model_validate(curriculum),
            years=years,
        )

    async def _get_or_create(self, model: type, **key):
        existing = await self._find(model, **key)
        if existing:
            return existing

        try:
            async with self.db.begin_nested():
                node = model(**key)
                self.db.add(node)
            return node
        except IntegrityError:
            # Lost a concurrent insert; the other writer's row is committed
            logger.debug("Concurrent %s insert for %s, reading winner", model.__name__, key)

        winner = await self._find(model, **key)
        if winner is None:
            raise CurriculumServiceError(f"Could not create {model.__name__} for {key}")
        return winner

    async def _find(self, model: type, **key):
        result = await self.db.execute(select(model).filter_by(**key))
        return result.scalar_one_or_none()

    async def _get_curriculum(self, organization_id: str, curriculum_id: str) -> Curriculum:
        result = await self.db.execute(
            select(Curriculum).where(
                Curriculum.id == curriculum_id,
                Curriculum.organization_id == organization_id,
            )
        )
        curriculum = result.scalar_one_or_none()
        if not curriculum:
            raise CurriculumNotFoundError(f"Curriculum {curriculum_id} not found")
        return curriculum

    async def _get_placed_course(
        self,
        curriculum_id: str,
        curriculum_course_id: str,
    ) -> CurriculumCourse:
        result = await self.db.execute(
            select(CurriculumCourse)
            .join(CurriculumSemester, CurriculumSemester.id == CurriculumCourse.semester_id)
            .join(CurriculumYear, CurriculumYear.id == CurriculumSemester.year_id)
            .where(
                CurriculumCourse.id == curriculum_course_id,
                CurriculumYear.curriculum_id == curriculum_id,
            )
        )
        placed = result.scalar_one_or_none()
        if not placed:
            raise CurriculumCourseNotFoundError(f"Curriculum course {curriculum_course_id} not found")
        return placed

    async def _get_catalog_course(self, organization_id: str, course_id: str) -> Course:
        result = await self.db.execute(
            select(Course).where(Course.id == course_id, Course.organization_id == organization_id)
        )
        course = result.scalar_one_or_none()
        if not course:
            raise InvalidCourseReferenceError(f"Course {course_id} not found")
        return course

    async def _require_project(self, organization_id: str, project_id: str) -> None:
        result = await self.db.execute(
            select(Project.id).where(
                Project.id == project_id,
                Project.organization_id == organization_id,
            )
        )
        if result.scalar_one_or_none() is None:
            raise InvalidCourseReferenceError(f"Project {project_id} not found")

    async def _commit(self, conflict_message: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, conflict_message)
