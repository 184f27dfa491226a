# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering service.

This module provides the OfferingService class for:
- Opening a course for a section with its meeting schedules
- Editing an offering and reconciling its schedules
- Listing offerings by term, program or project
- Deleting offerings nobody is enrolled in
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.errors import ConflictError, NotFoundError, ValidationFailedError
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.curriculum.labels import offering_semester_label
from src.domains.offering.schedule_diff import diff_schedules
from src.infrastructure.database.models import (
    AcademicProgram,
    Course,
    CourseOffering,
    CourseOfferingSchedule,
    Enrollment,
    Project,
)
from src.models.offering import (
    OfferingRequest,
    OfferingResponse,
    OfferingUpdateResponse,
    ScheduleResponse,
    ScheduleSyncResult,
)

logger = logging.getLogger(__name__)


class OfferingServiceError(Exception):
    """Base exception for offering service errors."""

    pass


class OfferingNotFoundError(OfferingServiceError, NotFoundError):
    """Raised when an offering does not exist in the organization."""

    pass


class InvalidOfferingReferenceError(OfferingServiceError, ValidationFailedError):
    """Raised when the program, course or project is not in the organization."""

    pass


class OfferingInUseError(OfferingServiceError, ConflictError):
    """Raised when deleting an offering that still has enrollments."""

    pass


class OfferingService:
    """Service for course offerings and their schedules.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_offering(self, actor: Actor, request: OfferingRequest) -> OfferingResponse:
        """Create an offering and its schedules in one transaction.

        Raises:
            InvalidOfferingReferenceError: If a referenced row is not in the organization.
        """
        authorize(actor, Action.CREATE, Resource.OFFERING)
        await self._check_references(actor.organization_id, request)

        offering = CourseOffering(
            organization_id=actor.organization_id,
            **request.model_dump(exclude={"schedules"}),
        )
        offering.schedules = [
            CourseOfferingSchedule(**item.model_dump(exclude={"id"})) for item in request.schedules
        ]
        self.db.add(offering)
        await self.db.commit()

        logger.info(
            "Created offering: id=%s, course=%s, section=%s, schedules=%d, by=%s",
            offering.id,
            request.course_id,
            request.section,
            len(request.schedules),
            actor.user_id,
        )
        return await self.get_offering(actor, offering.id)

    async def get_offering(self, actor: Actor, offering_id: str) -> OfferingResponse:
        authorize(actor, Action.VIEW, Resource.OFFERING)
        offering = await self.get_scoped(actor.organization_id, offering_id, with_details=True)
        return self._to_response(offering)

    async def list_offerings(
        self,
        actor: Actor,
        project_id: str | None = None,
        program_id: str | None = None,
        academic_year: str | None = None,
        semester: int | None = None,
        year_level: int | None = None,
    ) -> list[OfferingResponse]:
        """List offerings matching every given filter."""
        authorize(actor, Action.VIEW, Resource.OFFERING)
        query = (
            select(CourseOffering)
            .options(selectinload(CourseOffering.course), selectinload(CourseOffering.schedules))
            .where(CourseOffering.organization_id == actor.organization_id)
        )
        filters = {
            CourseOffering.project_id: project_id,
            CourseOffering.program_id: program_id,
            CourseOffering.academic_year: academic_year,
            CourseOffering.semester: semester,
            CourseOffering.year_level: year_level,
        }
        for column, value in filters.items():
            if value is not None:
                query = query.where(column == value)

        result = await self.db.execute(
            query.order_by(
                CourseOffering.academic_year.desc(),
                CourseOffering.semester,
                CourseOffering.year_level,
                CourseOffering.section,
            )
        )
        return [self._to_response(o) for o in result.scalars().all()]

    async def update_offering(
        self,
        actor: Actor,
        offering_id: str,
        request: OfferingRequest,
    ) -> OfferingUpdateResponse:
        """Replace an offering's fields and reconcile its schedules.

        Incoming schedules without an id are inserted, those with an id are
        updated, and persisted schedules missing from the request are
        deleted, all in one transaction.

        Raises:
            UnknownScheduleError: If an incoming schedule id is not this offering's.
        """
        authorize(actor, Action.UPDATE, Resource.OFFERING)
        offering = await self.get_scoped(actor.organization_id, offering_id, with_details=True)
        await self._check_references(actor.organization_id, request)

        persisted = {s.id: s for s in offering.schedules}
        diff = diff_schedules(persisted.keys(), request.schedules)

        for field, value in request.model_dump(exclude={"schedules"}).items():
            setattr(offering, field, value)

        for schedule_id in diff.to_delete:
            offering.schedules.remove(persisted[schedule_id])
        for item in diff.to_update:
            schedule = persisted[item.id]
            for field, value in item.model_dump(exclude={"id"}).items():
                setattr(schedule, field, value)
        for item in diff.to_insert:
            offering.schedules.append(CourseOfferingSchedule(**item.model_dump(exclude={"id"})))

        await self.db.commit()

        logger.info(
            "Updated offering: id=%s, inserted=%d, updated=%d, deleted=%d, by=%s",
            offering.id,
            len(diff.to_insert),
            len(diff.to_update),
            len(diff.to_delete),
            actor.user_id,
        )
        return OfferingUpdateResponse(
            offering=await self.get_offering(actor, offering.id),
            schedules=ScheduleSyncResult(
                inserted=len(diff.to_insert),
                updated=len(diff.to_update),
                deleted=len(diff.to_delete),
            ),
        )

    async def delete_offering(self, actor: Actor, offering_id: str) -> None:
        """Delete an offering and its schedules.

        Raises:
            OfferingInUseError: If students are enrolled in it.
        """
        authorize(actor, Action.DELETE, Resource.OFFERING)
        offering = await self.get_scoped(actor.organization_id, offering_id)

        result = await self.db.execute(
            select(func.count())
            .select_from(Enrollment)
            .where(Enrollment.course_offering_id == offering.id)
        )
        enrolled = result.scalar_one()
        if enrolled:
            raise OfferingInUseError(f"{enrolled} students are enrolled in this offering")

        await self.db.delete(offering)
        await self.db.commit()
        logger.info("Deleted offering: id=%s, by=%s", offering_id, actor.user_id)

    async def get_scoped(
        self,
        organization_id: str,
        offering_id: str,
        with_details: bool = False,
    ) -> CourseOffering:
        """Load an offering of the organization.

        Raises:
            OfferingNotFoundError: If missing or owned by another organization.
        """
        query = select(CourseOffering).where(
            CourseOffering.id == offering_id,
            CourseOffering.organization_id == organization_id,
        )
        if with_details:
            query = query.options(
                selectinload(CourseOffering.course),
                selectinload(CourseOffering.schedules),
            ).execution_options(populate_existing=True)

        result = await self.db.execute(query)
        offering = result.scalar_one_or_none()
        if not offering:
            raise OfferingNotFoundError(f"Offering {offering_id} not found")
        return offering

    async def _check_references(self, organization_id: str, request: OfferingRequest) -> None:
        references = [
            (AcademicProgram, request.program_id, "Program"),
            (Course, request.course_id, "Course"),
        ]
        if request.project_id:
            references.append((Project, request.project_id, "Project"))

        for model, row_id, label in references:
            result = await self.db.execute(
                select(model.id).where(model.id == row_id, model.organization_id == organization_id)
            )
            if result.scalar_one_or_none() is None:
                raise InvalidOfferingReferenceError(f"{label} {row_id} not found")

    def _to_response(self, offering: CourseOffering) -> OfferingResponse:
        return OfferingResponse(
            id=offering.id,
            organization_id=offering.organization_id,
            program_id=offering.program_id,
            course_id=offering.course_id,
            course_code=offering.course.course_code,
            course_desc=offering.course.course_desc,
            academic_year=offering.academic_year,
            semester=offering.semester,
            semester_label=offering_semester_label(offering.semester),
            year_level=offering.year_level,
            section=offering.section,
            slot=offering.slot,
            project_id=offering.project_id,
            schedules=[
                ScheduleResponse.model_validate(s)
                for s in sorted(offering.schedules, key=lambda s: (s.day, s.start_time))
            ],
        )
