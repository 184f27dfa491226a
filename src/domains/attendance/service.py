# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance service.

This module provides the AttendanceService class for:
- Recording faculty clock entries per project and day
- Listing attendance rows (faculty see only their own)
- Building the monthly daily time record (DTR) as data or PDF
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, translate_integrity_error
from src.domains.access import Action, Actor, Resource, authorize, can
from src.domains.attendance.dtr import build_month, display_slots
from src.domains.attendance.pdf import render_dtr_pdf
from src.domains.project.service import ProjectNotFoundError
from src.infrastructure.database.models import Attendance, Project, TeamMember
from src.models.project import (
    AttendanceRecordRequest,
    AttendanceResponse,
    DTRResponse,
    TimeSlot,
)
from src.utils.datetime import month_range

logger = logging.getLogger(__name__)


class AttendanceServiceError(Exception):
    """Base exception for attendance service errors."""

    pass


class FacultyNotFoundError(AttendanceServiceError, NotFoundError):
    """Raised when the faculty member is not part of the organization."""

    pass


class AttendanceService:
    """Service for faculty attendance.

    Callers without the manage grant on attendance may only read and
    write their own rows.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def record_time(
        self,
        actor: Actor,
        project_id: str,
        request: AttendanceRecordRequest,
    ) -> AttendanceResponse:
        """Append a clock entry to the faculty member's row for that day.

        The row for (faculty, project, date) is created on first use.

        Raises:
            PermissionDeniedError: If recording for someone else without the manage grant.
            ProjectNotFoundError: If the project is not in the organization.
            FacultyNotFoundError: If the faculty member is not a member.
        """
        authorize(actor, Action.CREATE, Resource.ATTENDANCE)
        faculty_id = self._target_faculty(actor, request.faculty_id)
        await self._get_project(actor, project_id)
        await self._get_member(actor.organization_id, faculty_id)

        row = await self._find_row(faculty_id, project_id, request.date)
        if row is None:
            row = Attendance(
                organization_id=actor.organization_id,
                project_id=project_id,
                faculty_id=faculty_id,
                date=request.date,
                times=[],
            )
            self.db.add(row)

        # JSON columns only track reassignment
        row.times = [*row.times, {"label": request.label, "time": request.time}]

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, "Attendance row already exists") from e
        await self.db.refresh(row)

        logger.info(
            "Recorded attendance: faculty=%s, project=%s, date=%s, label=%s",
            faculty_id,
            project_id,
            request.date,
            request.label,
        )
        return self._to_response(row)

    async def list_attendance(
        self,
        actor: Actor,
        project_id: str,
        faculty_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[AttendanceResponse]:
        """List attendance rows of a project, newest day first."""
        authorize(actor, Action.VIEW, Resource.ATTENDANCE)
        await self._get_project(actor, project_id)

        query = select(Attendance).where(
            Attendance.organization_id == actor.organization_id,
            Attendance.project_id == project_id,
        )
        if not can(Action.MANAGE, Resource.ATTENDANCE, actor.role):
            query = query.where(Attendance.faculty_id == actor.user_id)
        elif faculty_id:
            query = query.where(Attendance.faculty_id == faculty_id)
        if date_from:
            query = query.where(Attendance.date >= date_from)
        if date_to:
            query = query.where(Attendance.date <= date_to)

        result = await self.db.execute(query.order_by(Attendance.date.desc()))
        return [self._to_response(row) for row in result.scalars().all()]

    async def get_dtr(
        self,
        actor: Actor,
        project_id: str,
        year: int,
        month: int,
        faculty_id: str | None = None,
    ) -> DTRResponse:
        """Build the daily time record of one faculty member for a month."""
        authorize(actor, Action.VIEW, Resource.ATTENDANCE)
        faculty_id = self._target_faculty(actor, faculty_id)
        await self._get_project(actor, project_id)
        member = await self._get_member(actor.organization_id, faculty_id)

        first, last = month_range(year, month)
        result = await self.db.execute(
            select(Attendance).where(
                Attendance.organization_id == actor.organization_id,
                Attendance.project_id == project_id,
                Attendance.faculty_id == faculty_id,
                Attendance.date >= first,
                Attendance.date <= last,
            )
        )
        records: dict[date, list[dict[str, Any]]] = defaultdict(list)
        for row in result.scalars().all():
            records[row.date].extend(row.times or [])

        return DTRResponse(
            faculty_id=faculty_id,
            name=member.name,
            year=year,
            month=month,
            days=build_month(year, month, records),
        )

    async def dtr_pdf(
        self,
        actor: Actor,
        project_id: str,
        year: int,
        month: int,
        faculty_id: str | None = None,
    ) -> tuple[str, bytes]:
        """Render the daily time record as a PDF.

        Returns:
            Tuple of (download filename, PDF bytes).
        """
        dtr = await self.get_dtr(actor, project_id, year, month, faculty_id)
        content = render_dtr_pdf(dtr.name, dtr.month, dtr.year, dtr.days)
        safe_name = "_".join(dtr.name.split()) or "faculty"
        return f"DTR_{safe_name}_{year}-{month:02d}.pdf", content

    def _target_faculty(self, actor: Actor, faculty_id: str | None) -> str:
        if not faculty_id or faculty_id == actor.user_id:
            return actor.user_id
        authorize(actor, Action.MANAGE, Resource.ATTENDANCE)
        return faculty_id

    async def _get_project(self, actor: Actor, project_id: str) -> Project:
        result = await self.db.execute(
            select(Project).where(
                Project.id == project_id,
                Project.organization_id == actor.organization_id,
            )
        )
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(f"Project {project_id} not found")
        return project

    async def _get_member(self, organization_id: str, user_id: str) -> TeamMember:
        result = await self.db.execute(
            select(TeamMember).where(
                TeamMember.organization_id == organization_id,
                TeamMember.user_id == user_id,
            )
        )
        member = result.scalar_one_or_none()
        if not member:
            raise FacultyNotFoundError(f"Faculty member {user_id} not found")
        return member

    async def _find_row(self, faculty_id: str, project_id: str, day: date) -> Attendance | None:
        result = await self.db.execute(
            select(Attendance).where(
                Attendance.faculty_id == faculty_id,
                Attendance.project_id == project_id,
                Attendance.date == day,
            )
        )
        return result.scalar_one_or_none()

    def _to_response(self, row: Attendance) -> AttendanceResponse:
        response = AttendanceResponse.model_validate(row)
        response.display = [TimeSlot(**slot) for slot in display_slots(row.times or [])]
        return response
