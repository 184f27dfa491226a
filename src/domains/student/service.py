# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for applicants and students.

This module provides the StudentService class for:
- Creating applicants under the plan's student ceiling
- Listing and searching students by their derived status
- Status changes through the status state machine
- Issuing applicant and student numbers
"""

import logging

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationFailedError, translate_integrity_error
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.numbering import NumberingService, NumberingType
from src.domains.organization.usage import UsageGuard, UsageKind
from src.domains.student.status import can_transition, derive_current_status
from src.infrastructure.database.models import Student, StudentEnrollmentStatus
from src.models.student import (
    StatusChangeRequest,
    StatusHistoryResponse,
    StudentCreateRequest,
    StudentResponse,
    StudentStatus,
    StudentUpdateRequest,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class StudentServiceError(Exception):
    """Base exception for student service errors."""

    pass


class StudentNotFoundError(StudentServiceError, NotFoundError):
    """Raised when a student does not exist in the organization."""

    pass


class InvalidStatusTransitionError(StudentServiceError, ValidationFailedError):
    """Raised when a status change is not allowed from the current status."""

    pass


def latest_status_subquery():
    """Subquery of (student_id, status) for each student's latest history row.

    Orders like derive_current_status: changed_at, then id.
    """
    ranked = select(
        StudentEnrollmentStatus.student_id,
        StudentEnrollmentStatus.status,
        func.row_number()
        .over(
            partition_by=StudentEnrollmentStatus.student_id,
            order_by=(
                StudentEnrollmentStatus.changed_at.desc(),
                StudentEnrollmentStatus.id.desc(),
            ),
        )
        .label("rn"),
    ).subquery()
    return (
        select(ranked.c.student_id, ranked.c.status)
        .where(ranked.c.rn == 1)
        .subquery("latest_status")
    )


class StudentService:
    """Service for student records and their status history.

    Attributes:
        db: Async database session.
        usage: Usage guard sharing the same session.
        numbering: Numbering service sharing the same session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.usage = UsageGuard(db)
        self.numbering = NumberingService(db)

    async def create_student(self, actor: Actor, request: StudentCreateRequest) -> StudentResponse:
        """Create an applicant.

        The applicant number is claimed from the organization's numbering
        setting unless the request supplies one.

        Raises:
            UsageLimitExceededError: If the plan's student ceiling is reached.
            ConflictError: If the applicant number is already used.
        """
        authorize(actor, Action.CREATE, Resource.STUDENT)
        await self.usage.reserve(actor.organization_id, UsageKind.STUDENTS)

        applicant_no = request.applicant_no or await self.numbering.claim_next(
            actor.organization_id, NumberingType.APPLICANT_NO
        )
        student = Student(
            organization_id=actor.organization_id,
            applicant_no=applicant_no,
            **request.model_dump(exclude={"applicant_no"}),
        )
        self.db.add(student)
        try:
            await self.db.flush()
            await self.append_status(student, StudentStatus.APPLICANT, actor.user_id)
            await self.usage.refresh(actor.organization_id)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, f"Applicant number {applicant_no} is already used")
        await self.db.refresh(student)

        logger.info(
            "Created applicant: id=%s, applicant_no=%s, org=%s, by=%s",
            student.id,
            applicant_no,
            actor.organization_id,
            actor.user_id,
        )
        return self._to_response(student, StudentStatus.APPLICANT)

    async def get_student(self, actor: Actor, student_id: str) -> StudentResponse:
        """Get one student with its current status."""
        authorize(actor, Action.VIEW, Resource.STUDENT)
        student = await self.get_scoped(actor.organization_id, student_id)
        return self._to_response(student, await self.current_status(student.id))

    async def list_students(
        self,
        actor: Actor,
        status: StudentStatus | None = None,
    ) -> list[StudentResponse]:
        """List students, optionally only those whose current status matches."""
        authorize(actor, Action.VIEW, Resource.STUDENT)
        latest = latest_status_subquery()
        query = (
            select(Student, latest.c.status)
            .outerjoin(latest, latest.c.student_id == Student.id)
            .where(Student.organization_id == actor.organization_id)
            .order_by(Student.lastname, Student.firstname)
        )
        if status:
            query = query.where(latest.c.status == status.value)

        result = await self.db.execute(query)
        return [
            self._to_response(student, StudentStatus(current) if current else None)
            for student, current in result.all()
        ]

    async def search_applicants(self, actor: Actor, term: str) -> list[StudentResponse]:
        """Case-insensitive search over applicants' names and applicant numbers."""
        authorize(actor, Action.VIEW, Resource.STUDENT)
        pattern = f"%{term.strip()}%"
        latest = latest_status_subquery()
        result = await self.db.execute(
            select(Student)
            .join(
                latest,
                and_(
                    latest.c.student_id == Student.id,
                    latest.c.status == StudentStatus.APPLICANT.value,
                ),
            )
            .where(
                Student.organization_id == actor.organization_id,
                or_(
                    Student.firstname.ilike(pattern),
                    Student.lastname.ilike(pattern),
                    Student.applicant_no.ilike(pattern),
                ),
            )
            .order_by(Student.lastname, Student.firstname)
        )
        return [
            self._to_response(student, StudentStatus.APPLICANT)
            for student in result.scalars().all()
        ]

    async def update_student(
        self,
        actor: Actor,
        student_id: str,
        request: StudentUpdateRequest,
    ) -> StudentResponse:
        """Update personal details."""
        authorize(actor, Action.UPDATE, Resource.STUDENT)
        student = await self.get_scoped(actor.organization_id, student_id)

        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(student, field, value)
        await self.db.commit()
        await self.db.refresh(student)

        logger.info("Updated student: id=%s, by=%s", student.id, actor.user_id)
        return self._to_response(student, await self.current_status(student.id))

    async def delete_student(self, actor: Actor, student_id: str) -> None:
        """Delete a student with its history, documents and enrollments."""
        authorize(actor, Action.DELETE, Resource.STUDENT)
        student = await self.get_scoped(actor.organization_id, student_id)

        await self.db.execute(delete(Student).where(Student.id == student.id))
        await self.usage.refresh(actor.organization_id)
        await self.db.commit()

        logger.info("Deleted student: id=%s, by=%s", student_id, actor.user_id)

    async def change_status(
        self,
        actor: Actor,
        student_id: str,
        request: StatusChangeRequest,
    ) -> StudentResponse:
        """Move a student to a new status.

        Raises:
            InvalidStatusTransitionError: If the state machine forbids the change.
        """
        authorize(actor, Action.UPDATE, Resource.STUDENT)
        student = await self.get_scoped(actor.organization_id, student_id)
        current = await self.current_status(student.id)

        if not can_transition(current, request.status):
            raise InvalidStatusTransitionError(
                f"Cannot change status from {current.value if current else 'none'} "
                f"to {request.status.value}"
            )

        try:
            await self.append_status(student, request.status, actor.user_id, request.remarks)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, "Student number is already used")
        await self.db.refresh(student)

        logger.info(
            "Changed student status: id=%s, from=%s, to=%s, by=%s",
            student.id,
            current.value if current else None,
            request.status.value,
            actor.user_id,
        )
        return self._to_response(student, request.status)

    async def status_history(self, actor: Actor, student_id: str) -> list[StatusHistoryResponse]:
        """List status history, newest first."""
        authorize(actor, Action.VIEW, Resource.STUDENT)
        student = await self.get_scoped(actor.organization_id, student_id)
        rows = await self._history(student.id)
        rows.sort(key=lambda r: (r.changed_at, r.id), reverse=True)
        return [StatusHistoryResponse.model_validate(r) for r in rows]

    async def current_status(self, student_id: str) -> StudentStatus | None:
        """Derive the student's current status from its history."""
        return derive_current_status(await self._history(student_id))

    async def append_status(
        self,
        student: Student,
        status: StudentStatus,
        changed_by: str | None,
        remarks: str | None = None,
    ) -> StudentEnrollmentStatus:
        """Append a history row without committing.

        Entering "enrolled" also claims a student number when the student
        has none yet.
        """
        if status is StudentStatus.ENROLLED and not student.student_no:
            student.student_no = await self.numbering.claim_next(
                student.organization_id, NumberingType.STUDENT_NO
            )

        row = StudentEnrollmentStatus(
            student_id=student.id,
            status=status.value,
            changed_at=utc_now(),
            changed_by=changed_by,
            remarks=remarks,
        )
        self.db.add(row)
        await self.db.flush()
        return row

    async def get_scoped(self, organization_id: str, student_id: str) -> Student:
        """Load a student of the organization.

        Raises:
            StudentNotFoundError: If missing or owned by another organization.
        """
        result = await self.db.execute(
            select(Student).where(
                Student.id == student_id,
                Student.organization_id == organization_id,
            )
        )
        student = result.scalar_one_or_none()
        if not student:
            raise StudentNotFoundError(f"Student {student_id} not found")
        return student

    async def _history(self, student_id: str) -> list[StudentEnrollmentStatus]:
        result = await self.db.execute(
            select(StudentEnrollmentStatus).where(StudentEnrollmentStatus.student_id == student_id)
        )
        return list(result.scalars().all())

    def _to_response(self, student: Student, status: StudentStatus | None) -> StudentResponse:
        response = StudentResponse.model_validate(student)
        response.current_status = status
        return response
