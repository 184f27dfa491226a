# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for course registration, tuition and payments.

This module provides the EnrollmentService class for:
- Enrolling a student in course offerings
- Listing and dropping enrollments
- Tuition summaries under a payment condition
- Recording and listing payments

Eligibility comes from the student's derived status, not from whether
enrollment rows already exist.
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    translate_integrity_error,
)
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.enrollment.tuition import compute_tuition_fee
from src.domains.student.service import StudentService
from src.domains.student.status import can_select_courses
from src.infrastructure.database.models import (
    CourseOffering,
    Enrollment,
    StudentPayment,
)
from src.models.offering import (
    EnrollmentResponse,
    PaymentCondition,
    PaymentRequest,
    PaymentResponse,
    TuitionSummaryResponse,
)
from src.models.student import StudentStatus

logger = logging.getLogger(__name__)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class OfferingNotFoundError(EnrollmentServiceError, NotFoundError):
    """Raised when an offering does not exist in the organization."""

    pass


class EnrollmentNotFoundError(EnrollmentServiceError, NotFoundError):
    """Raised when an enrollment does not exist in the organization."""

    pass


class AlreadyEnrolledError(EnrollmentServiceError, ConflictError):
    """Raised when the student is already enrolled in a requested offering."""

    pass


class NotEligibleError(EnrollmentServiceError, ValidationFailedError):
    """Raised when the student's status does not allow course selection."""

    pass


class ProgramMismatchError(EnrollmentServiceError, ValidationFailedError):
    """Raised when an offering is outside the student's assigned program."""

    pass


class EnrollmentHasPaymentsError(EnrollmentServiceError, ConflictError):
    """Raised when dropping an enrollment that already has payments."""

    pass


class EnrollmentService:
    """Service for student enrollments.

    Attributes:
        db: Async database session.
        students: Student service sharing the same session.
    """

    def __init__(self, db: AsyncSession, per_unit_amount: Decimal = Decimal("300")) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            per_unit_amount: Tuition charged per tuition hour.
        """
        self.db = db
        self.students = StudentService(db)
        self._per_unit_amount = per_unit_amount

    async def enroll(
        self,
        actor: Actor,
        student_id: str,
        offering_ids: list[str],
    ) -> list[EnrollmentResponse]:
        """Enroll a student in several offerings at once.

        Either every offering is enrolled or none is. A student who is not
        yet enrolled gets an "enrolled" status row (and a student number)
        in the same transaction.

        Args:
            actor: Acting member.
            student_id: Student to enroll.
            offering_ids: Offerings to enroll in.

        Returns:
            The student's enrollments after the change.

        Raises:
            NotEligibleError: If the student's status forbids course selection.
            OfferingNotFoundError: If an offering is not in the organization.
            ProgramMismatchError: If an offering is outside the assigned program.
            AlreadyEnrolledError: If any offering is already enrolled or repeated.
        """
        authorize(actor, Action.CREATE, Resource.ENROLLMENT)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        status = await self.students.current_status(student.id)
        if not can_select_courses(status):
            raise NotEligibleError(
                f"Students with status {status.value if status else 'none'} cannot select courses"
            )

        if len(set(offering_ids)) != len(offering_ids):
            raise AlreadyEnrolledError("The same offering was requested more than once")

        offerings = await self._get_offerings(actor.organization_id, offering_ids)
        if student.assigned_program_id:
            outside = [o.id for o in offerings if o.program_id != student.assigned_program_id]
            if outside:
                raise ProgramMismatchError(
                    f"Offerings outside the assigned program: {', '.join(outside)}"
                )

        result = await self.db.execute(
            select(Enrollment.course_offering_id).where(
                Enrollment.student_id == student.id,
                Enrollment.course_offering_id.in_(offering_ids),
            )
        )
        existing = list(result.scalars().all())
        if existing:
            raise AlreadyEnrolledError(f"Already enrolled in: {', '.join(existing)}")

        for offering in offerings:
            self.db.add(
                Enrollment(
                    organization_id=actor.organization_id,
                    student_id=student.id,
                    course_offering_id=offering.id,
                    status="enrolled",
                )
            )

        try:
            await self.db.flush()
            if status is not StudentStatus.ENROLLED:
                await self.students.append_status(
                    student,
                    StudentStatus.ENROLLED,
                    actor.user_id,
                    remarks="Enrolled in courses",
                )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, "Student is already enrolled in a requested offering")

        logger.info(
            "Enrolled student: student=%s, offerings=%d, previous_status=%s, by=%s",
            student.id,
            len(offerings),
            status.value if status else None,
            actor.user_id,
        )
        return await self.list_enrollments(actor, student.id)

    async def list_enrollments(self, actor: Actor, student_id: str) -> list[EnrollmentResponse]:
        """List a student's enrollments with course details."""
        authorize(actor, Action.VIEW, Resource.ENROLLMENT)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        enrollments = await self._enrollments(student.id)
        return [self._to_response(e) for e in enrollments]

    async def drop_enrollment(self, actor: Actor, enrollment_id: str) -> None:
        """Remove an enrollment without payments.

        Raises:
            EnrollmentHasPaymentsError: If payments were recorded against it.
        """
        authorize(actor, Action.DELETE, Resource.ENROLLMENT)
        enrollment = await self._get_enrollment(actor.organization_id, enrollment_id)

        result = await self.db.execute(
            select(func.count())
            .select_from(StudentPayment)
            .where(StudentPayment.enrollment_id == enrollment.id)
        )
        if result.scalar_one():
            raise EnrollmentHasPaymentsError("Enrollment has recorded payments")

        await self.db.delete(enrollment)
        await self.db.commit()
        logger.info("Dropped enrollment: id=%s, by=%s", enrollment_id, actor.user_id)

    async def tuition_summary(
        self,
        actor: Actor,
        student_id: str,
        condition: PaymentCondition,
    ) -> TuitionSummaryResponse:
        """Compute tuition for the student's current enrollments."""
        authorize(actor, Action.VIEW, Resource.ENROLLMENT)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        enrollments = await self._enrollments(student.id)

        total_hours = sum(
            (e.offering.course.tuition_hours for e in enrollments),
            Decimal("0"),
        )
        return TuitionSummaryResponse(
            student_id=student.id,
            total_tuition_hours=total_hours,
            per_unit_amount=self._per_unit_amount,
            fee=compute_tuition_fee(total_hours, self._per_unit_amount, condition),
        )

    async def record_payment(
        self,
        actor: Actor,
        enrollment_id: str,
        request: PaymentRequest,
    ) -> PaymentResponse:
        """Record a payment against an enrollment."""
        authorize(actor, Action.CREATE, Resource.PAYMENT)
        enrollment = await self._get_enrollment(actor.organization_id, enrollment_id)

        payment = StudentPayment(
            organization_id=actor.organization_id,
            enrollment_id=enrollment.id,
            amount=request.amount,
            payment_number=request.payment_number,
            remarks=request.remarks,
            recorded_by=actor.user_id,
        )
        self.db.add(payment)
        await self.db.commit()
        await self.db.refresh(payment)

        logger.info(
            "Recorded payment: enrollment=%s, amount=%s, number=%s, by=%s",
            enrollment.id,
            request.amount,
            request.payment_number,
            actor.user_id,
        )
        return PaymentResponse.model_validate(payment)

    async def list_payments(self, actor: Actor, student_id: str) -> list[PaymentResponse]:
        """List payments across a student's enrollments, newest first."""
        authorize(actor, Action.VIEW, Resource.PAYMENT)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        result = await self.db.execute(
            select(StudentPayment)
            .join(Enrollment, Enrollment.id == StudentPayment.enrollment_id)
            .where(Enrollment.student_id == student.id)
            .order_by(StudentPayment.paid_at.desc())
        )
        return [PaymentResponse.model_validate(p) for p in result.scalars().all()]

    async def _get_offerings(
        self,
        organization_id: str,
        offering_ids: list[str],
    ) -> list[CourseOffering]:
        result = await self.db.execute(
            select(CourseOffering).where(
                CourseOffering.id.in_(offering_ids),
                CourseOffering.organization_id == organization_id,
            )
        )
        offerings = {o.id: o for o in result.scalars().all()}
        missing = [o for o in offering_ids if o not in offerings]
        if missing:
            raise OfferingNotFoundError(f"Offerings not found: {', '.join(missing)}")
        return [offerings[o] for o in offering_ids]

    async def _get_enrollment(self, organization_id: str, enrollment_id: str) -> Enrollment:
        result = await self.db.execute(
            select(Enrollment).where(
                Enrollment.id == enrollment_id,
                Enrollment.organization_id == organization_id,
            )
        )
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            raise EnrollmentNotFoundError(f"Enrollment {enrollment_id} not found")
        return enrollment

    async def _enrollments(self, student_id: str) -> list[Enrollment]:
        result = await self.db.execute(
            select(Enrollment)
            .options(selectinload(Enrollment.offering).selectinload(CourseOffering.course))
            .where(Enrollment.student_id == student_id)
            .order_by(Enrollment.enrolled_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    def _to_response(self, enrollment: Enrollment) -> EnrollmentResponse:
        course = enrollment.offering.course
        return EnrollmentResponse(
            id=enrollment.id,
            student_id=enrollment.student_id,
            course_offering_id=enrollment.course_offering_id,
            course_code=course.course_code,
            course_desc=course.course_desc,
            section=enrollment.offering.section,
            tuition_hours=course.tuition_hours,
            units=course.units,
            status=enrollment.status,
            enrolled_at=enrollment.enrolled_at,
        )
