# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Enrollment service."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.core.errors import PermissionDeniedError
from src.domains.access import Actor
from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    EnrollmentHasPaymentsError,
    EnrollmentNotFoundError,
    EnrollmentService,
    NotEligibleError,
    OfferingNotFoundError,
    ProgramMismatchError,
)
from src.models.common import MemberRole
from src.models.offering import PaymentCondition, PaymentRequest
from src.models.student import StudentStatus


def create_mock_result(scalars=None, scalar_one=None, scalar_one_or_none=None):
    """Create a mock result for db.execute."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = scalars or []
    result.scalar_one.return_value = scalar_one
    result.scalar_one_or_none.return_value = scalar_one_or_none
    return result


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def actor():
    """Create an admin actor."""
    return Actor(user_id=str(uuid4()), organization_id=str(uuid4()), role=MemberRole.ADMIN)


@pytest.fixture
def sample_student(actor):
    """Create a sample student model."""
    student = MagicMock()
    student.id = str(uuid4())
    student.organization_id = actor.organization_id
    student.assigned_program_id = None
    return student


@pytest.fixture
def enrollment_service(mock_db, sample_student):
    """Create enrollment service with a stubbed student lookup."""
    service = EnrollmentService(db=mock_db, per_unit_amount=Decimal("300"))
    service.students.get_scoped = AsyncMock(return_value=sample_student)
    service.students.current_status = AsyncMock(return_value=StudentStatus.APPLICANT)
    service.students.append_status = AsyncMock()
    return service


def make_offering(program_id: str | None = None):
    offering = MagicMock()
    offering.id = str(uuid4())
    offering.program_id = program_id or str(uuid4())
    return offering


class TestEnrollmentServiceEnroll:
    """Tests for enrolling a student in offerings."""

    @pytest.mark.asyncio
    async def test_enroll_requires_permission(self, enrollment_service, mock_db, actor):
        """Test that faculty cannot enroll students."""
        faculty = actor._replace(role=MemberRole.FACULTY)

        with pytest.raises(PermissionDeniedError):
            await enrollment_service.enroll(faculty, str(uuid4()), [str(uuid4())])

        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_completed_student_not_eligible(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that completed students cannot select courses."""
        enrollment_service.students.current_status.return_value = StudentStatus.COMPLETED

        with pytest.raises(NotEligibleError, match="completed"):
            await enrollment_service.enroll(actor, sample_student.id, [str(uuid4())])

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_repeated_offering_rejected(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that the same offering cannot appear twice in one request."""
        offering_id = str(uuid4())

        with pytest.raises(AlreadyEnrolledError, match="more than once"):
            await enrollment_service.enroll(actor, sample_student.id, [offering_id, offering_id])

        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_unknown_offering(self, enrollment_service, mock_db, actor, sample_student):
        """Test that offerings from other organizations are not found."""
        known = make_offering()
        missing_id = str(uuid4())
        mock_db.execute.return_value = create_mock_result(scalars=[known])

        with pytest.raises(OfferingNotFoundError) as exc_info:
            await enrollment_service.enroll(actor, sample_student.id, [known.id, missing_id])

        assert missing_id in exc_info.value.message
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_outside_assigned_program(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that offerings must belong to the student's assigned program."""
        sample_student.assigned_program_id = "program-a"
        inside = make_offering("program-a")
        outside = make_offering("program-b")
        mock_db.execute.return_value = create_mock_result(scalars=[inside, outside])

        with pytest.raises(ProgramMismatchError) as exc_info:
            await enrollment_service.enroll(actor, sample_student.id, [inside.id, outside.id])

        assert outside.id in exc_info.value.message
        assert inside.id not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_enroll_already_enrolled_writes_nothing(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that one existing enrollment rejects the whole request."""
        first, second = make_offering(), make_offering()
        mock_db.execute.side_effect = [
            create_mock_result(scalars=[first, second]),
            create_mock_result(scalars=[second.id]),
        ]

        with pytest.raises(AlreadyEnrolledError, match=second.id):
            await enrollment_service.enroll(actor, sample_student.id, [first.id, second.id])

        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_called()
        enrollment_service.students.append_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_applicant_gets_enrolled_status(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that a first enrollment appends the enrolled status before commit."""
        offering = make_offering()
        mock_db.execute.side_effect = [
            create_mock_result(scalars=[offering]),
            create_mock_result(scalars=[]),
        ]
        enrollment_service.list_enrollments = AsyncMock(return_value=[])

        await enrollment_service.enroll(actor, sample_student.id, [offering.id])

        assert mock_db.add.call_count == 1
        added = mock_db.add.call_args.args[0]
        assert added.course_offering_id == offering.id
        assert added.student_id == sample_student.id
        enrollment_service.students.append_status.assert_awaited_once()
        assert enrollment_service.students.append_status.call_args.args[1] is StudentStatus.ENROLLED
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_enroll_enrolled_student_keeps_status(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that adding courses to an enrolled student appends no status."""
        enrollment_service.students.current_status.return_value = StudentStatus.ENROLLED
        offering = make_offering()
        mock_db.execute.side_effect = [
            create_mock_result(scalars=[offering]),
            create_mock_result(scalars=[]),
        ]
        enrollment_service.list_enrollments = AsyncMock(return_value=[])

        await enrollment_service.enroll(actor, sample_student.id, [offering.id])

        enrollment_service.students.append_status.assert_not_called()
        mock_db.commit.assert_awaited_once()


class TestEnrollmentServiceDrop:
    """Tests for dropping enrollments."""

    @pytest.mark.asyncio
    async def test_drop_enrollment_not_found(self, enrollment_service, mock_db, actor):
        """Test dropping an enrollment from another organization."""
        mock_db.execute.return_value = create_mock_result(scalar_one_or_none=None)

        with pytest.raises(EnrollmentNotFoundError):
            await enrollment_service.drop_enrollment(actor, str(uuid4()))

    @pytest.mark.asyncio
    async def test_drop_enrollment_with_payments(self, enrollment_service, mock_db, actor):
        """Test that paid enrollments are kept."""
        enrollment = MagicMock()
        enrollment.id = str(uuid4())
        mock_db.execute.side_effect = [
            create_mock_result(scalar_one_or_none=enrollment),
            create_mock_result(scalar_one=2),
        ]

        with pytest.raises(EnrollmentHasPaymentsError):
            await enrollment_service.drop_enrollment(actor, enrollment.id)

        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_drop_enrollment_success(self, enrollment_service, mock_db, actor):
        """Test dropping an unpaid enrollment."""
        enrollment = MagicMock()
        enrollment.id = str(uuid4())
        mock_db.execute.side_effect = [
            create_mock_result(scalar_one_or_none=enrollment),
            create_mock_result(scalar_one=0),
        ]

        await enrollment_service.drop_enrollment(actor, enrollment.id)

        mock_db.delete.assert_awaited_once_with(enrollment)
        mock_db.commit.assert_awaited_once()


class TestEnrollmentServiceTuition:
    """Tests for tuition summaries."""

    @pytest.mark.asyncio
    async def test_tuition_summary_sums_course_hours(
        self, enrollment_service, mock_db, actor, sample_student
    ):
        """Test that tuition hours of every enrollment are added up."""
        enrollments = []
        for hours in ("3", "4.5"):
            enrollment = MagicMock()
            enrollment.offering.course.tuition_hours = Decimal(hours)
            enrollments.append(enrollment)
        mock_db.execute.return_value = create_mock_result(scalars=enrollments)

        summary = await enrollment_service.tuition_summary(
            actor, sample_student.id, PaymentCondition.TWO_INSTALLMENTS
        )

        assert summary.total_tuition_hours == Decimal("7.5")
        assert summary.per_unit_amount == Decimal("300")
        assert summary.fee.total == Decimal("2250.00")
        assert summary.fee.installments == [Decimal("1125.00"), Decimal("1125.00")]


class TestEnrollmentServicePayments:
    """Tests for payment recording."""

    @pytest.mark.asyncio
    async def test_record_payment_unknown_enrollment(self, enrollment_service, mock_db, actor):
        """Test that payments need an enrollment in the organization."""
        mock_db.execute.return_value = create_mock_result(scalar_one_or_none=None)

        with pytest.raises(EnrollmentNotFoundError):
            await enrollment_service.record_payment(
                actor,
                str(uuid4()),
                PaymentRequest(amount=Decimal("500"), payment_number="OR-0001"),
            )

        mock_db.add.assert_not_called()
