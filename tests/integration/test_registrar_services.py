# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for registrar services against SQLite.

These tests run the services with a real session so that transactions,
constraints and counters behave as they do in production.
"""

import asyncio
from datetime import date, time
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import RegistrarSettings
from src.core.errors import LimitExceededError
from src.domains.access import Actor
from src.domains.attendance import AttendanceService, FacultyNotFoundError
from src.domains.auth.password import PasswordHasher
from src.domains.catalog.service import CatalogKind, CatalogService
from src.domains.curriculum.service import CurriculumService
from src.domains.enrollment import (
    AlreadyEnrolledError,
    EnrollmentService,
    NotEligibleError,
    OfferingNotFoundError,
)
from src.domains.member.service import MemberService
from src.domains.offering import OfferingService
from src.domains.organization.usage import UsageGuard, UsageKind, UsageLimitExceededError
from src.domains.project import ProjectService, TemplateRepository
from src.domains.student import InvalidStatusTransitionError, StudentService
from src.infrastructure.database.models import (
    CourseOfferingSchedule,
    Enrollment,
    OrganizationUsage,
    StudentEnrollmentStatus,
    TeamMember,
    User,
)
from src.models.catalog import AcademicLevelRequest, AcademicProgramRequest, CourseRequest
from src.models.common import MemberRole
from src.models.curriculum import CurriculumCourseAddRequest, CurriculumCreateRequest
from src.models.offering import OfferingRequest, PaymentCondition, ScheduleInput
from src.models.organization import MemberCreateRequest
from src.models.project import AttendanceRecordRequest, ProjectCreateRequest
from src.models.student import StatusChangeRequest, StudentCreateRequest, StudentStatus
from src.utils.datetime import utc_now

pytestmark = pytest.mark.integration

HASHER = PasswordHasher(rounds=4)


async def count_rows(db: AsyncSession, model: type, **filters) -> int:
    result = await db.execute(select(func.count()).select_from(model).filter_by(**filters))
    return result.scalar_one()


async def create_catalog(db: AsyncSession, actor: Actor, *course_hours: str):
    """Create a level, a program and one course per tuition-hours value."""
    catalog = CatalogService(db)
    level = await catalog.create_item(
        actor, CatalogKind.ACADEMIC_LEVELS, AcademicLevelRequest(academic_level="College")
    )
    program = await catalog.create_item(
        actor,
        CatalogKind.ACADEMIC_PROGRAMS,
        AcademicProgramRequest(
            academic_level_id=level.id,
            program_code="BSIT",
            program_desc="BS Information Technology",
        ),
    )
    courses = []
    for index, hours in enumerate(course_hours, start=1):
        courses.append(
            await catalog.create_item(
                actor,
                CatalogKind.COURSES,
                CourseRequest(
                    course_code=f"IT10{index}",
                    course_desc=f"Information Technology {index}",
                    tuition_hours=Decimal(hours),
                    units=Decimal(hours),
                ),
            )
        )
    return program, courses


async def create_offerings(db: AsyncSession, actor: Actor, program, courses) -> list[str]:
    service = OfferingService(db)
    offering_ids = []
    for slot, course in enumerate(courses, start=1):
        offering = await service.create_offering(
            actor,
            OfferingRequest(
                program_id=program.id,
                course_id=course.id,
                academic_year="2025-2026",
                semester=1,
                year_level=1,
                section="A",
                slot=slot,
                schedules=[
                    ScheduleInput(day="MON", start_time="08:00", end_time="09:30", room="R101")
                ],
            ),
        )
        offering_ids.append(offering.id)
    return offering_ids


async def create_applicant(db: AsyncSession, actor: Actor, lastname: str = "Reyes"):
    return await StudentService(db).create_student(
        actor, StudentCreateRequest(lastname=lastname, firstname="Ana")
    )


class TestPlanLimits:
    """Tests for plan ceilings and usage counters."""

    @pytest.mark.asyncio
    async def test_member_limit_rejects_without_writes(self, db_session, owner_actor):
        """Test that the sixth team member on the free plan is refused cleanly."""
        service = MemberService(db_session, HASHER)
        for index in range(4):
            await service.add_member(
                owner_actor,
                MemberCreateRequest(email=f"staff{index}@academy.test", name=f"Staff {index}"),
            )

        with pytest.raises(UsageLimitExceededError) as exc_info:
            await service.add_member(
                owner_actor,
                MemberCreateRequest(email="extra@academy.test", name="Extra"),
            )
        await db_session.rollback()

        assert isinstance(exc_info.value, LimitExceededError)
        assert exc_info.value.current == 5
        assert exc_info.value.maximum == 5
        assert await count_rows(db_session, TeamMember, organization_id=owner_actor.organization_id) == 5
        assert await count_rows(db_session, User, email="extra@academy.test") == 0

    @pytest.mark.asyncio
    async def test_concurrent_adds_stop_at_the_ceiling(self, db_session, db_sessionmaker, owner_actor):
        """Test that racing member adds fill the last seat once and refuse the rest."""
        service = MemberService(db_session, HASHER)
        for index in range(3):
            await service.add_member(
                owner_actor,
                MemberCreateRequest(email=f"staff{index}@academy.test", name=f"Staff {index}"),
            )
        await db_session.commit()

        async def add(index: int) -> str:
            async with db_sessionmaker() as session:
                try:
                    await MemberService(session, HASHER).add_member(
                        owner_actor,
                        MemberCreateRequest(email=f"rush{index}@academy.test", name=f"Rush {index}"),
                    )
                except LimitExceededError:
                    return "refused"
            return "added"

        outcomes = await asyncio.gather(*(add(index) for index in range(4)))

        assert sorted(outcomes) == ["added", "refused", "refused", "refused"]
        assert await count_rows(db_session, TeamMember, organization_id=owner_actor.organization_id) == 5

    @pytest.mark.asyncio
    async def test_project_limit_on_free_plan(self, db_session, owner_actor):
        """Test that the free plan allows a single project."""
        service = ProjectService(db_session, TemplateRepository(RegistrarSettings().templates_dir))
        await service.create_project(owner_actor, ProjectCreateRequest(type="attendance"))

        with pytest.raises(UsageLimitExceededError) as exc_info:
            await service.create_project(owner_actor, ProjectCreateRequest(type="enrollment"))

        assert exc_info.value.usage_kind is UsageKind.PROJECTS

    @pytest.mark.asyncio
    async def test_counters_match_live_counts(self, db_session, owner_actor):
        """Test that cached counters equal the rows after each change."""
        await MemberService(db_session, HASHER).add_member(
            owner_actor,
            MemberCreateRequest(email="faculty@academy.test", name="Fe Faculty", role=MemberRole.FACULTY),
        )
        await create_applicant(db_session, owner_actor, "Cruz")
        await create_applicant(db_session, owner_actor, "Santos")

        result = await db_session.execute(
            select(OrganizationUsage).where(
                OrganizationUsage.organization_id == owner_actor.organization_id
            ).execution_options(populate_existing=True)
        )
        usage = result.scalar_one()
        guard = UsageGuard(db_session)

        assert usage.current_team_members == 2
        assert usage.current_students == 2
        assert usage.current_projects == 0
        assert usage.current_students == await guard.count(
            owner_actor.organization_id, UsageKind.STUDENTS
        )

    @pytest.mark.asyncio
    async def test_snapshot_reports_plan_ceilings(self, db_session, owner_actor):
        """Test that the usage snapshot carries the free plan ceilings."""
        snapshot = await UsageGuard(db_session).snapshot(owner_actor.organization_id)
        await db_session.commit()

        assert snapshot.plan_name == "free"
        assert snapshot.current_team_members == 1
        assert snapshot.max_team_members == 5
        assert snapshot.max_students == 100
        assert snapshot.max_projects == 1


class TestStudentLifecycle:
    """Tests for numbering and status history."""

    @pytest.mark.asyncio
    async def test_applicant_numbers_are_sequential(self, db_session, owner_actor):
        """Test that applicants get consecutive numbers in the default format."""
        year = utc_now().year

        first = await create_applicant(db_session, owner_actor, "Cruz")
        second = await create_applicant(db_session, owner_actor, "Santos")

        assert first.applicant_no == f"A{year}-00001"
        assert second.applicant_no == f"A{year}-00002"
        assert first.current_status is StudentStatus.APPLICANT
        assert first.student_no is None

    @pytest.mark.asyncio
    async def test_enrolling_claims_student_number(self, db_session, owner_actor):
        """Test that moving to enrolled issues a student number once."""
        service = StudentService(db_session)
        student = await create_applicant(db_session, owner_actor)

        enrolled = await service.change_status(
            owner_actor, student.id, StatusChangeRequest(status=StudentStatus.ENROLLED)
        )
        withdrawn = await service.change_status(
            owner_actor, student.id, StatusChangeRequest(status=StudentStatus.WITHDRAWN)
        )
        again = await service.change_status(
            owner_actor, student.id, StatusChangeRequest(status=StudentStatus.ENROLLED)
        )

        assert enrolled.student_no == f"S{utc_now().year}-00001"
        assert withdrawn.current_status is StudentStatus.WITHDRAWN
        assert again.student_no == enrolled.student_no
        assert await service.current_status(student.id) is StudentStatus.ENROLLED
        assert await count_rows(db_session, StudentEnrollmentStatus, student_id=student.id) == 4

    @pytest.mark.asyncio
    async def test_invalid_transition_appends_nothing(self, db_session, owner_actor):
        """Test that a refused status change leaves the history alone."""
        service = StudentService(db_session)
        student = await create_applicant(db_session, owner_actor)

        with pytest.raises(InvalidStatusTransitionError, match="from applicant to completed"):
            await service.change_status(
                owner_actor, student.id, StatusChangeRequest(status=StudentStatus.COMPLETED)
            )

        history = await service.status_history(owner_actor, student.id)
        assert [row.status for row in history] == ["applicant"]


class TestCurriculumTree:
    """Tests for curriculum year and semester nodes."""

    @pytest.mark.asyncio
    async def test_ensure_nodes_are_idempotent(self, db_session, owner_actor):
        """Test that repeated get-or-create returns the same nodes."""
        service = CurriculumService(db_session)
        curriculum = await service.create_curriculum(
            owner_actor,
            CurriculumCreateRequest(program_name="BSIT", school_year="2025-2026"),
        )

        year = await service.ensure_year(curriculum.id, 1)
        same_year = await service.ensure_year(curriculum.id, 1)
        semester = await service.ensure_semester(year.id, 2)
        same_semester = await service.ensure_semester(same_year.id, 2)
        await db_session.commit()

        assert year.id == same_year.id
        assert semester.id == same_semester.id

    @pytest.mark.asyncio
    async def test_tree_labels_and_units(self, db_session, owner_actor):
        """Test that placed courses appear under labeled nodes with unit totals."""
        _, courses = await create_catalog(db_session, owner_actor, "3", "2")
        service = CurriculumService(db_session)
        curriculum = await service.create_curriculum(
            owner_actor,
            CurriculumCreateRequest(program_name="BSIT", school_year="2025-2026"),
        )
        for course in courses:
            await service.add_course(
                owner_actor,
                curriculum.id,
                CurriculumCourseAddRequest(course_id=course.id, year_level=1, semester=1),
            )

        tree = await service.get_tree(owner_actor, curriculum.id)

        assert len(tree.years) == 1
        assert tree.years[0].label == "First Year"
        semester = tree.years[0].semesters[0]
        assert semester.label == "First Semester"
        assert semester.total_units == Decimal("5")
        assert sorted(c.course_code for c in semester.courses) == ["IT101", "IT102"]


class TestOfferingSchedules:
    """Tests for schedule reconciliation on offering updates."""

    @pytest.mark.asyncio
    async def test_update_reconciles_stored_schedules(self, db_session, owner_actor):
        """Test that an update edits kept rows, inserts new ones and deletes the rest."""
        program, courses = await create_catalog(db_session, owner_actor, "3")
        service = OfferingService(db_session)
        base = dict(
            program_id=program.id,
            course_id=courses[0].id,
            academic_year="2025-2026",
            semester=1,
            year_level=1,
            section="A",
            slot=1,
        )
        created = await service.create_offering(
            owner_actor,
            OfferingRequest(
                **base,
                schedules=[
                    ScheduleInput(day="MON", start_time="08:00", end_time="09:30", room="R101"),
                    ScheduleInput(day="WED", start_time="08:00", end_time="09:30", room="R101"),
                    ScheduleInput(day="FRI", start_time="08:00", end_time="09:30", room="R101"),
                ],
            ),
        )
        kept = next(s for s in created.schedules if s.day == "MON")

        result = await service.update_offering(
            owner_actor,
            created.id,
            OfferingRequest(
                **base,
                schedules=[
                    ScheduleInput(id=kept.id, day="TUE", start_time="10:00", end_time="11:30", room="R202"),
                    ScheduleInput(day="THU", start_time="13:00", end_time="14:30", room="LAB1"),
                ],
            ),
        )

        assert (result.schedules.inserted, result.schedules.updated, result.schedules.deleted) == (1, 1, 2)
        rows = (
            await db_session.execute(
                select(
                    CourseOfferingSchedule.id,
                    CourseOfferingSchedule.day,
                    CourseOfferingSchedule.start_time,
                    CourseOfferingSchedule.end_time,
                    CourseOfferingSchedule.room,
                )
                .where(CourseOfferingSchedule.offering_id == created.id)
                .order_by(CourseOfferingSchedule.day)
            )
        ).all()
        assert [tuple(row)[1:] for row in rows] == [
            ("THU", time(13, 0), time(14, 30), "LAB1"),
            ("TUE", time(10, 0), time(11, 30), "R202"),
        ]
        assert rows[1].id == kept.id
        assert rows[0].id != kept.id
        assert await count_rows(db_session, CourseOfferingSchedule) == 2


class TestEnrollmentFlow:
    """Tests for all-or-nothing enrollment and tuition."""

    @pytest.mark.asyncio
    async def test_enroll_applicant(self, db_session, owner_actor):
        """Test that enrolling an applicant adds rows, status and student number."""
        program, courses = await create_catalog(db_session, owner_actor, "3", "4")
        offering_ids = await create_offerings(db_session, owner_actor, program, courses)
        student = await create_applicant(db_session, owner_actor)
        service = EnrollmentService(db_session, Decimal("300"))

        enrollments = await service.enroll(owner_actor, student.id, offering_ids)

        assert {e.course_offering_id for e in enrollments} == set(offering_ids)
        students = StudentService(db_session)
        assert await students.current_status(student.id) is StudentStatus.ENROLLED
        refreshed = await students.get_student(owner_actor, student.id)
        assert refreshed.student_no is not None

        tuition = await service.tuition_summary(
            owner_actor, student.id, PaymentCondition.THREE_INSTALLMENTS
        )
        assert tuition.total_tuition_hours == Decimal("7")
        assert tuition.fee.total == Decimal("2100.00")
        assert tuition.fee.installments == [Decimal("700.00")] * 3

    @pytest.mark.asyncio
    async def test_duplicate_enrollment_is_all_or_nothing(self, db_session, owner_actor):
        """Test that one existing enrollment rejects the whole batch."""
        program, courses = await create_catalog(db_session, owner_actor, "3", "3")
        first_id, second_id = await create_offerings(db_session, owner_actor, program, courses)
        student = await create_applicant(db_session, owner_actor)
        service = EnrollmentService(db_session)
        await service.enroll(owner_actor, student.id, [first_id])

        with pytest.raises(AlreadyEnrolledError):
            await service.enroll(owner_actor, student.id, [second_id, first_id])
        await db_session.rollback()

        assert await count_rows(db_session, Enrollment, student_id=student.id) == 1

    @pytest.mark.asyncio
    async def test_unknown_offering_writes_nothing(self, db_session, owner_actor):
        """Test that a missing offering leaves the student untouched."""
        program, courses = await create_catalog(db_session, owner_actor, "3")
        (offering_id,) = await create_offerings(db_session, owner_actor, program, courses)
        student = await create_applicant(db_session, owner_actor)

        with pytest.raises(OfferingNotFoundError):
            await EnrollmentService(db_session).enroll(
                owner_actor, student.id, [offering_id, "missing-offering"]
            )
        await db_session.rollback()

        assert await count_rows(db_session, Enrollment, student_id=student.id) == 0
        assert await StudentService(db_session).current_status(student.id) is StudentStatus.APPLICANT

    @pytest.mark.asyncio
    async def test_completed_student_cannot_enroll(self, db_session, owner_actor):
        """Test that completed students are not eligible."""
        program, courses = await create_catalog(db_session, owner_actor, "3")
        offering_ids = await create_offerings(db_session, owner_actor, program, courses)
        student = await create_applicant(db_session, owner_actor)
        students = StudentService(db_session)
        for status in (StudentStatus.ENROLLED, StudentStatus.COMPLETED):
            await students.change_status(owner_actor, student.id, StatusChangeRequest(status=status))

        with pytest.raises(NotEligibleError):
            await EnrollmentService(db_session).enroll(owner_actor, student.id, offering_ids)


class TestAttendance:
    """Tests for attendance logging and the DTR."""

    @pytest.mark.asyncio
    async def test_record_and_build_dtr(self, db_session, owner_actor):
        """Test that entries of one day collect in one row and map to DTR columns."""
        project = await ProjectService(
            db_session, TemplateRepository(RegistrarSettings().templates_dir)
        ).create_project(owner_actor, ProjectCreateRequest(type="attendance"))
        service = AttendanceService(db_session)
        day = date(2025, 3, 4)

        for label, clock in (("AM IN", "07:58"), ("AM OUT", "12:00"), ("AM IN", "08:01")):
            row = await service.record_time(
                owner_actor, project.id, AttendanceRecordRequest(date=day, label=label, time=clock)
            )

        assert len(row.times) == 3
        dtr = await service.get_dtr(owner_actor, project.id, 2025, 3)
        assert dtr.name == "Olivia Owner"
        assert len(dtr.days) == 31
        assert dtr.days[3].am_arrival == "08:01"
        assert dtr.days[3].am_departure == "12:00"
        assert dtr.days[3].pm_arrival is None

        filename, content = await service.dtr_pdf(owner_actor, project.id, 2025, 3)
        assert filename == "DTR_Olivia_Owner_2025-03.pdf"
        assert content.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_record_for_non_member(self, db_session, owner_actor):
        """Test that attendance can only be logged for organization members."""
        project = await ProjectService(
            db_session, TemplateRepository(RegistrarSettings().templates_dir)
        ).create_project(owner_actor, ProjectCreateRequest(type="attendance"))

        with pytest.raises(FacultyNotFoundError):
            await AttendanceService(db_session).record_time(
                owner_actor,
                project.id,
                AttendanceRecordRequest(
                    date=date(2025, 3, 4), label="AM IN", time="08:00", faculty_id="someone-else"
                ),
            )
