# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering, schedule, enrollment and payment models."""

from datetime import datetime, time
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.infrastructure.database.models.catalog import AcademicProgram, Course
from src.utils.datetime import utc_now


class CourseOffering(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """A course opened for a section in one term."""

    __tablename__ = "course_offerings"

    project_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
    )
    program_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("academic_programs.id"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id"),
        nullable=False,
        index=True,
    )
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    year_level: Mapped[int] = mapped_column(Integer, nullable=False)
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)

    program: Mapped[AcademicProgram] = relationship(lazy="raise")
    course: Mapped[Course] = relationship(lazy="raise")
    schedules: Mapped[list["CourseOfferingSchedule"]] = relationship(
        back_populates="offering",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )


class CourseOfferingSchedule(UUIDPrimaryKeyMixin, Base):
    """One meeting slot of an offering."""

    __tablename__ = "course_offering_schedules"

    offering_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("course_offerings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    room: Mapped[str] = mapped_column(String(50), nullable=False)

    offering: Mapped[CourseOffering] = relationship(back_populates="schedules", lazy="raise")


class Enrollment(UUIDPrimaryKeyMixin, OrganizationScopedMixin, Base):
    """A student's registration in one offering."""

    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("student_id", "course_offering_id"),)

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organization_students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_offering_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("course_offerings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="enrolled")
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    offering: Mapped[CourseOffering] = relationship(lazy="raise")
    payments: Mapped[list["StudentPayment"]] = relationship(
        back_populates="enrollment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )


class StudentPayment(UUIDPrimaryKeyMixin, OrganizationScopedMixin, Base):
    """Payment recorded against an enrollment."""

    __tablename__ = "student_payments"

    enrollment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_number: Mapped[str] = mapped_column(String(50), nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    recorded_by: Mapped[str | None] = mapped_column(String(36), nullable=True)

    enrollment: Mapped[Enrollment] = relationship(back_populates="payments", lazy="raise")
