# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student, status history and admission models.

A single Student row represents both the applicant and the enrolled
student; which one it is depends only on its latest status history row.
"""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.utils.datetime import utc_now


class Student(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Applicant or student of an organization."""

    __tablename__ = "organization_students"
    __table_args__ = (
        UniqueConstraint("organization_id", "applicant_no"),
        UniqueConstraint("organization_id", "student_no"),
    )

    applicant_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    student_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    lastname: Mapped[str] = mapped_column(String(100), nullable=False)
    firstname: Mapped[str] = mapped_column(String(100), nullable=False)
    middlename: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    birthdate: Mapped[date | None] = mapped_column(Date, nullable=True)
    assigned_program_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("academic_programs.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_college_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("colleges.id", ondelete="SET NULL"),
        nullable=True,
    )

    status_history: Mapped[list["StudentEnrollmentStatus"]] = relationship(
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )


class StudentEnrollmentStatus(Base):
    """Append-only status history row.

    The integer key increases with every insert and breaks ties between
    rows that share the same changed_at.
    """

    __tablename__ = "student_enrollment_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organization_students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    changed_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    student: Mapped[Student] = relationship(back_populates="status_history", lazy="raise")


class DocumentType(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Required-document catalog entry of an organization."""

    __tablename__ = "document_types"
    __table_args__ = (UniqueConstraint("organization_id", "name"),)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ApplicantDocument(UUIDPrimaryKeyMixin, OrganizationScopedMixin, Base):
    """A document submitted by one applicant."""

    __tablename__ = "applicant_documents"

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organization_students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="pending")
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[str | None] = mapped_column(String(36), nullable=True)


class ApplicantInterview(UUIDPrimaryKeyMixin, OrganizationScopedMixin, Base):
    """Interview notes recorded for an applicant."""

    __tablename__ = "applicant_interviews"

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organization_students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    interviewer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
