# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum tree models.

curriculum -> year -> semester -> course. Year and semester nodes are
unique per parent so get-or-create can rely on the database to settle
concurrent inserts. Curriculum courses hold a copy of the catalog values
taken when the course was added.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Curriculum(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Curriculum of a program for a school year."""

    __tablename__ = "organization_curriculums"

    project_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
    )
    program_name: Mapped[str] = mapped_column(String(255), nullable=False)
    school_year: Mapped[str] = mapped_column(String(20), nullable=False)
    curriculum_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    years: Mapped[list["CurriculumYear"]] = relationship(
        back_populates="curriculum",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CurriculumYear.year_level",
        lazy="raise",
    )


class CurriculumYear(UUIDPrimaryKeyMixin, Base):
    """Year level node of a curriculum."""

    __tablename__ = "curriculum_years"
    __table_args__ = (UniqueConstraint("curriculum_id", "year_level"),)

    curriculum_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organization_curriculums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    year_level: Mapped[int] = mapped_column(Integer, nullable=False)

    curriculum: Mapped[Curriculum] = relationship(back_populates="years", lazy="raise")
    semesters: Mapped[list["CurriculumSemester"]] = relationship(
        back_populates="year",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CurriculumSemester.semester",
        lazy="raise",
    )


class CurriculumSemester(UUIDPrimaryKeyMixin, Base):
    """Semester node of a curriculum year."""

    __tablename__ = "curriculum_semesters"
    __table_args__ = (UniqueConstraint("year_id", "semester"),)

    year_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("curriculum_years.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    semester: Mapped[int] = mapped_column(Integer, nullable=False)

    year: Mapped[CurriculumYear] = relationship(back_populates="semesters", lazy="raise")
    courses: Mapped[list["CurriculumCourse"]] = relationship(
        back_populates="semester",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CurriculumCourse.course_code",
        lazy="raise",
    )


class CurriculumCourse(UUIDPrimaryKeyMixin, Base):
    """Snapshot of a catalog course placed in a semester."""

    __tablename__ = "curriculum_courses"
    __table_args__ = (UniqueConstraint("semester_id", "course_code"),)

    semester_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("curriculum_semesters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    source_course_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="SET NULL"),
        nullable=True,
    )
    course_code: Mapped[str] = mapped_column(String(50), nullable=False)
    course_name: Mapped[str] = mapped_column(Text, nullable=False)
    units: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))

    semester: Mapped[CurriculumSemester] = relationship(back_populates="courses", lazy="raise")
