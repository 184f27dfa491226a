# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic catalog models: levels, programs, courses and colleges."""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class AcademicLevel(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Level of study, e.g. "College" or "Senior High"."""

    __tablename__ = "academic_levels"
    __table_args__ = (UniqueConstraint("organization_id", "academic_level"),)

    academic_level: Mapped[str] = mapped_column(String(100), nullable=False)


class AcademicProgram(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Degree or track offered at one academic level."""

    __tablename__ = "academic_programs"
    __table_args__ = (UniqueConstraint("organization_id", "program_code"),)

    academic_level_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("academic_levels.id"),
        nullable=False,
        index=True,
    )
    program_code: Mapped[str] = mapped_column(String(50), nullable=False)
    program_desc: Mapped[str] = mapped_column(Text, nullable=False)
    years: Mapped[int] = mapped_column(Integer, nullable=False, default=4)
    is_board: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    academic_level: Mapped[AcademicLevel] = relationship(lazy="raise")


class College(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """College or campus unit an applicant can be assigned to."""

    __tablename__ = "colleges"
    __table_args__ = (UniqueConstraint("organization_id", "cc_code"),)

    cc_code: Mapped[str] = mapped_column(String(50), nullable=False)
    cc_name: Mapped[str] = mapped_column(String(255), nullable=False)


class Course(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Catalog course. Curricula copy its code, description and units."""

    __tablename__ = "courses"
    __table_args__ = (UniqueConstraint("organization_id", "course_code"),)

    course_code: Mapped[str] = mapped_column(String(50), nullable=False)
    course_desc: Mapped[str] = mapped_column(Text, nullable=False)
    lecture_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    laboratory_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    tuition_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    units: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    credited_units: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    is_include_in_gwa: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    department_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_non_academic: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
