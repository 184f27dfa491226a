# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial registrar schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02

This migration creates all tables of the SQLAlchemy models in
src/infrastructure/database/models/. Constraint names follow the
metadata naming convention so later autogenerate runs stay clean.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _organization_id(table: str) -> sa.Column:
    return sa.Column(
        "organization_id",
        sa.String(36),
        sa.ForeignKey(
            "organizations.id",
            ondelete="CASCADE",
            name=f"fk_{table}_organization_id_organizations",
        ),
        nullable=False,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _fk(table: str, column: str, referred: str, ondelete: str | None = None) -> sa.ForeignKey:
    return sa.ForeignKey(
        f"{referred}.id",
        ondelete=ondelete,
        name=f"fk_{table}_{column}_{referred}",
    )


def _scoped_index(table: str) -> None:
    op.create_index(f"ix_{table}_organization_id", table, ["organization_id"])


def upgrade() -> None:
    """Create registrar tables."""
    # ==========================================================================
    # 1. Users and plans
    # ==========================================================================
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("platform_role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("must_change_password", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "subscription_plans",
        _id(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="PHP"),
        sa.Column("max_team_members", sa.Integer, nullable=True),
        sa.Column("max_students", sa.Integer, nullable=True),
        sa.Column("max_projects", sa.Integer, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_subscription_plans_name"),
    )

    # ==========================================================================
    # 2. Organizations and their settings
    # ==========================================================================
    op.create_table(
        "organizations",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("plan", sa.String(50), nullable=False, server_default="free"),
        sa.Column(
            "owner_id",
            sa.String(36),
            _fk("organizations", "owner_id", "users", "RESTRICT"),
            nullable=False,
        ),
        sa.Column("billing_status", sa.String(20), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_organizations_owner_id", "organizations", ["owner_id"])

    op.create_table(
        "organization_usage",
        sa.Column(
            "organization_id",
            sa.String(36),
            _fk("organization_usage", "organization_id", "organizations", "CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "plan_id",
            sa.String(36),
            _fk("organization_usage", "plan_id", "subscription_plans", "RESTRICT"),
            nullable=False,
        ),
        sa.Column("current_team_members", sa.Integer, nullable=False, server_default="0"),
        sa.Column("current_students", sa.Integer, nullable=False, server_default="0"),
        sa.Column("current_projects", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "organization_billing_history",
        _id(),
        _organization_id("organization_billing_history"),
        sa.Column(
            "plan_id",
            sa.String(36),
            _fk("organization_billing_history", "plan_id", "subscription_plans", "SET NULL"),
            nullable=True,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    _scoped_index("organization_billing_history")

    op.create_table(
        "organization_team_members",
        _id(),
        _organization_id("organization_team_members"),
        sa.Column(
            "user_id",
            sa.String(36),
            _fk("organization_team_members", "user_id", "users", "CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("birthdate", sa.Date, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "organization_id",
            "user_id",
            name="uq_organization_team_members_organization_id_user_id",
        ),
    )
    _scoped_index("organization_team_members")
    op.create_index("ix_organization_team_members_user_id", "organization_team_members", ["user_id"])

    op.create_table(
        "numbering_settings",
        _id(),
        _organization_id("numbering_settings"),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("prefix", sa.String(20), nullable=False, server_default=""),
        sa.Column("next_number", sa.Integer, nullable=False, server_default="1"),
        sa.Column("format", sa.String(100), nullable=False),
        sa.Column("padding", sa.Integer, nullable=False, server_default="5"),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "type", name="uq_numbering_settings_organization_id_type"),
    )
    _scoped_index("numbering_settings")

    op.create_table(
        "organization_themes",
        sa.Column(
            "organization_id",
            sa.String(36),
            _fk("organization_themes", "organization_id", "organizations", "CASCADE"),
            primary_key=True,
        ),
        sa.Column("primary_color", sa.String(7), nullable=False),
        sa.Column("secondary_color", sa.String(7), nullable=False),
        sa.Column("accent_color", sa.String(7), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    # ==========================================================================
    # 3. Projects and attendance
    # ==========================================================================
    op.create_table(
        "projects",
        _id(),
        _organization_id("projects"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("user_targets", sa.JSON, nullable=False),
        sa.Column("requirements", sa.JSON, nullable=False),
        sa.Column("created_by", sa.String(36), nullable=True),
        *_timestamps(),
    )
    _scoped_index("projects")

    op.create_table(
        "attendance",
        _id(),
        _organization_id("attendance"),
        sa.Column(
            "project_id",
            sa.String(36),
            _fk("attendance", "project_id", "projects", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "faculty_id",
            sa.String(36),
            _fk("attendance", "faculty_id", "users", "CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("times", sa.JSON, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "faculty_id",
            "project_id",
            "date",
            name="uq_attendance_faculty_id_project_id_date",
        ),
    )
    _scoped_index("attendance")
    op.create_index("ix_attendance_project_id", "attendance", ["project_id"])
    op.create_index("ix_attendance_faculty_id", "attendance", ["faculty_id"])

    # ==========================================================================
    # 4. Academic catalog
    # ==========================================================================
    op.create_table(
        "academic_levels",
        _id(),
        _organization_id("academic_levels"),
        sa.Column("academic_level", sa.String(100), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "organization_id",
            "academic_level",
            name="uq_academic_levels_organization_id_academic_level",
        ),
    )
    _scoped_index("academic_levels")

    op.create_table(
        "academic_programs",
        _id(),
        _organization_id("academic_programs"),
        sa.Column(
            "academic_level_id",
            sa.String(36),
            _fk("academic_programs", "academic_level_id", "academic_levels"),
            nullable=False,
        ),
        sa.Column("program_code", sa.String(50), nullable=False),
        sa.Column("program_desc", sa.Text, nullable=False),
        sa.Column("years", sa.Integer, nullable=False, server_default="4"),
        sa.Column("is_board", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint(
            "organization_id",
            "program_code",
            name="uq_academic_programs_organization_id_program_code",
        ),
    )
    _scoped_index("academic_programs")
    op.create_index("ix_academic_programs_academic_level_id", "academic_programs", ["academic_level_id"])

    op.create_table(
        "colleges",
        _id(),
        _organization_id("colleges"),
        sa.Column("cc_code", sa.String(50), nullable=False),
        sa.Column("cc_name", sa.String(255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "cc_code", name="uq_colleges_organization_id_cc_code"),
    )
    _scoped_index("colleges")

    op.create_table(
        "courses",
        _id(),
        _organization_id("courses"),
        sa.Column("course_code", sa.String(50), nullable=False),
        sa.Column("course_desc", sa.Text, nullable=False),
        sa.Column("lecture_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("laboratory_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("tuition_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("units", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("credited_units", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("is_include_in_gwa", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("department_id", sa.String(36), nullable=True),
        sa.Column("is_non_academic", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "course_code", name="uq_courses_organization_id_course_code"),
    )
    _scoped_index("courses")

    # ==========================================================================
    # 5. Students and admission
    # ==========================================================================
    op.create_table(
        "organization_students",
        _id(),
        _organization_id("organization_students"),
        sa.Column("applicant_no", sa.String(50), nullable=True),
        sa.Column("student_no", sa.String(50), nullable=True),
        sa.Column("lastname", sa.String(100), nullable=False),
        sa.Column("firstname", sa.String(100), nullable=False),
        sa.Column("middlename", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("birthdate", sa.Date, nullable=True),
        sa.Column(
            "assigned_program_id",
            sa.String(36),
            _fk("organization_students", "assigned_program_id", "academic_programs", "SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "assigned_college_id",
            sa.String(36),
            _fk("organization_students", "assigned_college_id", "colleges", "SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint(
            "organization_id",
            "applicant_no",
            name="uq_organization_students_organization_id_applicant_no",
        ),
        sa.UniqueConstraint(
            "organization_id",
            "student_no",
            name="uq_organization_students_organization_id_student_no",
        ),
    )
    _scoped_index("organization_students")

    op.create_table(
        "student_enrollment_status",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.String(36),
            _fk("student_enrollment_status", "student_id", "organization_students", "CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("changed_by", sa.String(36), nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
    )
    op.create_index("ix_student_enrollment_status_student_id", "student_enrollment_status", ["student_id"])

    op.create_table(
        "document_types",
        _id(),
        _organization_id("document_types"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_required", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "name", name="uq_document_types_organization_id_name"),
    )
    _scoped_index("document_types")

    op.create_table(
        "applicant_documents",
        _id(),
        _organization_id("applicant_documents"),
        sa.Column(
            "student_id",
            sa.String(36),
            _fk("applicant_documents", "student_id", "organization_students", "CASCADE"),
            nullable=False,
        ),
        sa.Column("document_type", sa.String(100), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="pending"),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("file_url", sa.Text, nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.String(36), nullable=True),
    )
    _scoped_index("applicant_documents")
    op.create_index("ix_applicant_documents_student_id", "applicant_documents", ["student_id"])

    op.create_table(
        "applicant_interviews",
        _id(),
        _organization_id("applicant_interviews"),
        sa.Column(
            "student_id",
            sa.String(36),
            _fk("applicant_interviews", "student_id", "organization_students", "CASCADE"),
            nullable=False,
        ),
        sa.Column("interviewer_id", sa.String(36), nullable=True),
        sa.Column("notes", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    _scoped_index("applicant_interviews")
    op.create_index("ix_applicant_interviews_student_id", "applicant_interviews", ["student_id"])

    # ==========================================================================
    # 6. Curriculum tree
    # ==========================================================================
    op.create_table(
        "organization_curriculums",
        _id(),
        _organization_id("organization_curriculums"),
        sa.Column(
            "project_id",
            sa.String(36),
            _fk("organization_curriculums", "project_id", "projects", "SET NULL"),
            nullable=True,
        ),
        sa.Column("program_name", sa.String(255), nullable=False),
        sa.Column("school_year", sa.String(20), nullable=False),
        sa.Column("curriculum_type", sa.String(50), nullable=True),
        *_timestamps(),
    )
    _scoped_index("organization_curriculums")

    op.create_table(
        "curriculum_years",
        _id(),
        sa.Column(
            "curriculum_id",
            sa.String(36),
            _fk("curriculum_years", "curriculum_id", "organization_curriculums", "CASCADE"),
            nullable=False,
        ),
        sa.Column("year_level", sa.Integer, nullable=False),
        sa.UniqueConstraint(
            "curriculum_id",
            "year_level",
            name="uq_curriculum_years_curriculum_id_year_level",
        ),
    )
    op.create_index("ix_curriculum_years_curriculum_id", "curriculum_years", ["curriculum_id"])

    op.create_table(
        "curriculum_semesters",
        _id(),
        sa.Column(
            "year_id",
            sa.String(36),
            _fk("curriculum_semesters", "year_id", "curriculum_years", "CASCADE"),
            nullable=False,
        ),
        sa.Column("semester", sa.Integer, nullable=False),
        sa.UniqueConstraint("year_id", "semester", name="uq_curriculum_semesters_year_id_semester"),
    )
    op.create_index("ix_curriculum_semesters_year_id", "curriculum_semesters", ["year_id"])

    op.create_table(
        "curriculum_courses",
        _id(),
        sa.Column(
            "semester_id",
            sa.String(36),
            _fk("curriculum_courses", "semester_id", "curriculum_semesters", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "source_course_id",
            sa.String(36),
            _fk("curriculum_courses", "source_course_id", "courses", "SET NULL"),
            nullable=True,
        ),
        sa.Column("course_code", sa.String(50), nullable=False),
        sa.Column("course_name", sa.Text, nullable=False),
        sa.Column("units", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.UniqueConstraint(
            "semester_id",
            "course_code",
            name="uq_curriculum_courses_semester_id_course_code",
        ),
    )
    op.create_index("ix_curriculum_courses_semester_id", "curriculum_courses", ["semester_id"])

    # ==========================================================================
    # 7. Offerings, enrollment and payments
    # ==========================================================================
    op.create_table(
        "course_offerings",
        _id(),
        _organization_id("course_offerings"),
        sa.Column(
            "project_id",
            sa.String(36),
            _fk("course_offerings", "project_id", "projects", "SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "program_id",
            sa.String(36),
            _fk("course_offerings", "program_id", "academic_programs"),
            nullable=False,
        ),
        sa.Column(
            "course_id",
            sa.String(36),
            _fk("course_offerings", "course_id", "courses"),
            nullable=False,
        ),
        sa.Column("academic_year", sa.String(20), nullable=False),
        sa.Column("semester", sa.Integer, nullable=False),
        sa.Column("year_level", sa.Integer, nullable=False),
        sa.Column("section", sa.String(50), nullable=False),
        sa.Column("slot", sa.Integer, nullable=False),
        *_timestamps(),
    )
    _scoped_index("course_offerings")
    op.create_index("ix_course_offerings_program_id", "course_offerings", ["program_id"])
    op.create_index("ix_course_offerings_course_id", "course_offerings", ["course_id"])

    op.create_table(
        "course_offering_schedules",
        _id(),
        sa.Column(
            "offering_id",
            sa.String(36),
            _fk("course_offering_schedules", "offering_id", "course_offerings", "CASCADE"),
            nullable=False,
        ),
        sa.Column("day", sa.String(10), nullable=False),
        sa.Column("start_time", sa.Time, nullable=False),
        sa.Column("end_time", sa.Time, nullable=False),
        sa.Column("room", sa.String(50), nullable=False),
    )
    op.create_index("ix_course_offering_schedules_offering_id", "course_offering_schedules", ["offering_id"])

    op.create_table(
        "enrollments",
        _id(),
        _organization_id("enrollments"),
        sa.Column(
            "student_id",
            sa.String(36),
            _fk("enrollments", "student_id", "organization_students", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "course_offering_id",
            sa.String(36),
            _fk("enrollments", "course_offering_id", "course_offerings", "CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="enrolled"),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "student_id",
            "course_offering_id",
            name="uq_enrollments_student_id_course_offering_id",
        ),
    )
    _scoped_index("enrollments")
    op.create_index("ix_enrollments_student_id", "enrollments", ["student_id"])
    op.create_index("ix_enrollments_course_offering_id", "enrollments", ["course_offering_id"])

    op.create_table(
        "student_payments",
        _id(),
        _organization_id("student_payments"),
        sa.Column(
            "enrollment_id",
            sa.String(36),
            _fk("student_payments", "enrollment_id", "enrollments", "CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_number", sa.String(50), nullable=False),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_by", sa.String(36), nullable=True),
    )
    _scoped_index("student_payments")
    op.create_index("ix_student_payments_enrollment_id", "student_payments", ["enrollment_id"])


def downgrade() -> None:
    """Drop registrar tables."""
    op.drop_table("student_payments")
    op.drop_table("enrollments")
    op.drop_table("course_offering_schedules")
    op.drop_table("course_offerings")
    op.drop_table("curriculum_courses")
    op.drop_table("curriculum_semesters")
    op.drop_table("curriculum_years")
    op.drop_table("organization_curriculums")
    op.drop_table("applicant_interviews")
    op.drop_table("applicant_documents")
    op.drop_table("document_types")
    op.drop_table("student_enrollment_status")
    op.drop_table("organization_students")
    op.drop_table("courses")
    op.drop_table("colleges")
    op.drop_table("academic_programs")
    op.drop_table("academic_levels")
    op.drop_table("attendance")
    op.drop_table("projects")
    op.drop_table("organization_themes")
    op.drop_table("numbering_settings")
    op.drop_table("organization_team_members")
    op.drop_table("organization_billing_history")
    op.drop_table("organization_usage")
    op.drop_table("organizations")
    op.drop_table("subscription_plans")
    op.drop_table("users")
