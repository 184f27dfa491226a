# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the registrar database.

Importing this package registers every table on Base.metadata, which
Alembic and the test fixtures rely on.
"""

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    new_id,
)
from src.infrastructure.database.models.catalog import (
    AcademicLevel,
    AcademicProgram,
    College,
    Course,
)
from src.infrastructure.database.models.curriculum import (
    Curriculum,
    CurriculumCourse,
    CurriculumSemester,
    CurriculumYear,
)
from src.infrastructure.database.models.offering import (
    CourseOffering,
    CourseOfferingSchedule,
    Enrollment,
    StudentPayment,
)
from src.infrastructure.database.models.organization import (
    BillingHistory,
    NumberingSetting,
    Organization,
    OrganizationTheme,
    OrganizationUsage,
    SubscriptionPlan,
    TeamMember,
)
from src.infrastructure.database.models.project import Attendance, Project
from src.infrastructure.database.models.student import (
    ApplicantDocument,
    ApplicantInterview,
    DocumentType,
    Student,
    StudentEnrollmentStatus,
)
from src.infrastructure.database.models.user import User

__all__ = [
    "Base",
    "OrganizationScopedMixin",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_id",
    # Users and organizations
    "User",
    "Organization",
    "SubscriptionPlan",
    "OrganizationUsage",
    "BillingHistory",
    "TeamMember",
    "NumberingSetting",
    "OrganizationTheme",
    # Catalog
    "AcademicLevel",
    "AcademicProgram",
    "College",
    "Course",
    # Students and admission
    "Student",
    "StudentEnrollmentStatus",
    "DocumentType",
    "ApplicantDocument",
    "ApplicantInterview",
    # Curriculum
    "Curriculum",
    "CurriculumYear",
    "CurriculumSemester",
    "CurriculumCourse",
    # Offerings and enrollment
    "CourseOffering",
    "CourseOfferingSchedule",
    "Enrollment",
    "StudentPayment",
    # Projects
    "Project",
    "Attendance",
]
