# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    auth: Registration, login, admin login, refresh, password change.
    organizations: Organization CRUD, usage and permissions.
    billing: Plans, plan changes and billing history.
    members: Team members and assignable roles.
    settings: Theme colors and numbering schemes.
    students: Applicants, students and status history.
    admissions: Document types, documents, interviews and assignment.
    catalog: Academic levels, programs, colleges and courses.
    curricula: Curriculum trees.
    offerings: Course offerings and their schedules.
    enrollments: Enrollment, tuition and payments.
    projects: Projects and project templates.
    attendance: Faculty attendance and daily time records.
    admin: Platform admin dashboard.
"""

from fastapi import APIRouter

from src.api.v1 import (
    admin,
    admissions,
    attendance,
    auth,
    billing,
    catalog,
    curricula,
    enrollments,
    members,
    offerings,
    organizations,
    projects,
    settings,
    students,
)

ORGANIZATION_PREFIX = "/organizations/{organization_id}"

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(organizations.router, prefix="/organizations", tags=["Organizations"])
router.include_router(billing.router, tags=["Billing"])
router.include_router(members.router, tags=["Members"])
router.include_router(settings.router, prefix=ORGANIZATION_PREFIX, tags=["Settings"])
router.include_router(students.router, prefix=f"{ORGANIZATION_PREFIX}/students", tags=["Students"])
router.include_router(admissions.router, prefix=ORGANIZATION_PREFIX, tags=["Admission"])
router.include_router(catalog.router, prefix=ORGANIZATION_PREFIX, tags=["Catalog"])
router.include_router(curricula.router, prefix=f"{ORGANIZATION_PREFIX}/curricula", tags=["Curricula"])
router.include_router(offerings.router, prefix=f"{ORGANIZATION_PREFIX}/offerings", tags=["Offerings"])
router.include_router(enrollments.router, prefix=ORGANIZATION_PREFIX, tags=["Enrollment"])
router.include_router(projects.router, tags=["Projects"])
router.include_router(
    attendance.router,
    prefix=f"{ORGANIZATION_PREFIX}/projects/{{project_id}}/attendance",
    tags=["Attendance"],
)

# Platform administration routes (no organization context)
router.include_router(admin.router, prefix="/admin", tags=["Admin"])

__all__ = ["router"]
