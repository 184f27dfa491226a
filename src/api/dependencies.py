# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users
- Resolve the caller's membership in the organization of the path
- Get service instances

Example:
    @router.get("/organizations/{organization_id}/students")
    async def list_students(
        actor: Membership,
        service: StudentServiceDep,
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import CurrentUser, get_current_user
from src.core.config import Settings, get_settings
from src.domains.access import AccessService, Action, Actor, Resource, can
from src.domains.admin import AdminService
from src.domains.admission import AdmissionService
from src.domains.attendance import AttendanceService
from src.domains.auth import AuthService, JWTManager, PasswordHasher
from src.domains.billing import BillingService
from src.domains.catalog import CatalogService
from src.domains.curriculum import CurriculumService
from src.domains.enrollment import EnrollmentService
from src.domains.member import MemberService
from src.domains.numbering import NumberingService
from src.domains.offering import OfferingService
from src.domains.organization import OrganizationService
from src.domains.project import ProjectService, TemplateRepository
from src.domains.student import StudentService
from src.domains.theme import ThemeService
from src.infrastructure.database.connection import get_session

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession shared by every service of the request.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_platform_admin(request: Request) -> CurrentUser:
    """Require a platform admin or super-admin.

    Raises:
        HTTPException: If not authenticated or not a platform admin.
    """
    user = require_auth(request)
    if not user.is_platform_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return user


# =========================================================================
# Membership Dependencies
# =========================================================================


async def get_membership(
    organization_id: Annotated[str, Path(description="Organization ID")],
    user: Annotated[CurrentUser, Depends(require_auth)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Actor:
    """Resolve the caller's role in the organization of the path.

    Raises:
        HTTPException: If the caller is not a member of the organization.
    """
    actor = await AccessService(db).build_actor(user.id, organization_id)
    if actor.role is None:
        logger.info("Membership denied: user=%s, org=%s", user.id, organization_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not a member of this organization",
        )
    return actor


class RequireAction:
    """Dependency for requiring a policy grant in the path's organization.

    Services authorize every call themselves; this is for endpoints that
    should fail before any body parsing or service work.

    Example:
        @router.delete("/organizations/{organization_id}")
        async def delete_organization(
            actor: Actor = Depends(RequireAction(Action.DELETE, Resource.ORGANIZATION)),
        ):
            ...
    """

    def __init__(self, action: Action, resource: Resource) -> None:
        self.action = action
        self.resource = resource

    def __call__(self, actor: Annotated[Actor, Depends(get_membership)]) -> Actor:
        if not can(self.action, self.resource, actor.role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{actor.role.value}' may not {self.action.value} {self.resource.value}",
            )
        return actor


# =========================================================================
# Service Dependencies
# =========================================================================


def get_jwt_manager(settings: Annotated[Settings, Depends(get_settings)]) -> JWTManager:
    return JWTManager(settings.jwt)


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_template_repository(settings: Annotated[Settings, Depends(get_settings)]) -> TemplateRepository:
    return TemplateRepository(settings.registrar.templates_dir)


def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    jwt_manager: Annotated[JWTManager, Depends(get_jwt_manager)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> AuthService:
    return AuthService(db, jwt_manager, hasher)


def get_organization_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> OrganizationService:
    return OrganizationService(db, default_plan=settings.registrar.default_plan)


def get_billing_service(db: Annotated[AsyncSession, Depends(get_db)]) -> BillingService:
    return BillingService(db)


def get_member_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> MemberService:
    return MemberService(db, hasher)


def get_student_service(db: Annotated[AsyncSession, Depends(get_db)]) -> StudentService:
    return StudentService(db)


def get_admission_service(db: Annotated[AsyncSession, Depends(get_db)]) -> AdmissionService:
    return AdmissionService(db)


def get_catalog_service(db: Annotated[AsyncSession, Depends(get_db)]) -> CatalogService:
    return CatalogService(db)


def get_curriculum_service(db: Annotated[AsyncSession, Depends(get_db)]) -> CurriculumService:
    return CurriculumService(db)


def get_offering_service(db: Annotated[AsyncSession, Depends(get_db)]) -> OfferingService:
    return OfferingService(db)


def get_enrollment_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> EnrollmentService:
    return EnrollmentService(db, per_unit_amount=settings.registrar.per_unit_amount)


def get_numbering_service(db: Annotated[AsyncSession, Depends(get_db)]) -> NumberingService:
    return NumberingService(db)


def get_theme_service(db: Annotated[AsyncSession, Depends(get_db)]) -> ThemeService:
    return ThemeService(db)


def get_project_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    templates: Annotated[TemplateRepository, Depends(get_template_repository)],
) -> ProjectService:
    return ProjectService(db, templates)


def get_attendance_service(db: Annotated[AsyncSession, Depends(get_db)]) -> AttendanceService:
    return AttendanceService(db)


def get_admin_service(db: Annotated[AsyncSession, Depends(get_db)]) -> AdminService:
    return AdminService(db)


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

DB = Annotated[AsyncSession, Depends(get_db)]
AuthenticatedUser = Annotated[CurrentUser, Depends(require_auth)]
PlatformAdmin = Annotated[CurrentUser, Depends(require_platform_admin)]
Membership = Annotated[Actor, Depends(get_membership)]

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
OrganizationServiceDep = Annotated[OrganizationService, Depends(get_organization_service)]
BillingServiceDep = Annotated[BillingService, Depends(get_billing_service)]
MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]
StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]
AdmissionServiceDep = Annotated[AdmissionService, Depends(get_admission_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
CurriculumServiceDep = Annotated[CurriculumService, Depends(get_curriculum_service)]
OfferingServiceDep = Annotated[OfferingService, Depends(get_offering_service)]
EnrollmentServiceDep = Annotated[EnrollmentService, Depends(get_enrollment_service)]
NumberingServiceDep = Annotated[NumberingService, Depends(get_numbering_service)]
ThemeServiceDep = Annotated[ThemeService, Depends(get_theme_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
