# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Team member service.

This module provides the MemberService class for:
- Adding members by email, creating an account when none exists
- Updating member details and roles
- Removing members
- Listing members and assignable roles

Adding a member counts against the plan's team member ceiling. The owner
membership is created with the organization and can neither be assigned
nor removed here.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    translate_integrity_error,
)
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.auth.password import PasswordHasher, generate_password
from src.domains.organization.usage import UsageGuard, UsageKind
from src.infrastructure.database.models import TeamMember, User
from src.models.common import ASSIGNABLE_ROLES, MemberRole
from src.models.organization import (
    MemberCreatedResponse,
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
    RoleResponse,
)

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    MemberRole.OWNER: "Owner",
    MemberRole.ORG_ADMIN: "Organization Admin",
    MemberRole.ADMIN: "Admin",
    MemberRole.FACULTY: "Faculty",
    MemberRole.STUDENT: "Student",
    MemberRole.MEMBER: "Member",
}


class MemberServiceError(Exception):
    """Base exception for member service errors."""

    pass


class MemberNotFoundError(MemberServiceError, NotFoundError):
    """Raised when a membership does not exist in the organization."""

    pass


class AlreadyMemberError(MemberServiceError, ConflictError):
    """Raised when the user already belongs to the organization."""

    pass


class OwnerRoleError(MemberServiceError, ValidationFailedError):
    """Raised when assigning the owner role or changing the owner membership."""

    pass


class MemberService:
    """Service for organization team members.

    Attributes:
        db: Async database session.
        usage: Usage guard sharing the same session.
    """

    def __init__(self, db: AsyncSession, hasher: PasswordHasher | None = None) -> None:
        self.db = db
        self.usage = UsageGuard(db)
        self._hasher = hasher or PasswordHasher()

    def list_roles(self) -> list[RoleResponse]:
        """Roles that can be given to a member."""
        return [RoleResponse(value=r.value, label=ROLE_LABELS[r]) for r in ASSIGNABLE_ROLES]

    async def list_members(self, actor: Actor) -> list[MemberResponse]:
        authorize(actor, Action.VIEW, Resource.MEMBER)
        result = await self.db.execute(
            select(TeamMember)
            .where(TeamMember.organization_id == actor.organization_id)
            .order_by(TeamMember.created_at)
        )
        return [MemberResponse.model_validate(m) for m in result.scalars().all()]

    async def add_member(self, actor: Actor, request: MemberCreateRequest) -> MemberCreatedResponse:
        """Add a user to the organization.

        An existing account with the email is reused. Otherwise an account
        is created with a generated password that must be changed at first
        login; that password is returned only in this response.

        Raises:
            OwnerRoleError: If the requested role is owner.
            UsageLimitExceededError: If the team member ceiling is reached.
            AlreadyMemberError: If the user is already a member.
        """
        authorize(actor, Action.CREATE, Resource.MEMBER)
        if request.role is MemberRole.OWNER:
            raise OwnerRoleError("The owner role cannot be assigned")

        await self.usage.reserve(actor.organization_id, UsageKind.TEAM_MEMBERS)

        email = request.email.lower()
        result = await self.db.execute(select(User).where(func.lower(User.email) == email))
        user = result.scalar_one_or_none()
        generated_password = None

        if user:
            existing = await self.db.execute(
                select(TeamMember.id).where(
                    TeamMember.organization_id == actor.organization_id,
                    TeamMember.user_id == user.id,
                )
            )
            if existing.scalar_one_or_none():
                raise AlreadyMemberError(f"{email} is already a member")
        else:
            generated_password = generate_password()
            user = User(
                email=email,
                name=request.name,
                password_hash=self._hasher.hash(generated_password),
                must_change_password=True,
            )
            self.db.add(user)
            await self.db.flush()

        member = TeamMember(
            organization_id=actor.organization_id,
            user_id=user.id,
            name=request.name,
            email=email,
            role=request.role.value,
            address=request.address,
            birthdate=request.birthdate,
        )
        self.db.add(member)
        try:
            await self.db.flush()
            await self.usage.refresh(actor.organization_id)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, f"{email} is already a member")
        await self.db.refresh(member)

        logger.info(
            "Added member: user=%s, role=%s, org=%s, new_account=%s, by=%s",
            user.id,
            member.role,
            actor.organization_id,
            generated_password is not None,
            actor.user_id,
        )
        return MemberCreatedResponse(
            member=MemberResponse.model_validate(member),
            generated_password=generated_password,
        )

    async def update_member(
        self,
        actor: Actor,
        member_id: str,
        request: MemberUpdateRequest,
    ) -> MemberResponse:
        """Update a member's details or role.

        Raises:
            OwnerRoleError: If the role change involves the owner role.
        """
        authorize(actor, Action.UPDATE, Resource.MEMBER)
        member = await self._get_member(actor.organization_id, member_id)

        if request.role is not None:
            if request.role is MemberRole.OWNER:
                raise OwnerRoleError("The owner role cannot be assigned")
            if member.role == MemberRole.OWNER.value:
                raise OwnerRoleError("The owner's role cannot be changed")

        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(member, field, value.value if isinstance(value, MemberRole) else value)
        await self.db.commit()
        await self.db.refresh(member)

        logger.info("Updated member: id=%s, by=%s", member.id, actor.user_id)
        return MemberResponse.model_validate(member)

    async def remove_member(self, actor: Actor, member_id: str) -> None:
        """Remove a member. The owner cannot be removed.

        The user account is kept; it may belong to other organizations.
        """
        authorize(actor, Action.DELETE, Resource.MEMBER)
        member = await self._get_member(actor.organization_id, member_id)
        if member.role == MemberRole.OWNER.value:
            raise OwnerRoleError("The owner cannot be removed")

        await self.db.execute(delete(TeamMember).where(TeamMember.id == member.id))
        await self.usage.refresh(actor.organization_id)
        await self.db.commit()

        logger.info(
            "Removed member: id=%s, org=%s, by=%s",
            member_id,
            actor.organization_id,
            actor.user_id,
        )

    async def _get_member(self, organization_id: str, member_id: str) -> TeamMember:
        result = await self.db.execute(
            select(TeamMember).where(
                TeamMember.id == member_id,
                TeamMember.organization_id == organization_id,
            )
        )
        member = result.scalar_one_or_none()
        if not member:
            raise MemberNotFoundError(f"Member {member_id} not found")
        return member
