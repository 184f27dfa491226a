# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-based access policy.

A single table decides what each membership role may do to each resource.
Services call authorize() before touching data and the API exposes the
same table through permissions_for(), so clients never compute access on
their own.

Example:
    >>> can(Action.VIEW, Resource.BILLING, MemberRole.FACULTY)
    False
    >>> can(Action.UPDATE, Resource.BILLING, MemberRole.OWNER)
    True
"""

from enum import Enum
from typing import NamedTuple

from src.core.errors import PermissionDeniedError
from src.models.common import MemberRole


class Action(str, Enum):
    """Operations a role can be granted."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    # Act on rows that belong to another member (e.g. someone else's attendance)
    MANAGE = "manage"


class Resource(str, Enum):
    """Protected resource families."""

    ORGANIZATION = "organization"
    MEMBER = "member"
    BILLING = "billing"
    CATALOG = "catalog"
    CURRICULUM = "curriculum"
    OFFERING = "offering"
    STUDENT = "student"
    ADMISSION = "admission"
    ENROLLMENT = "enrollment"
    PAYMENT = "payment"
    ATTENDANCE = "attendance"
    PROJECT = "project"
    SETTINGS = "settings"


class Actor(NamedTuple):
    """Authenticated user acting inside one organization."""

    user_id: str
    organization_id: str
    role: MemberRole | None


_ALL = frozenset(Action)

# Resources whose changes stay with the owner
_OWNER_ONLY: dict[Resource, frozenset[Action]] = {
    Resource.ORGANIZATION: frozenset({Action.UPDATE, Action.DELETE}),
    Resource.MEMBER: frozenset({Action.CREATE, Action.UPDATE, Action.DELETE}),
    Resource.BILLING: frozenset({Action.UPDATE}),
}

_ADMIN_GRANTS: dict[Resource, frozenset[Action]] = {
    resource: _ALL - _OWNER_ONLY.get(resource, frozenset()) for resource in Resource
}

_FACULTY_GRANTS: dict[Resource, frozenset[Action]] = {
    resource: frozenset({Action.VIEW}) for resource in Resource if resource is not Resource.BILLING
}
_FACULTY_GRANTS[Resource.ATTENDANCE] = frozenset({Action.VIEW, Action.CREATE, Action.UPDATE})

_READER_GRANTS: dict[Resource, frozenset[Action]] = {
    resource: frozenset({Action.VIEW})
    for resource in (
        Resource.ORGANIZATION,
        Resource.CATALOG,
        Resource.CURRICULUM,
        Resource.OFFERING,
        Resource.PROJECT,
    )
}

POLICY: dict[MemberRole, dict[Resource, frozenset[Action]]] = {
    MemberRole.OWNER: {resource: _ALL for resource in Resource},
    MemberRole.ORG_ADMIN: _ADMIN_GRANTS,
    MemberRole.ADMIN: _ADMIN_GRANTS,
    MemberRole.FACULTY: _FACULTY_GRANTS,
    MemberRole.STUDENT: _READER_GRANTS,
    MemberRole.MEMBER: _READER_GRANTS,
}


def _coerce_role(role: MemberRole | str | None) -> MemberRole | None:
    if role is None or isinstance(role, MemberRole):
        return role
    try:
        return MemberRole(role)
    except ValueError:
        return None


def can(action: Action, resource: Resource, role: MemberRole | str | None) -> bool:
    """Check whether a role may perform an action on a resource.

    Unknown roles and a missing role are granted nothing.

    Args:
        action: Requested action.
        resource: Target resource family.
        role: Membership role of the caller, or None if not a member.

    Returns:
        True if the policy grants the action.
    """
    member_role = _coerce_role(role)
    if member_role is None:
        return False
    return action in POLICY[member_role].get(resource, frozenset())


def authorize(actor: Actor, action: Action, resource: Resource) -> None:
    """Raise PermissionDeniedError unless the actor's role allows the action."""
    if not can(action, resource, actor.role):
        raise PermissionDeniedError(
            f"Role '{actor.role.value if actor.role else 'none'}' cannot "
            f"{action.value} {resource.value}"
        )


def permissions_for(role: MemberRole | str | None) -> dict[str, list[str]]:
    """List granted actions per resource, in declaration order."""
    return {
        resource.value: [action.value for action in Action if can(action, resource, role)]
        for resource in Resource
    }
