# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the role-based access policy."""

import pytest

from src.core.errors import PermissionDeniedError
from src.domains.access import Action, Actor, Resource, authorize, can, permissions_for
from src.models.common import MemberRole


def make_actor(role: MemberRole | None) -> Actor:
    return Actor(user_id="user-1", organization_id="org-1", role=role)


class TestCan:
    """Tests for can()."""

    @pytest.mark.parametrize("resource", list(Resource))
    @pytest.mark.parametrize("action", list(Action))
    def test_owner_can_do_everything(self, action: Action, resource: Resource) -> None:
        """Test that the owner is granted every action on every resource."""
        assert can(action, resource, MemberRole.OWNER) is True

    @pytest.mark.parametrize("role", [MemberRole.ADMIN, MemberRole.ORG_ADMIN])
    def test_admins_cannot_manage_members_or_billing(self, role: MemberRole) -> None:
        """Test that admin roles leave membership and plan changes to the owner."""
        assert can(Action.VIEW, Resource.MEMBER, role) is True
        assert can(Action.CREATE, Resource.MEMBER, role) is False
        assert can(Action.DELETE, Resource.MEMBER, role) is False
        assert can(Action.VIEW, Resource.BILLING, role) is True
        assert can(Action.UPDATE, Resource.BILLING, role) is False
        assert can(Action.DELETE, Resource.ORGANIZATION, role) is False

    @pytest.mark.parametrize("role", [MemberRole.ADMIN, MemberRole.ORG_ADMIN])
    def test_admins_run_registrar_work(self, role: MemberRole) -> None:
        """Test that admin roles can write academic records."""
        assert can(Action.CREATE, Resource.STUDENT, role) is True
        assert can(Action.APPROVE, Resource.ADMISSION, role) is True
        assert can(Action.CREATE, Resource.ENROLLMENT, role) is True
        assert can(Action.MANAGE, Resource.ATTENDANCE, role) is True

    def test_faculty_logs_own_attendance_only(self) -> None:
        """Test that faculty may record but not manage attendance."""
        assert can(Action.CREATE, Resource.ATTENDANCE, MemberRole.FACULTY) is True
        assert can(Action.VIEW, Resource.ATTENDANCE, MemberRole.FACULTY) is True
        assert can(Action.MANAGE, Resource.ATTENDANCE, MemberRole.FACULTY) is False

    def test_faculty_is_read_only_elsewhere(self) -> None:
        """Test that faculty cannot write registrar data or see billing."""
        assert can(Action.VIEW, Resource.STUDENT, MemberRole.FACULTY) is True
        assert can(Action.CREATE, Resource.STUDENT, MemberRole.FACULTY) is False
        assert can(Action.VIEW, Resource.BILLING, MemberRole.FACULTY) is False

    @pytest.mark.parametrize("role", [MemberRole.STUDENT, MemberRole.MEMBER])
    def test_readers_see_catalog_only(self, role: MemberRole) -> None:
        """Test that student and member roles only view public catalog data."""
        assert can(Action.VIEW, Resource.CATALOG, role) is True
        assert can(Action.VIEW, Resource.OFFERING, role) is True
        assert can(Action.VIEW, Resource.STUDENT, role) is False
        assert can(Action.VIEW, Resource.ATTENDANCE, role) is False
        assert can(Action.CREATE, Resource.CATALOG, role) is False

    def test_role_strings_are_accepted(self) -> None:
        """Test that stored role strings are coerced to roles."""
        assert can(Action.UPDATE, Resource.BILLING, "owner") is True
        assert can(Action.UPDATE, Resource.BILLING, "faculty") is False

    @pytest.mark.parametrize("role", [None, "", "registrar", "OWNER"])
    def test_unknown_or_missing_role_gets_nothing(self, role: str | None) -> None:
        """Test that non-members and unknown roles are denied."""
        assert all(not can(action, resource, role) for action in Action for resource in Resource)


class TestAuthorize:
    """Tests for authorize()."""

    def test_allowed_action_returns_none(self) -> None:
        """Test that a granted action passes silently."""
        assert authorize(make_actor(MemberRole.OWNER), Action.DELETE, Resource.ORGANIZATION) is None

    def test_denied_action_raises_permission_denied(self) -> None:
        """Test that a refused action raises with a readable message."""
        with pytest.raises(PermissionDeniedError) as exc_info:
            authorize(make_actor(MemberRole.FACULTY), Action.CREATE, Resource.STUDENT)

        assert exc_info.value.kind == "permission_denied"
        assert exc_info.value.message == "Role 'faculty' cannot create student"

    def test_missing_role_message(self) -> None:
        """Test the message for callers without a membership."""
        with pytest.raises(PermissionDeniedError, match="Role 'none' cannot view"):
            authorize(make_actor(None), Action.VIEW, Resource.CATALOG)


class TestPermissionsFor:
    """Tests for permissions_for()."""

    def test_lists_every_resource(self) -> None:
        """Test that the map covers every resource, even without grants."""
        permissions = permissions_for(MemberRole.MEMBER)

        assert list(permissions) == [resource.value for resource in Resource]
        assert permissions["billing"] == []
        assert permissions["catalog"] == ["view"]

    def test_actions_in_declaration_order(self) -> None:
        """Test that granted actions keep the Action declaration order."""
        permissions = permissions_for(MemberRole.FACULTY)

        assert permissions["attendance"] == ["view", "create", "update"]

    def test_matches_can(self) -> None:
        """Test that the report agrees with can() for every role."""
        for role in MemberRole:
            permissions = permissions_for(role)
            for resource in Resource:
                for action in Action:
                    granted = action.value in permissions[resource.value]
                    assert granted is can(action, resource, role)
