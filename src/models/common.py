# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enums and base models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MemberRole(str, Enum):
    """Membership role of a user inside one organization."""

    OWNER = "owner"
    ORG_ADMIN = "org-admin"
    ADMIN = "admin"
    FACULTY = "faculty"
    STUDENT = "student"
    MEMBER = "member"


# Roles that can be given through the team page; ownership is never assigned
ASSIGNABLE_ROLES = (
    MemberRole.ADMIN,
    MemberRole.ORG_ADMIN,
    MemberRole.FACULTY,
    MemberRole.STUDENT,
    MemberRole.MEMBER,
)


class ORMModel(BaseModel):
    """Response model that can be built from SQLAlchemy instances."""

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Body returned for every domain error."""

    error: str
    detail: str
