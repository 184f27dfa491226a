# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Team member domain package."""

from src.domains.member.service import (
    ROLE_LABELS,
    AlreadyMemberError,
    MemberNotFoundError,
    MemberService,
    MemberServiceError,
    OwnerRoleError,
)

__all__ = [
    "ROLE_LABELS",
    "MemberService",
    "MemberServiceError",
    "MemberNotFoundError",
    "AlreadyMemberError",
    "OwnerRoleError",
]
