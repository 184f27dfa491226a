# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization domain package.

This package provides:
- Organization creation, rename and deletion
- Plan usage counting and ceiling enforcement
"""

from src.domains.organization.service import (
    OrganizationNotFoundError,
    OrganizationService,
    OrganizationServiceError,
    PlanNotFoundError,
)
from src.domains.organization.usage import (
    UsageGuard,
    UsageKind,
    UsageLimitExceededError,
    UsageNotFoundError,
)

__all__ = [
    "OrganizationService",
    "OrganizationServiceError",
    "OrganizationNotFoundError",
    "PlanNotFoundError",
    "UsageGuard",
    "UsageKind",
    "UsageLimitExceededError",
    "UsageNotFoundError",
]
