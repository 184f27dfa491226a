# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student domain package.

This package provides:
- Applicant and student records
- Status derivation from the append-only history
- The status state machine and course selection eligibility
"""

from src.domains.student.service import (
    InvalidStatusTransitionError,
    StudentNotFoundError,
    StudentService,
    StudentServiceError,
    latest_status_subquery,
)
from src.domains.student.status import (
    TRANSITIONS,
    can_select_courses,
    can_transition,
    derive_current_status,
)

__all__ = [
    "StudentService",
    "StudentServiceError",
    "StudentNotFoundError",
    "InvalidStatusTransitionError",
    "latest_status_subquery",
    "TRANSITIONS",
    "can_select_courses",
    "can_transition",
    "derive_current_status",
]
