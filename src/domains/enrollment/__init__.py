# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides:
- Student enrollment in course offerings
- Tuition computation under payment conditions
- Payment recording
"""

from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    EnrollmentHasPaymentsError,
    EnrollmentNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
    NotEligibleError,
    OfferingNotFoundError,
    ProgramMismatchError,
)
from src.domains.enrollment.tuition import (
    InvalidPaymentConditionError,
    compute_tuition_fee,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentServiceError",
    "AlreadyEnrolledError",
    "EnrollmentHasPaymentsError",
    "EnrollmentNotFoundError",
    "NotEligibleError",
    "OfferingNotFoundError",
    "ProgramMismatchError",
    "InvalidPaymentConditionError",
    "compute_tuition_fee",
]
