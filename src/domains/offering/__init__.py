# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering domain package."""

from src.domains.offering.schedule_diff import (
    ScheduleDiff,
    UnknownScheduleError,
    diff_schedules,
)
from src.domains.offering.service import (
    InvalidOfferingReferenceError,
    OfferingInUseError,
    OfferingNotFoundError,
    OfferingService,
    OfferingServiceError,
)

__all__ = [
    "OfferingService",
    "OfferingServiceError",
    "OfferingNotFoundError",
    "OfferingInUseError",
    "InvalidOfferingReferenceError",
    "ScheduleDiff",
    "UnknownScheduleError",
    "diff_schedules",
]
