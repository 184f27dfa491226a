# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance domain package.

Faculty clock entries per project and day, and the monthly daily time
record built from them.
"""

from src.domains.attendance.dtr import build_month, display_slots, map_dtr_row
from src.domains.attendance.pdf import render_dtr_pdf
from src.domains.attendance.service import (
    AttendanceService,
    AttendanceServiceError,
    FacultyNotFoundError,
)

__all__ = [
    "AttendanceService",
    "AttendanceServiceError",
    "FacultyNotFoundError",
    "build_month",
    "display_slots",
    "map_dtr_row",
    "render_dtr_pdf",
]
