# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student status derivation and transitions.

A student's current status is never stored on the student row. It is the
status of the history row with the latest changed_at; when several rows
share that timestamp the one with the highest id (the last inserted) wins.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from src.models.student import StudentStatus
from src.utils.datetime import ensure_utc

TRANSITIONS: dict[StudentStatus | None, frozenset[StudentStatus]] = {
    None: frozenset({StudentStatus.APPLICANT}),
    StudentStatus.APPLICANT: frozenset({StudentStatus.ENROLLED, StudentStatus.WITHDRAWN}),
    StudentStatus.ENROLLED: frozenset({StudentStatus.COMPLETED, StudentStatus.WITHDRAWN}),
    StudentStatus.WITHDRAWN: frozenset({StudentStatus.APPLICANT, StudentStatus.ENROLLED}),
    StudentStatus.COMPLETED: frozenset(),
}

# Statuses from which a student may pick course offerings
_COURSE_SELECTION_STATUSES = frozenset(
    {StudentStatus.APPLICANT, StudentStatus.ENROLLED, StudentStatus.WITHDRAWN}
)


class StatusRow(Protocol):
    id: int
    status: str
    changed_at: datetime


def derive_current_status(rows: Iterable[StatusRow]) -> StudentStatus | None:
    """Derive the current status from history rows.

    Args:
        rows: History rows in any order.

    Returns:
        Status of the latest row, or None for an empty history.
    """
    latest = max(rows, key=lambda row: (ensure_utc(row.changed_at), row.id), default=None)
    if latest is None:
        return None
    return StudentStatus(latest.status)


def can_transition(current: StudentStatus | None, new: StudentStatus) -> bool:
    """Check whether a status change is allowed."""
    return new in TRANSITIONS.get(current, frozenset())


def can_select_courses(status: StudentStatus | None) -> bool:
    """Check whether a student in this status may be enrolled in offerings.

    Enrolled students may add courses within the same term; withdrawn
    students may return.
    """
    return status in _COURSE_SELECTION_STATUSES
