# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the Campus Registrar API.

All timestamps are stored timezone-aware in UTC. Calendar helpers used by
attendance and numbering live here as well so that every module agrees on
what "this year" and "this month" mean.

Usage:
    from src.utils.datetime import utc_now

    # For SQLAlchemy model defaults
    created_at = mapped_column(DateTime(timezone=True), default=utc_now)
"""

import calendar
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    SQLite drops tzinfo on the way back, so values read from it are
    naive; those are assumed to already be UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def days_in_month(year: int, month: int) -> int:
    """Number of calendar days in a month.

    Args:
        year: Four digit year.
        month: Month number, 1-12.

    Returns:
        Day count (28-31).

    Raises:
        ValueError: If month is outside 1-12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return calendar.monthrange(year, month)[1]


def month_range(year: int, month: int) -> tuple[date, date]:
    """First and last date of a month.

    Args:
        year: Four digit year.
        month: Month number, 1-12.

    Returns:
        Tuple of (first_day, last_day).
    """
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def month_name(month: int) -> str:
    """English month name, e.g. 3 -> "March"."""
    return calendar.month_name[month]
