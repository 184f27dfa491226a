# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Daily time record (DTR) mapping.

Faculty log free-text labeled clock entries such as "AM IN 07:58". The DTR
form has four fixed columns. Each column takes the last entry of the day
whose label contains one of the column's patterns as whole words, ignoring
case and spacing, so "AFTERNOON OUT" fills the afternoon departure and
never the noon one.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from src.models.project import DTRDay
from src.utils.datetime import days_in_month

DTR_PATTERNS: dict[str, tuple[str, ...]] = {
    "am_arrival": ("MORNING IN", "AM IN", "A.M. ARRIVAL"),
    "am_departure": ("MORNING OUT", "NOON OUT", "LUNCH OUT", "AM OUT", "A.M. DEPARTURE"),
    "pm_arrival": ("AFTERNOON IN", "PM IN", "P.M. ARRIVAL"),
    "pm_departure": ("AFTERNOON OUT", "PM OUT", "P.M. DEPARTURE"),
}


def _compile(patterns: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = (r"\s+".join(re.escape(word) for word in p.split()) for p in patterns)
    return re.compile(
        r"(?<![A-Z0-9])(?:" + "|".join(alternatives) + r")(?![A-Z0-9])",
        re.IGNORECASE,
    )


_COLUMN_PATTERNS: dict[str, re.Pattern[str]] = {
    column: _compile(patterns) for column, patterns in DTR_PATTERNS.items()
}


def display_slots(times: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Keep the last entry per label, in order of each label's first appearance."""
    last: dict[str, dict[str, str]] = {}
    for slot in times:
        label = str(slot.get("label", ""))
        last[label] = {"label": label, "time": str(slot.get("time", ""))}
    return list(last.values())


def match_column(label: str) -> str | None:
    """Return the DTR column a label belongs to, if any."""
    for column, pattern in _COLUMN_PATTERNS.items():
        if pattern.search(label):
            return column
    return None


def map_dtr_row(times: Iterable[Mapping[str, Any]]) -> dict[str, str | None]:
    """Map one day's entries to the four DTR columns.

    Every column is resolved on its own from the latest matching entry.

    Args:
        times: Entries of one day in logging order.

    Returns:
        Column name to time; columns without a matching entry are None.
    """
    entries = list(times)
    row: dict[str, str | None] = {}
    for column, pattern in _COLUMN_PATTERNS.items():
        match = next(
            (s for s in reversed(entries) if pattern.search(str(s.get("label", "")))),
            None,
        )
        row[column] = (str(match.get("time", "")) or None) if match else None
    return row


def build_month(
    year: int,
    month: int,
    records: Mapping[date, Sequence[Mapping[str, Any]]],
) -> list[DTRDay]:
    """Build one DTR row for every calendar day of a month.

    Args:
        year: Four digit year.
        month: Month number, 1-12.
        records: Entries per date; dates outside the month are ignored.

    Returns:
        Rows for day 1 through the last day of the month.
    """
    days = []
    for day in range(1, days_in_month(year, month) + 1):
        times = records.get(date(year, month, day), ())
        days.append(DTRDay(day=day, **map_dtr_row(times)))
    return days
