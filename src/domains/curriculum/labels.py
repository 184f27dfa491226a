# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Display labels for curriculum and offering terms."""

YEAR_LABELS = {
    1: "First Year",
    2: "Second Year",
    3: "Third Year",
    4: "Fourth Year",
}

CURRICULUM_SEMESTER_LABELS = {
    1: "First Semester",
    2: "Second Semester",
    3: "Summer",
}

# Offerings call the third term "Midyear" instead of "Summer"
OFFERING_SEMESTER_LABELS = {
    1: "First Semester",
    2: "Second Semester",
    3: "Midyear",
}


def year_label(year_level: int) -> str:
    return YEAR_LABELS.get(year_level, f"{year_level} Year")


def semester_label(semester: int) -> str:
    return CURRICULUM_SEMESTER_LABELS.get(semester, f"{semester} Semester")


def offering_semester_label(semester: int) -> str:
    return OFFERING_SEMESTER_LABELS.get(semester, f"{semester} Semester")
