# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum domain package."""

from src.domains.curriculum.labels import (
    offering_semester_label,
    semester_label,
    year_label,
)
from src.domains.curriculum.service import (
    CurriculumCourseNotFoundError,
    CurriculumNotFoundError,
    CurriculumService,
    CurriculumServiceError,
    InvalidCourseReferenceError,
)

__all__ = [
    "CurriculumService",
    "CurriculumServiceError",
    "CurriculumNotFoundError",
    "CurriculumCourseNotFoundError",
    "InvalidCourseReferenceError",
    "offering_semester_label",
    "semester_label",
    "year_label",
]
