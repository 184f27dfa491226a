# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum tree request and response models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.models.common import ORMModel


class CurriculumCreateRequest(BaseModel):
    program_name: str = Field(min_length=1, max_length=255)
    school_year: str = Field(min_length=1, max_length=20)
    curriculum_type: str | None = Field(default=None, max_length=50)
    project_id: str | None = None


class CurriculumResponse(ORMModel):
    id: str
    organization_id: str
    program_name: str
    school_year: str
    curriculum_type: str | None
    project_id: str | None
    created_at: datetime


class CurriculumCourseAddRequest(BaseModel):
    """Place a catalog course in a year and semester."""

    course_id: str
    year_level: int = Field(ge=1, le=10)
    semester: int = Field(ge=1, le=3)


class CurriculumCourseMoveRequest(BaseModel):
    year_level: int = Field(ge=1, le=10)
    semester: int = Field(ge=1, le=3)


class CurriculumCourseResponse(ORMModel):
    id: str
    semester_id: str
    source_course_id: str | None
    course_code: str
    course_name: str
    units: Decimal


class CurriculumSemesterNode(BaseModel):
    id: str
    semester: int
    label: str
    total_units: Decimal
    courses: list[CurriculumCourseResponse]


class CurriculumYearNode(BaseModel):
    id: str
    year_level: int
    label: str
    semesters: list[CurriculumSemesterNode]


class CurriculumTreeResponse(BaseModel):
    """Curriculum with its years, semesters and course snapshots."""

    curriculum: CurriculumResponse
    years: list[CurriculumYearNode]
