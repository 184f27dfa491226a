# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic catalog request and response models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.models.common import ORMModel


class AcademicLevelRequest(BaseModel):
    academic_level: str = Field(min_length=1, max_length=100)


class AcademicLevelResponse(ORMModel):
    id: str
    academic_level: str
    created_at: datetime


class AcademicProgramRequest(BaseModel):
    academic_level_id: str
    program_code: str = Field(min_length=1, max_length=50)
    program_desc: str = Field(min_length=1)
    years: int = Field(default=4, ge=1, le=10)
    is_board: bool = False


class AcademicProgramResponse(ORMModel):
    id: str
    academic_level_id: str
    program_code: str
    program_desc: str
    years: int
    is_board: bool
    created_at: datetime


class CollegeRequest(BaseModel):
    cc_code: str = Field(min_length=1, max_length=50)
    cc_name: str = Field(min_length=1, max_length=255)


class CollegeResponse(ORMModel):
    id: str
    cc_code: str
    cc_name: str
    created_at: datetime


class CourseRequest(BaseModel):
    """Catalog course fields."""

    course_code: str = Field(min_length=1, max_length=50)
    course_desc: str = Field(min_length=1)
    lecture_hours: Decimal = Field(default=Decimal("0"), ge=0)
    laboratory_hours: Decimal = Field(default=Decimal("0"), ge=0)
    tuition_hours: Decimal = Field(default=Decimal("0"), ge=0)
    units: Decimal = Field(default=Decimal("0"), ge=0)
    credited_units: Decimal = Field(default=Decimal("0"), ge=0)
    is_include_in_gwa: bool = True
    department_id: str | None = None
    is_non_academic: bool = False


class CourseResponse(ORMModel):
    id: str
    course_code: str
    course_desc: str
    lecture_hours: Decimal
    laboratory_hours: Decimal
    tuition_hours: Decimal
    units: Decimal
    credited_units: Decimal
    is_include_in_gwa: bool
    department_id: str | None
    is_non_academic: bool
    created_at: datetime
