# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project, template, attendance and daily time record models."""

import re
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from src.models.common import ORMModel

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ProjectTemplate(BaseModel):
    """Defaults a new project is created from."""

    name: str
    type: str
    default_name: str
    default_description: str | None = None
    user_targets: list[str] = []
    requirements: list[str] = []

    @field_validator("user_targets", "requirements", mode="before")
    @classmethod
    def normalize_list(cls, value: object) -> list:
        return value if isinstance(value, list) else []


class ProjectCreateRequest(BaseModel):
    """New project; name and description fall back to the template defaults."""

    type: str = Field(min_length=1, max_length=50)
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None


class ProjectResponse(ORMModel):
    id: str
    organization_id: str
    name: str
    description: str | None
    type: str
    user_targets: list[str]
    requirements: list[str]
    created_by: str | None
    created_at: datetime


class TimeSlot(BaseModel):
    """One labeled clock entry, e.g. {"label": "AM IN", "time": "07:58"}."""

    label: str = Field(min_length=1, max_length=50)
    time: str

    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        if not _TIME_PATTERN.match(value):
            raise ValueError("time must be HH:MM")
        return value


class AttendanceRecordRequest(BaseModel):
    """Append a clock entry; faculty_id defaults to the caller."""

    date: date
    label: str = Field(min_length=1, max_length=50)
    time: str
    faculty_id: str | None = None

    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        if not _TIME_PATTERN.match(value):
            raise ValueError("time must be HH:MM")
        return value


class AttendanceResponse(ORMModel):
    id: str
    project_id: str
    faculty_id: str
    date: date
    times: list[TimeSlot]
    display: list[TimeSlot] = []


class DTRDay(BaseModel):
    """Daily time record row."""

    day: int
    am_arrival: str | None = None
    am_departure: str | None = None
    pm_arrival: str | None = None
    pm_departure: str | None = None


class DTRResponse(BaseModel):
    faculty_id: str
    name: str
    year: int
    month: int
    days: list[DTRDay]
