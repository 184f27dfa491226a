# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering, enrollment, tuition and payment models."""

from datetime import datetime, time
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from src.models.common import ORMModel


class PaymentCondition(str, Enum):
    """How the tuition total is split."""

    FULL = "full"
    TWO_INSTALLMENTS = "2x"
    THREE_INSTALLMENTS = "3x"
    FREE = "free"


# =========================================================================
# Offerings
# =========================================================================


class ScheduleInput(BaseModel):
    """Schedule row sent by the client; id is absent for new rows."""

    id: str | None = None
    day: str = Field(min_length=1, max_length=10)
    start_time: time
    end_time: time
    room: str = Field(min_length=1, max_length=50)

    @model_validator(mode="after")
    def check_time_order(self) -> "ScheduleInput":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class OfferingRequest(BaseModel):
    """Full offering definition with its schedules."""

    program_id: str
    course_id: str
    academic_year: str = Field(min_length=1, max_length=20)
    semester: int = Field(ge=1, le=3)
    year_level: int = Field(ge=1, le=10)
    section: str = Field(min_length=1, max_length=50)
    slot: int = Field(ge=1)
    project_id: str | None = None
    schedules: list[ScheduleInput] = Field(min_length=1)


class ScheduleResponse(ORMModel):
    id: str
    day: str
    start_time: time
    end_time: time
    room: str


class OfferingResponse(ORMModel):
    id: str
    organization_id: str
    program_id: str
    course_id: str
    course_code: str | None = None
    course_desc: str | None = None
    academic_year: str
    semester: int
    semester_label: str
    year_level: int
    section: str
    slot: int
    project_id: str | None
    schedules: list[ScheduleResponse]


class ScheduleSyncResult(BaseModel):
    """Rows touched by a schedule reconciliation."""

    inserted: int
    updated: int
    deleted: int


class OfferingUpdateResponse(BaseModel):
    offering: OfferingResponse
    schedules: ScheduleSyncResult


# =========================================================================
# Enrollment, tuition and payments
# =========================================================================


class EnrollRequest(BaseModel):
    offering_ids: list[str] = Field(min_length=1)


class EnrollmentResponse(BaseModel):
    id: str
    student_id: str
    course_offering_id: str
    course_code: str
    course_desc: str
    section: str
    tuition_hours: Decimal
    units: Decimal
    status: str
    enrolled_at: datetime


class TuitionFee(BaseModel):
    """Result of a tuition computation."""

    condition: PaymentCondition
    total: Decimal
    installments: list[Decimal]


class TuitionSummaryResponse(BaseModel):
    student_id: str
    total_tuition_hours: Decimal
    per_unit_amount: Decimal
    fee: TuitionFee


class PaymentRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    payment_number: str = Field(min_length=1, max_length=50)
    remarks: str | None = None


class PaymentResponse(ORMModel):
    id: str
    enrollment_id: str
    amount: Decimal
    payment_number: str
    remarks: str | None
    paid_at: datetime
    recorded_by: str | None
