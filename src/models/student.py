# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student, status history and admission models."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field

from src.models.common import ORMModel


class StudentStatus(str, Enum):
    """Lifecycle states of a student record."""

    APPLICANT = "applicant"
    ENROLLED = "enrolled"
    COMPLETED = "completed"
    WITHDRAWN = "withdrawn"


class DocumentStatus(str, Enum):
    """Review states of an applicant document."""

    PENDING = "pending"
    APPROVED = "approved"
    APPROVED_WITH_WAIVER = "approved with waiver"


# =========================================================================
# Students
# =========================================================================


class StudentCreateRequest(BaseModel):
    """New applicant."""

    lastname: str = Field(min_length=1, max_length=100)
    firstname: str = Field(min_length=1, max_length=100)
    middlename: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    birthdate: date | None = None
    applicant_no: str | None = Field(
        default=None,
        max_length=50,
        description="Issued from the organization's numbering scheme when omitted",
    )


class StudentUpdateRequest(BaseModel):
    lastname: str | None = Field(default=None, min_length=1, max_length=100)
    firstname: str | None = Field(default=None, min_length=1, max_length=100)
    middlename: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    birthdate: date | None = None


class StudentResponse(ORMModel):
    """Student with the status derived from its history."""

    id: str
    organization_id: str
    applicant_no: str | None
    student_no: str | None
    lastname: str
    firstname: str
    middlename: str | None
    email: str | None
    birthdate: date | None
    assigned_program_id: str | None
    assigned_college_id: str | None
    current_status: StudentStatus | None = None
    created_at: datetime


class StatusChangeRequest(BaseModel):
    status: StudentStatus
    remarks: str | None = None


class StatusHistoryResponse(ORMModel):
    id: int
    status: str
    changed_at: datetime
    changed_by: str | None
    remarks: str | None


# =========================================================================
# Admission
# =========================================================================


class DocumentTypeRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    is_required: bool = True


class DocumentTypeResponse(ORMModel):
    id: str
    name: str
    is_required: bool


class DocumentCreateRequest(BaseModel):
    document_type: str = Field(min_length=1, max_length=100)
    file_url: str | None = None
    remarks: str | None = None


class DocumentRemarksRequest(BaseModel):
    remarks: str | None = None


class WaiverRequest(BaseModel):
    remarks: str | None = None


class DocumentResponse(ORMModel):
    id: str
    student_id: str
    document_type: str
    status: str
    remarks: str | None
    file_url: str | None
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: str | None


class InterviewRequest(BaseModel):
    notes: str = Field(min_length=1)


class InterviewResponse(ORMModel):
    id: str
    student_id: str
    interviewer_id: str | None
    notes: str
    created_at: datetime


class AssignmentRequest(BaseModel):
    """Program and college placement; omitted fields are left unchanged."""

    assigned_program_id: str | None = None
    assigned_college_id: str | None = None


class AdmissionOverviewResponse(BaseModel):
    """Admission workflow state of one applicant."""

    student: StudentResponse
    documents: list[DocumentResponse]
    has_approved_document: bool
    latest_interview: InterviewResponse | None
    can_interview: bool
    can_assign: bool
