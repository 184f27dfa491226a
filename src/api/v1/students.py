# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student API endpoints.

This module provides endpoints for applicants and students:
- POST / - Create an applicant (claims an applicant number)
- GET / - List students, optionally by derived current status
- GET /search - Search applicants by name or applicant number
- GET /{student_id} - Student details with current status
- PATCH /{student_id} - Edit personal data
- DELETE /{student_id} - Delete a student
- POST /{student_id}/status - Change status through the state machine
- GET /{student_id}/status-history - Status history, newest first

All paths are under /organizations/{organization_id}/students.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from src.api.dependencies import Membership, StudentServiceDep
from src.models.student import (
    StatusChangeRequest,
    StatusHistoryResponse,
    StudentCreateRequest,
    StudentResponse,
    StudentStatus,
    StudentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create applicant",
    description="Fails with limit_exceeded when the plan's student ceiling is reached.",
)
async def create_student(
    data: StudentCreateRequest,
    actor: Membership,
    service: StudentServiceDep,
) -> StudentResponse:
    logger.info(
        "Creating student: name=%s %s, org=%s, by=%s",
        data.firstname,
        data.lastname,
        actor.organization_id,
        actor.user_id,
    )
    return await service.create_student(actor, data)


@router.get(
    "",
    response_model=list[StudentResponse],
    summary="List students",
)
async def list_students(
    actor: Membership,
    service: StudentServiceDep,
    student_status: Annotated[
        StudentStatus | None,
        Query(alias="status", description="Filter by derived current status"),
    ] = None,
) -> list[StudentResponse]:
    return await service.list_students(actor, student_status)


@router.get(
    "/search",
    response_model=list[StudentResponse],
    summary="Search applicants",
)
async def search_applicants(
    actor: Membership,
    service: StudentServiceDep,
    q: Annotated[str, Query(min_length=1, max_length=100, description="Name or applicant number")],
) -> list[StudentResponse]:
    return await service.search_applicants(actor, q)


@router.get("/{student_id}", response_model=StudentResponse, summary="Get student")
async def get_student(
    student_id: str,
    actor: Membership,
    service: StudentServiceDep,
) -> StudentResponse:
    return await service.get_student(actor, student_id)


@router.patch("/{student_id}", response_model=StudentResponse, summary="Update student")
async def update_student(
    student_id: str,
    data: StudentUpdateRequest,
    actor: Membership,
    service: StudentServiceDep,
) -> StudentResponse:
    return await service.update_student(actor, student_id, data)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete student",
)
async def delete_student(
    student_id: str,
    actor: Membership,
    service: StudentServiceDep,
) -> None:
    await service.delete_student(actor, student_id)


@router.post(
    "/{student_id}/status",
    response_model=StudentResponse,
    summary="Change status",
    description="Rejects transitions the state machine does not allow.",
)
async def change_status(
    student_id: str,
    data: StatusChangeRequest,
    actor: Membership,
    service: StudentServiceDep,
) -> StudentResponse:
    return await service.change_status(actor, student_id, data)


@router.get(
    "/{student_id}/status-history",
    response_model=list[StatusHistoryResponse],
    summary="Get status history",
)
async def status_history(
    student_id: str,
    actor: Membership,
    service: StudentServiceDep,
) -> list[StatusHistoryResponse]:
    return await service.status_history(actor, student_id)
