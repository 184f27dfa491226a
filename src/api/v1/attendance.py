# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Faculty attendance API endpoints.

This module provides endpoints for attendance and the daily time record:
- POST / - Append a clock entry for a day
- GET / - List attendance rows (faculty see only their own)
- GET /dtr - Monthly daily time record as JSON
- GET /dtr.pdf - Monthly daily time record as a PDF download

All paths are under
/organizations/{organization_id}/projects/{project_id}/attendance.
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from src.api.dependencies import AttendanceServiceDep, Membership
from src.models.project import AttendanceRecordRequest, AttendanceResponse, DTRResponse

logger = logging.getLogger(__name__)

router = APIRouter()

Year = Annotated[int, Query(ge=1900, le=9999)]
Month = Annotated[int, Query(ge=1, le=12)]
FacultyFilter = Annotated[
    str | None,
    Query(description="Faculty user ID; defaults to the caller"),
]


@router.post(
    "",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record time",
)
async def record_time(
    project_id: str,
    data: AttendanceRecordRequest,
    actor: Membership,
    service: AttendanceServiceDep,
) -> AttendanceResponse:
    return await service.record_time(actor, project_id, data)


@router.get("", response_model=list[AttendanceResponse], summary="List attendance")
async def list_attendance(
    project_id: str,
    actor: Membership,
    service: AttendanceServiceDep,
    faculty_id: FacultyFilter = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
) -> list[AttendanceResponse]:
    return await service.list_attendance(actor, project_id, faculty_id, date_from, date_to)


@router.get("/dtr", response_model=DTRResponse, summary="Get daily time record")
async def get_dtr(
    project_id: str,
    actor: Membership,
    service: AttendanceServiceDep,
    year: Year,
    month: Month,
    faculty_id: FacultyFilter = None,
) -> DTRResponse:
    return await service.get_dtr(actor, project_id, year, month, faculty_id)


@router.get(
    "/dtr.pdf",
    response_class=Response,
    summary="Download daily time record",
    responses={200: {"content": {"application/pdf": {}}}},
)
async def download_dtr(
    project_id: str,
    actor: Membership,
    service: AttendanceServiceDep,
    year: Year,
    month: Month,
    faculty_id: FacultyFilter = None,
) -> Response:
    filename, content = await service.dtr_pdf(actor, project_id, year, month, faculty_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
