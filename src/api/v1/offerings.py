# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering API endpoints.

This module provides endpoints for course offerings:
- GET / - List offerings with filters
- POST / - Create an offering with its schedules
- GET /{offering_id} - Offering with schedules
- PUT /{offering_id} - Replace fields and schedules
- DELETE /{offering_id} - Delete an offering without enrollments

All paths are under /organizations/{organization_id}/offerings.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from src.api.dependencies import Membership, OfferingServiceDep
from src.models.offering import OfferingRequest, OfferingResponse, OfferingUpdateResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[OfferingResponse], summary="List offerings")
async def list_offerings(
    actor: Membership,
    service: OfferingServiceDep,
    project_id: Annotated[str | None, Query()] = None,
    program_id: Annotated[str | None, Query()] = None,
    academic_year: Annotated[str | None, Query()] = None,
    semester: Annotated[int | None, Query(ge=1, le=3)] = None,
    year_level: Annotated[int | None, Query(ge=1)] = None,
) -> list[OfferingResponse]:
    return await service.list_offerings(
        actor,
        project_id=project_id,
        program_id=program_id,
        academic_year=academic_year,
        semester=semester,
        year_level=year_level,
    )


@router.post(
    "",
    response_model=OfferingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create offering",
)
async def create_offering(
    data: OfferingRequest,
    actor: Membership,
    service: OfferingServiceDep,
) -> OfferingResponse:
    logger.info(
        "Creating offering: course=%s, section=%s, org=%s",
        data.course_id,
        data.section,
        actor.organization_id,
    )
    return await service.create_offering(actor, data)


@router.get("/{offering_id}", response_model=OfferingResponse, summary="Get offering")
async def get_offering(
    offering_id: str,
    actor: Membership,
    service: OfferingServiceDep,
) -> OfferingResponse:
    return await service.get_offering(actor, offering_id)


@router.put(
    "/{offering_id}",
    response_model=OfferingUpdateResponse,
    summary="Update offering",
    description=(
        "Schedules without an id are inserted, listed ids are updated and "
        "persisted schedules missing from the list are deleted."
    ),
)
async def update_offering(
    offering_id: str,
    data: OfferingRequest,
    actor: Membership,
    service: OfferingServiceDep,
) -> OfferingUpdateResponse:
    return await service.update_offering(actor, offering_id, data)


@router.delete(
    "/{offering_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete offering",
)
async def delete_offering(
    offering_id: str,
    actor: Membership,
    service: OfferingServiceDep,
) -> None:
    await service.delete_offering(actor, offering_id)
