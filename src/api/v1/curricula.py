# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum API endpoints.

This module provides endpoints for curricula:
- GET / - List curricula, optionally of one project
- POST / - Create a curriculum
- DELETE /{curriculum_id} - Delete a curriculum and its tree
- GET /{curriculum_id}/tree - Years, semesters and courses with labels
- POST /{curriculum_id}/courses - Add a catalog course to a year and semester
- PATCH /{curriculum_id}/courses/{course_id} - Move a course
- DELETE /{curriculum_id}/courses/{course_id} - Remove a course

All paths are under /organizations/{organization_id}/curricula.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from src.api.dependencies import CurriculumServiceDep, Membership
from src.models.curriculum import (
    CurriculumCourseAddRequest,
    CurriculumCourseMoveRequest,
    CurriculumCourseResponse,
    CurriculumCreateRequest,
    CurriculumResponse,
    CurriculumTreeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[CurriculumResponse], summary="List curricula")
async def list_curricula(
    actor: Membership,
    service: CurriculumServiceDep,
    project_id: Annotated[str | None, Query(description="Filter by project")] = None,
) -> list[CurriculumResponse]:
    return await service.list_curricula(actor, project_id)


@router.post(
    "",
    response_model=CurriculumResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create curriculum",
)
async def create_curriculum(
    data: CurriculumCreateRequest,
    actor: Membership,
    service: CurriculumServiceDep,
) -> CurriculumResponse:
    return await service.create_curriculum(actor, data)


@router.delete(
    "/{curriculum_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete curriculum",
)
async def delete_curriculum(
    curriculum_id: str,
    actor: Membership,
    service: CurriculumServiceDep,
) -> None:
    await service.delete_curriculum(actor, curriculum_id)


@router.get(
    "/{curriculum_id}/tree",
    response_model=CurriculumTreeResponse,
    summary="Get curriculum tree",
)
async def get_tree(
    curriculum_id: str,
    actor: Membership,
    service: CurriculumServiceDep,
) -> CurriculumTreeResponse:
    return await service.get_tree(actor, curriculum_id)


@router.post(
    "/{curriculum_id}/courses",
    response_model=CurriculumCourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add course",
    description=(
        "Copies the catalog course's code, description and units; the year "
        "and semester nodes are created on first use."
    ),
)
async def add_course(
    curriculum_id: str,
    data: CurriculumCourseAddRequest,
    actor: Membership,
    service: CurriculumServiceDep,
) -> CurriculumCourseResponse:
    return await service.add_course(actor, curriculum_id, data)


@router.patch(
    "/{curriculum_id}/courses/{curriculum_course_id}",
    response_model=CurriculumCourseResponse,
    summary="Move course",
)
async def move_course(
    curriculum_id: str,
    curriculum_course_id: str,
    data: CurriculumCourseMoveRequest,
    actor: Membership,
    service: CurriculumServiceDep,
) -> CurriculumCourseResponse:
    return await service.move_course(actor, curriculum_id, curriculum_course_id, data)


@router.delete(
    "/{curriculum_id}/courses/{curriculum_course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove course",
)
async def remove_course(
    curriculum_id: str,
    curriculum_course_id: str,
    actor: Membership,
    service: CurriculumServiceDep,
) -> None:
    await service.remove_course(actor, curriculum_id, curriculum_course_id)
