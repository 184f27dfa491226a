# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project API endpoints.

This module provides endpoints for projects:
- GET /project-templates - Templates a project can be created from
- GET /organizations/{organization_id}/projects - List projects
- POST /organizations/{organization_id}/projects - Create from a template
- GET /organizations/{organization_id}/projects/{project_id} - Get project
- DELETE /organizations/{organization_id}/projects/{project_id} - Delete project
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import AuthenticatedUser, Membership, ProjectServiceDep
from src.models.project import ProjectCreateRequest, ProjectResponse, ProjectTemplate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/project-templates",
    response_model=list[ProjectTemplate],
    summary="List project templates",
)
async def list_templates(
    current_user: AuthenticatedUser,
    service: ProjectServiceDep,
) -> list[ProjectTemplate]:
    return service.list_templates()


@router.get(
    "/organizations/{organization_id}/projects",
    response_model=list[ProjectResponse],
    summary="List projects",
)
async def list_projects(
    actor: Membership,
    service: ProjectServiceDep,
) -> list[ProjectResponse]:
    return await service.list_projects(actor)


@router.post(
    "/organizations/{organization_id}/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description=(
        "Name and description fall back to the template defaults. Fails with "
        "limit_exceeded when the plan's project ceiling is reached."
    ),
)
async def create_project(
    data: ProjectCreateRequest,
    actor: Membership,
    service: ProjectServiceDep,
) -> ProjectResponse:
    logger.info(
        "Creating project: type=%s, org=%s, by=%s",
        data.type,
        actor.organization_id,
        actor.user_id,
    )
    return await service.create_project(actor, data)


@router.get(
    "/organizations/{organization_id}/projects/{project_id}",
    response_model=ProjectResponse,
    summary="Get project",
)
async def get_project(
    project_id: str,
    actor: Membership,
    service: ProjectServiceDep,
) -> ProjectResponse:
    return await service.get_project(actor, project_id)


@router.delete(
    "/organizations/{organization_id}/projects/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
)
async def delete_project(
    project_id: str,
    actor: Membership,
    service: ProjectServiceDep,
) -> None:
    await service.delete_project(actor, project_id)
