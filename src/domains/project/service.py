# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project service.

This module provides the ProjectService class for:
- Creating projects from templates under the plan's project ceiling
- Listing and deleting projects
- Listing available templates
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationFailedError
from src.domains.access import Action, Actor, Resource, authorize
from src.domains.organization.usage import UsageGuard, UsageKind
from src.domains.project.templates import TemplateRepository
from src.infrastructure.database.models import Project
from src.models.project import ProjectCreateRequest, ProjectResponse, ProjectTemplate

logger = logging.getLogger(__name__)


class ProjectServiceError(Exception):
    """Base exception for project service errors."""

    pass


class ProjectNotFoundError(ProjectServiceError, NotFoundError):
    """Raised when a project does not exist in the organization."""

    pass


class TemplateNotFoundError(ProjectServiceError, ValidationFailedError):
    """Raised when no usable template exists for the requested type."""

    pass


class ProjectService:
    """Service for projects.

    Attributes:
        db: Async database session.
        templates: Template source.
        usage: Usage guard sharing the same session.
    """

    def __init__(self, db: AsyncSession, templates: TemplateRepository) -> None:
        self.db = db
        self.templates = templates
        self.usage = UsageGuard(db)

    def list_templates(self) -> list[ProjectTemplate]:
        return self.templates.list_all()

    async def create_project(self, actor: Actor, request: ProjectCreateRequest) -> ProjectResponse:
        """Create a project from a template.

        Name and description fall back to the template defaults; target
        users and requirements are copied from the template.

        Raises:
            TemplateNotFoundError: If the template is missing or invalid.
            UsageLimitExceededError: If the plan's project ceiling is reached.
        """
        authorize(actor, Action.CREATE, Resource.PROJECT)
        template = self.templates.get(request.type)
        if template is None:
            raise TemplateNotFoundError(f"No template for project type '{request.type}'")

        await self.usage.reserve(actor.organization_id, UsageKind.PROJECTS)

        project = Project(
            organization_id=actor.organization_id,
            name=request.name or template.default_name,
            description=request.description or template.default_description,
            type=template.name,
            user_targets=list(template.user_targets),
            requirements=list(template.requirements),
            created_by=actor.user_id,
        )
        self.db.add(project)
        await self.db.flush()
        await self.usage.refresh(actor.organization_id)
        await self.db.commit()
        await self.db.refresh(project)

        logger.info(
            "Created project: id=%s, type=%s, org=%s, by=%s",
            project.id,
            project.type,
            actor.organization_id,
            actor.user_id,
        )
        return ProjectResponse.model_validate(project)

    async def list_projects(self, actor: Actor) -> list[ProjectResponse]:
        authorize(actor, Action.VIEW, Resource.PROJECT)
        result = await self.db.execute(
            select(Project)
            .where(Project.organization_id == actor.organization_id)
            .order_by(Project.created_at.desc())
        )
        return [ProjectResponse.model_validate(p) for p in result.scalars().all()]

    async def get_project(self, actor: Actor, project_id: str) -> ProjectResponse:
        authorize(actor, Action.VIEW, Resource.PROJECT)
        project = await self.get_scoped(actor.organization_id, project_id)
        return ProjectResponse.model_validate(project)

    async def delete_project(self, actor: Actor, project_id: str) -> None:
        """Delete a project and its attendance records."""
        authorize(actor, Action.DELETE, Resource.PROJECT)
        project = await self.get_scoped(actor.organization_id, project_id)

        await self.db.execute(delete(Project).where(Project.id == project.id))
        await self.usage.refresh(actor.organization_id)
        await self.db.commit()

        logger.info("Deleted project: id=%s, by=%s", project_id, actor.user_id)

    async def get_scoped(self, organization_id: str, project_id: str) -> Project:
        """Load a project of the organization.

        Raises:
            ProjectNotFoundError: If missing or owned by another organization.
        """
        result = await self.db.execute(
            select(Project).where(
                Project.id == project_id,
                Project.organization_id == organization_id,
            )
        )
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(f"Project {project_id} not found")
        return project
