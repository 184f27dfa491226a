# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic catalog API endpoints.

Each catalog family gets the same five endpoints under
/organizations/{organization_id}/{family}:
- GET / - List
- POST / - Create (duplicate codes give 409)
- GET /{item_id} - Get
- PUT /{item_id} - Update
- DELETE /{item_id} - Delete (rows still referenced give 409)

Families: academic-levels, academic-programs, colleges, courses.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel

from src.api.dependencies import CatalogServiceDep, Membership
from src.domains.catalog import CatalogKind
from src.models.catalog import (
    AcademicLevelRequest,
    AcademicLevelResponse,
    AcademicProgramRequest,
    AcademicProgramResponse,
    CollegeRequest,
    CollegeResponse,
    CourseRequest,
    CourseResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _add_catalog_routes(
    kind: CatalogKind,
    request_model: type[BaseModel],
    response_model: type[BaseModel],
    label: str,
) -> None:
    """Register the CRUD endpoints of one catalog family."""
    path = f"/{kind.value}"
    tag_name = kind.value.replace("-", "_")

    async def list_items(actor: Membership, service: CatalogServiceDep):
        return await service.list_items(actor, kind)

    async def create_item(data: request_model, actor: Membership, service: CatalogServiceDep):
        return await service.create_item(actor, kind, data)

    async def get_item(item_id: str, actor: Membership, service: CatalogServiceDep):
        return await service.get_item(actor, kind, item_id)

    async def update_item(
        item_id: str,
        data: request_model,
        actor: Membership,
        service: CatalogServiceDep,
    ):
        return await service.update_item(actor, kind, item_id, data)

    async def delete_item(item_id: str, actor: Membership, service: CatalogServiceDep) -> None:
        await service.delete_item(actor, kind, item_id)

    router.add_api_route(
        path,
        list_items,
        methods=["GET"],
        response_model=list[response_model],
        summary=f"List {label}s",
        name=f"list_{tag_name}",
    )
    router.add_api_route(
        path,
        create_item,
        methods=["POST"],
        response_model=response_model,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label}",
        name=f"create_{tag_name}",
    )
    router.add_api_route(
        f"{path}/{{item_id}}",
        get_item,
        methods=["GET"],
        response_model=response_model,
        summary=f"Get {label}",
        name=f"get_{tag_name}",
    )
    router.add_api_route(
        f"{path}/{{item_id}}",
        update_item,
        methods=["PUT"],
        response_model=response_model,
        summary=f"Update {label}",
        name=f"update_{tag_name}",
    )
    router.add_api_route(
        f"{path}/{{item_id}}",
        delete_item,
        methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete {label}",
        name=f"delete_{tag_name}",
    )


_add_catalog_routes(
    CatalogKind.ACADEMIC_LEVELS, AcademicLevelRequest, AcademicLevelResponse, "academic level"
)
_add_catalog_routes(
    CatalogKind.ACADEMIC_PROGRAMS, AcademicProgramRequest, AcademicProgramResponse, "academic program"
)
_add_catalog_routes(CatalogKind.COLLEGES, CollegeRequest, CollegeResponse, "college")
_add_catalog_routes(CatalogKind.COURSES, CourseRequest, CourseResponse, "course")
