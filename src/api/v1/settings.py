# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization settings API endpoints.

This module provides endpoints for per-organization settings:
- GET /theme - Brand colors (defaults when unset)
- PUT /theme - Store brand colors
- DELETE /theme - Back to the default colors
- GET /numbering - Applicant and student number schemes
- PUT /numbering/{numbering_type} - Edit a scheme
"""

import logging

from fastapi import APIRouter

from src.api.dependencies import Membership, NumberingServiceDep, ThemeServiceDep
from src.domains.numbering import NumberingType
from src.models.organization import (
    NumberingSettingResponse,
    NumberingSettingUpdateRequest,
    ThemeRequest,
    ThemeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/theme", response_model=ThemeResponse, summary="Get theme")
async def get_theme(actor: Membership, service: ThemeServiceDep) -> ThemeResponse:
    return await service.get_theme(actor)


@router.put("/theme", response_model=ThemeResponse, summary="Update theme")
async def update_theme(
    data: ThemeRequest,
    actor: Membership,
    service: ThemeServiceDep,
) -> ThemeResponse:
    return await service.update_theme(actor, data)


@router.delete("/theme", response_model=ThemeResponse, summary="Reset theme")
async def reset_theme(actor: Membership, service: ThemeServiceDep) -> ThemeResponse:
    return await service.reset_theme(actor)


@router.get(
    "/numbering",
    response_model=list[NumberingSettingResponse],
    summary="List numbering settings",
)
async def list_numbering(
    actor: Membership,
    service: NumberingServiceDep,
) -> list[NumberingSettingResponse]:
    return await service.list_settings(actor)


@router.put(
    "/numbering/{numbering_type}",
    response_model=NumberingSettingResponse,
    summary="Update numbering setting",
    description="The format must contain {number}; {prefix} and {year} are optional.",
)
async def update_numbering(
    numbering_type: NumberingType,
    data: NumberingSettingUpdateRequest,
    actor: Membership,
    service: NumberingServiceDep,
) -> NumberingSettingResponse:
    return await service.update_setting(actor, numbering_type, data)
