# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admission API endpoints.

This module provides endpoints for the admission workflow:
- Document types: GET/POST /document-types, PUT/DELETE /document-types/{id}
- GET /students/{student_id}/admission - Documents, interview and gates
- Documents: GET/POST /students/{student_id}/documents,
  PATCH/DELETE /documents/{document_id}, POST /documents/{document_id}/approve
- POST /students/{student_id}/documents/approve-all
- POST /students/{student_id}/documents/approve-with-waiver
- POST /students/{student_id}/interviews - Requires an approved document
- POST /students/{student_id}/assignment - Requires an approved document

All paths are under /organizations/{organization_id}.
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import AdmissionServiceDep, Membership
from src.models.student import (
    AdmissionOverviewResponse,
    AssignmentRequest,
    DocumentCreateRequest,
    DocumentRemarksRequest,
    DocumentResponse,
    DocumentTypeRequest,
    DocumentTypeResponse,
    InterviewRequest,
    InterviewResponse,
    StudentResponse,
    WaiverRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =========================================================================
# Document types
# =========================================================================


@router.get(
    "/document-types",
    response_model=list[DocumentTypeResponse],
    summary="List document types",
)
async def list_document_types(
    actor: Membership,
    service: AdmissionServiceDep,
) -> list[DocumentTypeResponse]:
    return await service.list_document_types(actor)


@router.post(
    "/document-types",
    response_model=DocumentTypeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create document type",
)
async def create_document_type(
    data: DocumentTypeRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> DocumentTypeResponse:
    return await service.create_document_type(actor, data)


@router.put(
    "/document-types/{document_type_id}",
    response_model=DocumentTypeResponse,
    summary="Update document type",
)
async def update_document_type(
    document_type_id: str,
    data: DocumentTypeRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> DocumentTypeResponse:
    return await service.update_document_type(actor, document_type_id, data)


@router.delete(
    "/document-types/{document_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete document type",
)
async def delete_document_type(
    document_type_id: str,
    actor: Membership,
    service: AdmissionServiceDep,
) -> None:
    await service.delete_document_type(actor, document_type_id)


# =========================================================================
# Applicant documents
# =========================================================================


@router.get(
    "/students/{student_id}/admission",
    response_model=AdmissionOverviewResponse,
    summary="Get admission overview",
)
async def get_overview(
    student_id: str,
    actor: Membership,
    service: AdmissionServiceDep,
) -> AdmissionOverviewResponse:
    return await service.get_overview(actor, student_id)


@router.get(
    "/students/{student_id}/documents",
    response_model=list[DocumentResponse],
    summary="List documents",
)
async def list_documents(
    student_id: str,
    actor: Membership,
    service: AdmissionServiceDep,
) -> list[DocumentResponse]:
    return await service.list_documents(actor, student_id)


@router.post(
    "/students/{student_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add document",
)
async def add_document(
    student_id: str,
    data: DocumentCreateRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> DocumentResponse:
    return await service.add_document(actor, student_id, data)


@router.post(
    "/students/{student_id}/documents/approve-all",
    response_model=list[DocumentResponse],
    summary="Approve all documents",
)
async def approve_all(
    student_id: str,
    actor: Membership,
    service: AdmissionServiceDep,
) -> list[DocumentResponse]:
    return await service.approve_all(actor, student_id)


@router.post(
    "/students/{student_id}/documents/approve-with-waiver",
    response_model=list[DocumentResponse],
    summary="Approve all documents with waiver",
    description="Marks every document approved with waiver and records a Waiver document.",
)
async def approve_all_with_waiver(
    student_id: str,
    data: WaiverRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> list[DocumentResponse]:
    return await service.approve_all_with_waiver(actor, student_id, data.remarks)


@router.patch(
    "/documents/{document_id}",
    response_model=DocumentResponse,
    summary="Update document remarks",
)
async def update_remarks(
    document_id: str,
    data: DocumentRemarksRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> DocumentResponse:
    return await service.update_remarks(actor, document_id, data.remarks)


@router.delete(
    "/documents/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete document",
)
async def delete_document(
    document_id: str,
    actor: Membership,
    service: AdmissionServiceDep,
) -> None:
    await service.delete_document(actor, document_id)


@router.post(
    "/documents/{document_id}/approve",
    response_model=DocumentResponse,
    summary="Approve document",
)
async def approve_document(
    document_id: str,
    actor: Membership,
    service: AdmissionServiceDep,
) -> DocumentResponse:
    return await service.approve_document(actor, document_id)


# =========================================================================
# Interview and assignment
# =========================================================================


@router.post(
    "/students/{student_id}/interviews",
    response_model=InterviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add interview",
)
async def add_interview(
    student_id: str,
    data: InterviewRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> InterviewResponse:
    return await service.add_interview(actor, student_id, data)


@router.post(
    "/students/{student_id}/assignment",
    response_model=StudentResponse,
    summary="Assign program and college",
)
async def assign(
    student_id: str,
    data: AssignmentRequest,
    actor: Membership,
    service: AdmissionServiceDep,
) -> StudentResponse:
    return await service.assign(actor, student_id, data)
