# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admission service for the applicant workflow.

This module provides the AdmissionService class for:
- The organization's document type catalog
- Applicant documents and their review
- Interviews
- Program and college assignment

Interviews and assignment are gated: they require at least one approved
document (plain approval or approval with waiver).
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationFailedError, translate_integrity_error
from src.domains.access import Action, Actor, Resource, authorize, can
from src.domains.student.service import StudentService
from src.infrastructure.database.models import (
    AcademicProgram,
    ApplicantDocument,
    ApplicantInterview,
    College,
    DocumentType,
)
from src.models.student import (
    AdmissionOverviewResponse,
    AssignmentRequest,
    DocumentCreateRequest,
    DocumentResponse,
    DocumentStatus,
    DocumentTypeRequest,
    DocumentTypeResponse,
    InterviewRequest,
    InterviewResponse,
    StudentResponse,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

APPROVED_STATUSES = (DocumentStatus.APPROVED.value, DocumentStatus.APPROVED_WITH_WAIVER.value)
WAIVER_DOCUMENT_TYPE = "Waiver"


class AdmissionServiceError(Exception):
    """Base exception for admission service errors."""

    pass


class DocumentTypeNotFoundError(AdmissionServiceError, NotFoundError):
    """Raised when a document type does not exist."""

    pass


class DocumentNotFoundError(AdmissionServiceError, NotFoundError):
    """Raised when an applicant document does not exist."""

    pass


class NoApprovedDocumentError(AdmissionServiceError, ValidationFailedError):
    """Raised when a gated step is attempted before any document is approved."""

    pass


class InvalidAssignmentError(AdmissionServiceError, ValidationFailedError):
    """Raised when the program or college is not part of the organization."""

    pass


class AdmissionService:
    """Service for the admission workflow.

    Attributes:
        db: Async database session.
        students: Student service sharing the same session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.students = StudentService(db)

    # =====================================================================
    # Document types
    # =====================================================================

    async def list_document_types(self, actor: Actor) -> list[DocumentTypeResponse]:
        authorize(actor, Action.VIEW, Resource.ADMISSION)
        result = await self.db.execute(
            select(DocumentType)
            .where(DocumentType.organization_id == actor.organization_id)
            .order_by(DocumentType.name)
        )
        return [DocumentTypeResponse.model_validate(d) for d in result.scalars().all()]

    async def create_document_type(
        self,
        actor: Actor,
        request: DocumentTypeRequest,
    ) -> DocumentTypeResponse:
        """Add a document type.

        Raises:
            ConflictError: If the name is already used.
        """
        authorize(actor, Action.CREATE, Resource.ADMISSION)
        document_type = DocumentType(organization_id=actor.organization_id, **request.model_dump())
        self.db.add(document_type)
        await self._commit(f"Document type '{request.name}' already exists")
        await self.db.refresh(document_type)

        logger.info("Created document type: %s, org=%s", request.name, actor.organization_id)
        return DocumentTypeResponse.model_validate(document_type)

    async def update_document_type(
        self,
        actor: Actor,
        document_type_id: str,
        request: DocumentTypeRequest,
    ) -> DocumentTypeResponse:
        authorize(actor, Action.UPDATE, Resource.ADMISSION)
        document_type = await self._get_document_type(actor.organization_id, document_type_id)
        document_type.name = request.name
        document_type.is_required = request.is_required
        await self._commit(f"Document type '{request.name}' already exists")
        await self.db.refresh(document_type)
        return DocumentTypeResponse.model_validate(document_type)

    async def delete_document_type(self, actor: Actor, document_type_id: str) -> None:
        authorize(actor, Action.DELETE, Resource.ADMISSION)
        document_type = await self._get_document_type(actor.organization_id, document_type_id)
        await self.db.delete(document_type)
        await self.db.commit()
        logger.info("Deleted document type: %s, org=%s", document_type_id, actor.organization_id)

    # =====================================================================
    # Applicant documents
    # =====================================================================

    async def list_documents(self, actor: Actor, student_id: str) -> list[DocumentResponse]:
        """List an applicant's documents, newest submission first."""
        authorize(actor, Action.VIEW, Resource.ADMISSION)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        return [DocumentResponse.model_validate(d) for d in await self._documents(student.id)]

    async def add_document(
        self,
        actor: Actor,
        student_id: str,
        request: DocumentCreateRequest,
    ) -> DocumentResponse:
        """Record a submitted document as pending review."""
        authorize(actor, Action.CREATE, Resource.ADMISSION)
        student = await self.students.get_scoped(actor.organization_id, student_id)

        document = ApplicantDocument(
            organization_id=actor.organization_id,
            student_id=student.id,
            document_type=request.document_type,
            file_url=request.file_url,
            remarks=request.remarks,
            status=DocumentStatus.PENDING.value,
        )
        self.db.add(document)
        await self.db.commit()
        await self.db.refresh(document)

        logger.info(
            "Added applicant document: student=%s, type=%s, by=%s",
            student.id,
            request.document_type,
            actor.user_id,
        )
        return DocumentResponse.model_validate(document)

    async def update_remarks(
        self,
        actor: Actor,
        document_id: str,
        remarks: str | None,
    ) -> DocumentResponse:
        authorize(actor, Action.UPDATE, Resource.ADMISSION)
        document = await self._get_document(actor.organization_id, document_id)
        document.remarks = remarks
        await self.db.commit()
        await self.db.refresh(document)
        return DocumentResponse.model_validate(document)

    async def delete_document(self, actor: Actor, document_id: str) -> None:
        authorize(actor, Action.DELETE, Resource.ADMISSION)
        document = await self._get_document(actor.organization_id, document_id)
        await self.db.delete(document)
        await self.db.commit()
        logger.info("Deleted applicant document: %s, by=%s", document_id, actor.user_id)

    async def approve_document(self, actor: Actor, document_id: str) -> DocumentResponse:
        authorize(actor, Action.APPROVE, Resource.ADMISSION)
        document = await self._get_document(actor.organization_id, document_id)
        document.status = DocumentStatus.APPROVED.value
        document.reviewed_at = utc_now()
        document.reviewed_by = actor.user_id
        await self.db.commit()
        await self.db.refresh(document)

        logger.info("Approved document: %s, by=%s", document_id, actor.user_id)
        return DocumentResponse.model_validate(document)

    async def approve_all(self, actor: Actor, student_id: str) -> list[DocumentResponse]:
        """Approve every document of an applicant in one statement."""
        authorize(actor, Action.APPROVE, Resource.ADMISSION)
        student = await self.students.get_scoped(actor.organization_id, student_id)

        await self._bulk_set_status(student.id, DocumentStatus.APPROVED, actor.user_id)
        await self.db.commit()

        logger.info("Approved all documents: student=%s, by=%s", student.id, actor.user_id)
        return [DocumentResponse.model_validate(d) for d in await self._documents(student.id)]

    async def approve_all_with_waiver(
        self,
        actor: Actor,
        student_id: str,
        remarks: str | None = None,
    ) -> list[DocumentResponse]:
        """Approve every document with a waiver and record the waiver itself.

        The bulk update and the waiver document are committed together.
        """
        authorize(actor, Action.APPROVE, Resource.ADMISSION)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        now = utc_now()

        await self._bulk_set_status(student.id, DocumentStatus.APPROVED_WITH_WAIVER, actor.user_id)
        self.db.add(
            ApplicantDocument(
                organization_id=actor.organization_id,
                student_id=student.id,
                document_type=WAIVER_DOCUMENT_TYPE,
                status=DocumentStatus.APPROVED_WITH_WAIVER.value,
                remarks=remarks or "Approved with waiver",
                submitted_at=now,
                reviewed_at=now,
                reviewed_by=actor.user_id,
            )
        )
        await self.db.commit()

        logger.info(
            "Approved all documents with waiver: student=%s, by=%s",
            student.id,
            actor.user_id,
        )
        return [DocumentResponse.model_validate(d) for d in await self._documents(student.id)]

    async def has_approved_document(self, student_id: str) -> bool:
        """Check whether any document of the applicant is approved."""
        result = await self.db.execute(
            select(ApplicantDocument.id)
            .where(
                ApplicantDocument.student_id == student_id,
                ApplicantDocument.status.in_(APPROVED_STATUSES),
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    # =====================================================================
    # Interviews and assignment
    # =====================================================================

    async def add_interview(
        self,
        actor: Actor,
        student_id: str,
        request: InterviewRequest,
    ) -> InterviewResponse:
        """Record interview notes.

        Raises:
            NoApprovedDocumentError: If no document is approved yet.
        """
        authorize(actor, Action.UPDATE, Resource.ADMISSION)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        await self._require_approved_document(student.id)

        interview = ApplicantInterview(
            organization_id=actor.organization_id,
            student_id=student.id,
            interviewer_id=actor.user_id,
            notes=request.notes,
        )
        self.db.add(interview)
        await self.db.commit()
        await self.db.refresh(interview)

        logger.info("Recorded interview: student=%s, by=%s", student.id, actor.user_id)
        return InterviewResponse.model_validate(interview)

    async def assign(
        self,
        actor: Actor,
        student_id: str,
        request: AssignmentRequest,
    ) -> StudentResponse:
        """Assign a program and/or college.

        Raises:
            NoApprovedDocumentError: If no document is approved yet.
            InvalidAssignmentError: If the program or college belongs elsewhere.
        """
        authorize(actor, Action.UPDATE, Resource.ADMISSION)
        student = await self.students.get_scoped(actor.organization_id, student_id)
        await self._require_approved_document(student.id)

        if request.assigned_program_id is not None:
            await self._require_in_org(AcademicProgram, request.assigned_program_id, actor)
            student.assigned_program_id = request.assigned_program_id
        if request.assigned_college_id is not None:
            await self._require_in_org(College, request.assigned_college_id, actor)
            student.assigned_college_id = request.assigned_college_id

        await self.db.commit()
        await self.db.refresh(student)

        logger.info(
            "Assigned applicant: student=%s, program=%s, college=%s, by=%s",
            student.id,
            student.assigned_program_id,
            student.assigned_college_id,
            actor.user_id,
        )
        return await self.students.get_student(actor, student.id)

    async def get_overview(self, actor: Actor, student_id: str) -> AdmissionOverviewResponse:
        """Admission state of one applicant with the gates evaluated."""
        authorize(actor, Action.VIEW, Resource.ADMISSION)
        student = await self.students.get_student(actor, student_id)
        documents = await self._documents(student.id)
        approved = any(d.status in APPROVED_STATUSES for d in documents)

        result = await self.db.execute(
            select(ApplicantInterview)
            .where(ApplicantInterview.student_id == student.id)
            .order_by(ApplicantInterview.created_at.desc())
            .limit(1)
        )
        latest_interview = result.scalar_one_or_none()
        may_update = can(Action.UPDATE, Resource.ADMISSION, actor.role)

        return AdmissionOverviewResponse(
            student=student,
            documents=[DocumentResponse.model_validate(d) for d in documents],
            has_approved_document=approved,
            latest_interview=(
                InterviewResponse.model_validate(latest_interview) if latest_interview else None
            ),
            can_interview=approved and may_update,
            can_assign=approved and may_update,
        )

    async def _require_approved_document(self, student_id: str) -> None:
        if not await self.has_approved_document(student_id):
            raise NoApprovedDocumentError("At least one approved document is required")

    async def _require_in_org(self, model: type, row_id: str, actor: Actor) -> None:
        result = await self.db.execute(
            select(model.id).where(
                model.id == row_id,
                model.organization_id == actor.organization_id,
            )
        )
        if result.scalar_one_or_none() is None:
            raise InvalidAssignmentError(f"{model.__name__} {row_id} not found")

    async def _bulk_set_status(
        self,
        student_id: str,
        status: DocumentStatus,
        reviewed_by: str,
    ) -> None:
        await self.db.execute(
            update(ApplicantDocument)
            .where(ApplicantDocument.student_id == student_id)
            .values(status=status.value, reviewed_at=utc_now(), reviewed_by=reviewed_by)
            .execution_options(synchronize_session=False)
        )

    async def _documents(self, student_id: str) -> list[ApplicantDocument]:
        result = await self.db.execute(
            select(ApplicantDocument)
            .where(ApplicantDocument.student_id == student_id)
            .order_by(ApplicantDocument.submitted_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _get_document(self, organization_id: str, document_id: str) -> ApplicantDocument:
        result = await self.db.execute(
            select(ApplicantDocument).where(
                ApplicantDocument.id == document_id,
                ApplicantDocument.organization_id == organization_id,
            )
        )
        document = result.scalar_one_or_none()
        if not document:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    async def _get_document_type(self, organization_id: str, document_type_id: str) -> DocumentType:
        result = await self.db.execute(
            select(DocumentType).where(
                DocumentType.id == document_type_id,
                DocumentType.organization_id == organization_id,
            )
        )
        document_type = result.scalar_one_or_none()
        if not document_type:
            raise DocumentTypeNotFoundError(f"Document type {document_type_id} not found")
        return document_type

    async def _commit(self, conflict_message: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, conflict_message)
