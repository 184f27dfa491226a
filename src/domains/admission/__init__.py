# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admission domain package."""

from src.domains.admission.service import (
    APPROVED_STATUSES,
    AdmissionService,
    AdmissionServiceError,
    DocumentNotFoundError,
    DocumentTypeNotFoundError,
    InvalidAssignmentError,
    NoApprovedDocumentError,
)

__all__ = [
    "APPROVED_STATUSES",
    "AdmissionService",
    "AdmissionServiceError",
    "DocumentNotFoundError",
    "DocumentTypeNotFoundError",
    "InvalidAssignmentError",
    "NoApprovedDocumentError",
]
