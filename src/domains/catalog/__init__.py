# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic catalog domain package."""

from src.domains.catalog.service import (
    CatalogItemInUseError,
    CatalogItemNotFoundError,
    CatalogKind,
    CatalogService,
    CatalogServiceError,
    DuplicateCodeError,
    InvalidAcademicLevelError,
)

__all__ = [
    "CatalogKind",
    "CatalogService",
    "CatalogServiceError",
    "CatalogItemInUseError",
    "CatalogItemNotFoundError",
    "DuplicateCodeError",
    "InvalidAcademicLevelError",
]
