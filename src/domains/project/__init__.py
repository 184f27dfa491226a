# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project domain package."""

from src.domains.project.service import (
    ProjectNotFoundError,
    ProjectService,
    ProjectServiceError,
    TemplateNotFoundError,
)
from src.domains.project.templates import TemplateRepository

__all__ = [
    "ProjectService",
    "ProjectServiceError",
    "ProjectNotFoundError",
    "TemplateNotFoundError",
    "TemplateRepository",
]
