# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Platform admin domain package."""

from src.domains.admin.service import AdminAccessDeniedError, AdminService, AdminServiceError

__all__ = ["AdminAccessDeniedError", "AdminService", "AdminServiceError"]
