# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Billing domain package."""

from src.domains.billing.service import (
    BillingService,
    BillingServiceError,
    PlanNotFoundError,
    SamePlanError,
)

__all__ = [
    "BillingService",
    "BillingServiceError",
    "PlanNotFoundError",
    "SamePlanError",
]
