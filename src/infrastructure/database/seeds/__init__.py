# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

This package contains seed data for initializing the database:
subscription plans and the platform super-admin.
"""

from src.infrastructure.database.seeds.plans import (
    PLANS_DATA,
    seed_database,
    seed_plans,
    seed_super_admin,
)

__all__ = ["PLANS_DATA", "seed_database", "seed_plans", "seed_super_admin"]
