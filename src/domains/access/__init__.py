# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access domain package.

Provides the role policy (can, authorize, permissions_for) and the
membership lookup that turns a user and an organization into an Actor.
"""

from src.domains.access.policy import (
    POLICY,
    Action,
    Actor,
    Resource,
    authorize,
    can,
    permissions_for,
)
from src.domains.access.service import AccessService

__all__ = [
    "POLICY",
    "AccessService",
    "Action",
    "Actor",
    "Resource",
    "authorize",
    "can",
    "permissions_for",
]
