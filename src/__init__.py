"""Campus Registrar Backend.

Multi-tenant academic institution management: organizations, members,
catalogs, curricula, admissions, enrollment, attendance and billing.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
