# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This module provides:
- JWT token creation and validation
- Password hashing and generation
- Registration, login, refresh and password changes

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
    JWTManager: JWT token creation and validation.
    AuthService: Account and session service.
"""

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPair,
    TokenPayload,
)
from src.domains.auth.password import PasswordHasher, generate_password
from src.domains.auth.service import (
    AccountInactiveError,
    AuthenticationError,
    AuthService,
    EmailAlreadyRegisteredError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    NotPlatformAdminError,
    TokenRefreshError,
    UserNotFoundError,
)

__all__ = [
    "PasswordHasher",
    "generate_password",
    "JWTManager",
    "TokenPair",
    "TokenPayload",
    "InvalidTokenError",
    "TokenExpiredError",
    "AuthService",
    "AuthenticationError",
    "AccountInactiveError",
    "EmailAlreadyRegisteredError",
    "IncorrectPasswordError",
    "InvalidCredentialsError",
    "NotPlatformAdminError",
    "TokenRefreshError",
    "UserNotFoundError",
]
