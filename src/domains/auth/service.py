# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service.

This module provides the AuthService that handles:
- Self registration with email and password
- Login for members and for platform administrators
- Token refresh
- Password changes

Example:
    >>> auth_service = AuthService(db_session, jwt_manager, PasswordHasher())
    >>> response = await auth_service.login(LoginRequest(email=..., password=...))
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
    translate_integrity_error,
)
from src.domains.auth.jwt import InvalidTokenError, JWTManager, TokenExpiredError
from src.domains.auth.password import PasswordHasher
from src.infrastructure.database.models import User
from src.models.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base exception for authentication errors."""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is wrong."""

    pass


class AccountInactiveError(AuthenticationError):
    """Raised when the account is disabled."""

    pass


class TokenRefreshError(AuthenticationError):
    """Raised when a refresh token cannot be exchanged."""

    pass


class NotPlatformAdminError(AuthenticationError, PermissionDeniedError):
    """Raised when a non-admin uses the admin login."""

    pass


class EmailAlreadyRegisteredError(AuthenticationError, ConflictError):
    """Raised when registering an email that already has an account."""

    pass


class IncorrectPasswordError(AuthenticationError, ValidationFailedError):
    """Raised when the current password does not match on change."""

    pass


class UserNotFoundError(AuthenticationError, NotFoundError):
    """Raised when the authenticated user no longer exists."""

    pass


class AuthService:
    """Authentication service.

    Attributes:
        db: Database session for queries.
        _jwt_manager: JWT token manager.
        _hasher: Password hasher.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        hasher: PasswordHasher,
    ) -> None:
        self.db = db
        self._jwt_manager = jwt_manager
        self._hasher = hasher

    async def register(self, request: RegisterRequest) -> LoginResponse:
        """Create a user account and sign it in.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        email = request.email.lower()
        if await self._find_by_email(email):
            raise EmailAlreadyRegisteredError(f"Email {email} is already registered")

        user = User(
            email=email,
            name=request.name,
            password_hash=self._hasher.hash(request.password),
            platform_role="user",
            last_login_at=utc_now(),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, f"Email {email} is already registered")
        await self.db.refresh(user)

        logger.info("Registered user: %s", user.id)
        return self._issue(user)

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Sign in with email and password.

        Raises:
            InvalidCredentialsError: If email or password is wrong.
            AccountInactiveError: If the account is disabled.
        """
        user = await self._authenticate(request.email, request.password)
        return self._issue(user)

    async def admin_login(self, request: LoginRequest) -> LoginResponse:
        """Sign in to the platform admin dashboard.

        Raises:
            InvalidCredentialsError: If email or password is wrong.
            NotPlatformAdminError: If the user is not a platform admin.
        """
        user = await self._authenticate(request.email, request.password)
        if not user.is_platform_admin:
            logger.warning("Admin login refused for non-admin user: %s", user.id)
            raise NotPlatformAdminError("Administrator access required")
        return self._issue(user)

    async def refresh(self, refresh_token: str) -> LoginResponse:
        """Exchange a refresh token for a new token pair.

        Raises:
            TokenRefreshError: If the token is invalid, expired, or its user
                is missing or inactive.
        """
        try:
            payload = self._jwt_manager.decode_token(refresh_token, expected_type="refresh")
        except (TokenExpiredError, InvalidTokenError) as e:
            raise TokenRefreshError(f"Invalid refresh token: {str(e)}")

        user = await self.db.get(User, payload.sub)
        if not user or not user.is_active:
            raise TokenRefreshError("User not found or inactive")

        logger.info("Tokens refreshed for user: %s", user.id)
        return self._issue(user)

    async def change_password(self, user_id: str, request: ChangePasswordRequest) -> LoginResponse:
        """Replace the user's password and clear must_change_password.

        New tokens are issued because the old ones carry the stale flag.

        Raises:
            UserNotFoundError: If the user does not exist.
            IncorrectPasswordError: If the current password is wrong.
        """
        user = await self.get_user(user_id)
        if not self._hasher.verify(request.current_password, user.password_hash):
            raise IncorrectPasswordError("Current password is incorrect")
        if request.current_password == request.new_password:
            raise IncorrectPasswordError("New password must differ from the current password")

        user.password_hash = self._hasher.hash(request.new_password)
        user.must_change_password = False
        await self.db.commit()
        await self.db.refresh(user)

        logger.info("Password changed for user: %s", user.id)
        return self._issue(user)

    async def get_user(self, user_id: str) -> User:
        """Load a user by id.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    async def _authenticate(self, email: str, password: str) -> User:
        user = await self._find_by_email(email.lower())
        if not user or not self._hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt for email: %s", email)
            raise InvalidCredentialsError("Invalid email or password")
        if not user.is_active:
            raise AccountInactiveError("Account is disabled")

        user.last_login_at = utc_now()
        await self.db.commit()
        await self.db.refresh(user)

        logger.info("User logged in: %s", user.id)
        return user

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(func.lower(User.email) == email))
        return result.scalar_one_or_none()

    def _issue(self, user: User) -> LoginResponse:
        tokens = self._jwt_manager.create_token_pair(
            user_id=user.id,
            email=user.email,
            platform_role=user.platform_role,
            must_change_password=user.must_change_password,
        )
        return LoginResponse(
            **tokens.model_dump(),
            user=UserResponse.model_validate(user),
        )
