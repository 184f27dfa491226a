# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides authentication endpoints:
- POST /register - Create an account and sign in
- POST /login - Email and password login
- POST /admin/login - Login for platform administrators
- POST /refresh - Exchange a refresh token for a new pair
- POST /change-password - Change the password and clear the reset flag
- GET /me - Current user
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from src.api.dependencies import AuthenticatedUser, AuthServiceDep
from src.api.middleware.rate_limit import get_ip_only, limiter, login_limit
from src.domains.auth import (
    AccountInactiveError,
    InvalidCredentialsError,
    TokenRefreshError,
)
from src.models.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a user account and return a token pair.",
)
@limiter.limit(login_limit, key_func=get_ip_only)
async def register(
    request: Request,
    data: RegisterRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    return await auth_service.register(data)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Authenticate with email and password.",
)
@limiter.limit(login_limit, key_func=get_ip_only)
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    """Authenticate a user.

    Raises:
        HTTPException: 401 on wrong credentials, 403 on a disabled account.
    """
    try:
        return await auth_service.login(data)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except AccountInactiveError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )


@router.post(
    "/admin/login",
    response_model=LoginResponse,
    summary="Platform admin login",
    description="Authenticate a platform administrator. Other users get 403.",
)
@limiter.limit(login_limit, key_func=get_ip_only)
async def admin_login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    try:
        return await auth_service.admin_login(data)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except AccountInactiveError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )


@router.post(
    "/refresh",
    response_model=LoginResponse,
    summary="Refresh tokens",
    description="Exchange a refresh token for a new token pair.",
)
@limiter.limit(login_limit, key_func=get_ip_only)
async def refresh_token(
    request: Request,
    data: RefreshRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    try:
        return await auth_service.refresh(data.refresh_token)
    except TokenRefreshError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post(
    "/change-password",
    response_model=LoginResponse,
    summary="Change password",
    description="Verify the current password, store the new one and reissue tokens.",
)
async def change_password(
    data: ChangePasswordRequest,
    current_user: AuthenticatedUser,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    """Change the caller's password.

    The returned tokens no longer carry must_change_password.
    """
    logger.info("Password change requested: user=%s", current_user.id)
    return await auth_service.change_password(current_user.id, data)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_current_user_info(
    current_user: AuthenticatedUser,
    auth_service: AuthServiceDep,
) -> UserResponse:
    user = await auth_service.get_user(current_user.id)
    return UserResponse.model_validate(user)
