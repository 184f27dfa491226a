# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response models."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from src.models.common import ORMModel


class RegisterRequest(BaseModel):
    """Self sign-up."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    """Email and password login."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    """Refresh token exchange."""

    refresh_token: str


class ChangePasswordRequest(BaseModel):
    """Password change for the authenticated user."""

    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


class UserResponse(ORMModel):
    """Public view of a user."""

    id: str
    email: str
    name: str
    platform_role: str
    must_change_password: bool
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None


class LoginResponse(BaseModel):
    """Tokens issued on login, registration or refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_expires_in: int
    user: UserResponse
