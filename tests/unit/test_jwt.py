# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token utilities.

Tests the JWTManager class and token operations.
"""

import time
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import SecretStr

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPair,
    TokenPayload,
)


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    settings.refresh_token_expire_days = 7
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager class."""

    def test_create_token_pair_returns_valid_tokens(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that create_token_pair returns valid token pair."""
        result = jwt_manager.create_token_pair(
            user_id=str(uuid4()),
            email="faculty@academy.test",
        )

        assert isinstance(result, TokenPair)
        assert result.access_token
        assert result.refresh_token
        assert result.token_type == "Bearer"
        assert result.expires_in == 30 * 60  # 30 minutes in seconds
        assert result.refresh_expires_in == 7 * 24 * 60 * 60  # 7 days in seconds

    def test_decode_access_token_returns_payload(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that access tokens carry the identity claims."""
        user_id = str(uuid4())
        tokens = jwt_manager.create_token_pair(
            user_id=user_id,
            email="admin@registrar.test",
            platform_role="super-admin",
            must_change_password=True,
        )

        payload = jwt_manager.decode_token(tokens.access_token, expected_type="access")

        assert isinstance(payload, TokenPayload)
        assert payload.sub == user_id
        assert payload.type == "access"
        assert payload.email == "admin@registrar.test"
        assert payload.platform_role == "super-admin"
        assert payload.must_change_password is True

    def test_decode_refresh_token_returns_payload(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that refresh tokens only identify the user."""
        user_id = str(uuid4())
        tokens = jwt_manager.create_token_pair(user_id=user_id, email="a@b.test")

        payload = jwt_manager.decode_token(tokens.refresh_token, expected_type="refresh")

        assert payload.sub == user_id
        assert payload.type == "refresh"
        assert payload.email is None
        assert payload.platform_role == "user"

    def test_decode_token_with_wrong_type_raises_error(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a refresh token is rejected where an access token is expected."""
        tokens = jwt_manager.create_token_pair(user_id=str(uuid4()))

        with pytest.raises(InvalidTokenError, match="Expected access token"):
            jwt_manager.decode_token(tokens.refresh_token, expected_type="access")

    def test_decode_expired_token_raises_error(
        self,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that expired tokens raise TokenExpiredError."""
        now = int(time.time())
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "type": "access",
                "exp": now - 60,
                "iat": now - 120,
                "jti": "expired",
            },
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            jwt_manager.decode_token(token)

    def test_decode_invalid_token_raises_error(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that garbage tokens raise InvalidTokenError."""
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("not.a.token")

    def test_decode_token_with_wrong_secret_raises_error(
        self,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that tokens signed with another secret are rejected."""
        other_settings = MagicMock()
        other_settings.secret_key = SecretStr("another-secret")
        other_settings.algorithm = "HS256"
        other_settings.access_token_expire_minutes = 30
        other_settings.refresh_token_expire_days = 7
        tokens = JWTManager(other_settings).create_token_pair(user_id=str(uuid4()))

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(tokens.access_token)

    def test_decode_token_with_missing_claims_raises_error(
        self,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a correctly signed token without required claims is rejected."""
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": int(time.time()) + 60},
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Invalid token claims"):
            jwt_manager.decode_token(token)

    def test_token_pair_has_unique_jti(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that every token gets its own JWT ID."""
        tokens = jwt_manager.create_token_pair(user_id=str(uuid4()))

        access = jwt_manager.decode_token(tokens.access_token)
        refresh = jwt_manager.decode_token(tokens.refresh_token)

        assert access.jti
        assert refresh.jti
        assert access.jti != refresh.jti

    def test_token_payload_timestamps(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that expiry is issued-at plus the configured lifetime."""
        tokens = jwt_manager.create_token_pair(user_id=str(uuid4()))

        access = jwt_manager.decode_token(tokens.access_token)
        refresh = jwt_manager.decode_token(tokens.refresh_token)

        assert access.exp - access.iat == 30 * 60
        assert refresh.exp - refresh.iat == 7 * 24 * 60 * 60
