# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests against a throwaway SQLite database
- API tests through the ASGI app
"""

import os

# Settings are cached and the rate limiter is built at import time, so the
# test environment must be in place before anything from src is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

# Fixture emails use the reserved ``.test`` domain; email-validator's documented
# test switch permits it (and skips DNS checks) for the duration of the suite.
import email_validator  # noqa: E402

email_validator.TEST_ENVIRONMENT = True

from collections.abc import AsyncGenerator  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from src.api.app import create_app  # noqa: E402
from src.api.dependencies import get_db, get_password_hasher  # noqa: E402
from src.domains.access import Actor  # noqa: E402
from src.domains.auth.password import PasswordHasher  # noqa: E402
from src.domains.organization import OrganizationService  # noqa: E402
from src.infrastructure.database.connection import build_engine, build_sessionmaker  # noqa: E402
from src.infrastructure.database.models import Base, User  # noqa: E402
from src.infrastructure.database.seeds import seed_plans  # noqa: E402
from src.models.common import MemberRole  # noqa: E402
from src.models.organization import OrganizationCreateRequest  # noqa: E402

# Low bcrypt cost keeps password hashing fast in tests
FAST_HASHER = PasswordHasher(rounds=4)
DEFAULT_PASSWORD = "correct-horse-battery"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test against a database"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite engine with every table."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'registrar.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker bound to the test engine."""
    return build_sessionmaker(db_engine)


@pytest_asyncio.fixture
async def db_session(
    db_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session with the default plans already seeded."""
    async with db_sessionmaker() as session:
        await seed_plans(session)
        await session.commit()
        yield session


# =============================================================================
# Data Helpers
# =============================================================================


async def create_user(
    session: AsyncSession,
    email: str,
    name: str = "Test User",
    password: str = DEFAULT_PASSWORD,
    platform_role: str = "user",
) -> User:
    """Insert a user account and commit.

    No refresh afterwards: a read would reopen a transaction and hold the
    SQLite lock while API requests try to write.
    """
    user = User(
        email=email,
        name=name,
        password_hash=FAST_HASHER.hash(password),
        platform_role=platform_role,
    )
    session.add(user)
    await session.commit()
    return user


async def create_organization(
    session: AsyncSession,
    owner: User,
    name: str = "Test Academy",
    plan: str | None = None,
) -> Actor:
    """Create an organization and return its owner as an actor."""
    organization = await OrganizationService(session).create_organization(
        owner,
        OrganizationCreateRequest(name=name, type="college", plan=plan),
    )
    return Actor(user_id=owner.id, organization_id=organization.id, role=MemberRole.OWNER)


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    """Organization owner account."""
    return await create_user(db_session, "owner@academy.test", name="Olivia Owner")


@pytest_asyncio.fixture
async def owner_actor(db_session: AsyncSession, owner: User) -> Actor:
    """Owner acting inside a fresh free-plan organization."""
    return await create_organization(db_session, owner)


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def app(db_sessionmaker: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Application wired to the test database.

    The ASGI transport does not run the lifespan, so the database
    dependency is replaced instead of initialized.
    """
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with db_sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_password_hasher] = lambda: FAST_HASHER
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the application; plans are seeded first."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


def auth_headers(tokens: dict[str, Any]) -> dict[str, str]:
    """Authorization header for a login or register response body."""
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory fixture for user accounts in the test database."""

    async def _make(email: str, **kwargs: Any) -> User:
        return await create_user(db_session, email, **kwargs)

    return _make


@pytest.fixture
def make_organization(db_session: AsyncSession):
    """Factory fixture for organizations owned by a given user."""

    async def _make(owner: User, **kwargs: Any) -> Actor:
        return await create_organization(db_session, owner, **kwargs)

    return _make


@pytest.fixture
def bearer():
    """Build an Authorization header from a token response body."""
    return auth_headers
