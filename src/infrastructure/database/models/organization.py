# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Organization (tenant) models.

Contains the organization itself, its subscription plan and usage row,
billing history, team memberships and per-organization settings
(numbering schemes and theme colors).
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.infrastructure.database.models.user import User
from src.utils.datetime import utc_now


class SubscriptionPlan(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Read-mostly plan catalog.

    A NULL ceiling means the resource is unlimited on that plan.
    """

    __tablename__ = "subscription_plans"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="PHP")
    max_team_members: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_students: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_projects: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Organization(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A school or institution; the unit of tenancy."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    plan: Mapped[str] = mapped_column(String(50), nullable=False, default="free")
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    billing_status: Mapped[str | None] = mapped_column(String(20), nullable=True)

    owner: Mapped[User] = relationship(lazy="raise")


class OrganizationUsage(Base):
    """Plan binding and usage counters of one organization.

    Counters are a cache of count queries and are rewritten in the same
    transaction as every member, student or project insert and delete.
    """

    __tablename__ = "organization_usage"

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    plan_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("subscription_plans.id", ondelete="RESTRICT"),
        nullable=False,
    )
    current_team_members: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_students: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_projects: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    plan: Mapped[SubscriptionPlan] = relationship(lazy="raise")


class BillingHistory(UUIDPrimaryKeyMixin, OrganizationScopedMixin, Base):
    """One plan change or charge."""

    __tablename__ = "organization_billing_history"

    plan_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("subscription_plans.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    plan: Mapped[SubscriptionPlan | None] = relationship(lazy="raise")


class TeamMember(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Membership of a user in an organization with a role."""

    __tablename__ = "organization_team_members"
    __table_args__ = (UniqueConstraint("organization_id", "user_id"),)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="member")
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    birthdate: Mapped[date | None] = mapped_column(Date, nullable=True)


class NumberingSetting(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """Sequential identifier scheme for applicant or student numbers."""

    __tablename__ = "numbering_settings"
    __table_args__ = (UniqueConstraint("organization_id", "type"),)

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    prefix: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    next_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    format: Mapped[str] = mapped_column(String(100), nullable=False)
    padding: Mapped[int] = mapped_column(Integer, nullable=False, default=5)


class OrganizationTheme(Base):
    """Brand colors of an organization."""

    __tablename__ = "organization_themes"

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    primary_color: Mapped[str] = mapped_column(String(7), nullable=False)
    secondary_color: Mapped[str] = mapped_column(String(7), nullable=False)
    accent_color: Mapped[str] = mapped_column(String(7), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )
