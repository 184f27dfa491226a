# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project and faculty attendance models."""

import datetime
from typing import Any

from sqlalchemy import JSON, Date, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    OrganizationScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Project(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """A workspace inside an organization created from a template."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    user_targets: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    requirements: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)


class Attendance(UUIDPrimaryKeyMixin, OrganizationScopedMixin, TimestampMixin, Base):
    """One faculty member's time log for one day in one project.

    times is a list of {"label": str, "time": "HH:MM"} in the order
    they were recorded.
    """

    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("faculty_id", "project_id", "date"),)

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    faculty_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    times: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
