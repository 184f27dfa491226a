# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for database migrations.

Runs the Alembic migrations against a temporary SQLite file and compares
the resulting schema with the ORM metadata.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

import src.infrastructure.database.models  # noqa: F401
from src.core.config.settings import clear_settings_cache
from src.infrastructure.database.models.base import Base

pytestmark = pytest.mark.integration

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "src" / "infrastructure" / "database" / "migrations"


@pytest.fixture
def migrated_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Upgrade a fresh SQLite file to head and yield an inspector for it."""
    db_path = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    clear_settings_cache()

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("version_locations", str(MIGRATIONS_DIR / "versions"))
    command.upgrade(config, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        yield inspect(engine)
    finally:
        engine.dispose()
        clear_settings_cache()


class TestInitialMigration:
    """Test the initial schema migration."""

    def test_creates_every_model_table(self, migrated_db):
        """Verify the migration creates exactly the tables the models declare."""
        tables = set(migrated_db.get_table_names()) - {"alembic_version"}

        assert tables == set(Base.metadata.tables)

    def test_columns_match_models(self, migrated_db):
        """Verify every table has the columns its model maps."""
        for name, table in Base.metadata.tables.items():
            columns = {col["name"] for col in migrated_db.get_columns(name)}
            assert columns == {col.name for col in table.columns}, f"Column mismatch in {name}"

    def test_enrollment_uniqueness(self, migrated_db):
        """Verify a student can be enrolled in an offering only once."""
        constraints = migrated_db.get_unique_constraints("enrollments")

        assert any(
            set(c["column_names"]) == {"student_id", "course_offering_id"} for c in constraints
        )

    def test_status_history_uses_integer_ids(self, migrated_db):
        """Verify status history rows get increasing integer ids for tie-breaking."""
        columns = {col["name"]: col for col in migrated_db.get_columns("student_enrollment_status")}

        assert "INT" in str(columns["id"]["type"]).upper()
