# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for offering schedule reconciliation."""

import pytest
from pydantic import ValidationError

from src.domains.offering import UnknownScheduleError, diff_schedules
from src.models.offering import ScheduleInput


def schedule(schedule_id: str | None = None, day: str = "MON", start: str = "08:00", end: str = "09:30"):
    return ScheduleInput(id=schedule_id, day=day, start_time=start, end_time=end, room="R101")


class TestDiffSchedules:
    """Tests for diff_schedules()."""

    def test_new_rows_are_inserted(self) -> None:
        """Test that rows without an id become inserts."""
        incoming = [schedule(), schedule(day="WED")]

        diff = diff_schedules([], incoming)

        assert diff.to_insert == incoming
        assert diff.to_update == []
        assert diff.to_delete == []

    def test_mixed_edit(self) -> None:
        """Test keeping one row, dropping one and adding one."""
        kept = schedule("s-1", day="TUE")
        added = schedule(day="FRI")

        diff = diff_schedules(["s-1", "s-2"], [kept, added])

        assert diff.to_insert == [added]
        assert diff.to_update == [kept]
        assert diff.to_delete == ["s-2"]

    def test_empty_list_deletes_everything(self) -> None:
        """Test that sending no schedules removes all persisted rows."""
        diff = diff_schedules(["s-3", "s-1", "s-2"], [])

        assert diff.to_insert == []
        assert diff.to_update == []
        assert diff.to_delete == ["s-3", "s-1", "s-2"]

    def test_unknown_id_raises(self) -> None:
        """Test that ids from another offering are rejected."""
        with pytest.raises(UnknownScheduleError, match="does not belong"):
            diff_schedules(["s-1"], [schedule("s-9")])

    def test_repeated_id_raises(self) -> None:
        """Test that an id cannot be updated twice in one edit."""
        with pytest.raises(UnknownScheduleError, match="more than once"):
            diff_schedules(["s-1"], [schedule("s-1"), schedule("s-1", day="THU")])

    def test_result_leaves_exactly_incoming_rows(self) -> None:
        """Test that persisted minus deletes plus inserts matches the incoming count."""
        persisted = ["a", "b", "c", "d"]
        incoming = [schedule("b"), schedule("d"), schedule(), schedule(), schedule()]

        diff = diff_schedules(persisted, incoming)
        remaining = len(persisted) - len(diff.to_delete) + len(diff.to_insert)

        assert remaining == len(incoming)
        assert {item.id for item in diff.to_update} == {"b", "d"}

    def test_accepts_iterator_of_ids(self) -> None:
        """Test that persisted ids may come from a one-shot iterator."""
        diff = diff_schedules(iter(["s-1", "s-2"]), [schedule("s-2")])

        assert diff.to_delete == ["s-1"]


class TestScheduleInput:
    """Tests for the schedule row model."""

    def test_end_must_follow_start(self) -> None:
        """Test that a slot ending before it starts is invalid."""
        with pytest.raises(ValidationError, match="end_time must be after start_time"):
            schedule(start="10:00", end="09:00")

    def test_zero_length_slot_rejected(self) -> None:
        """Test that a slot must have a duration."""
        with pytest.raises(ValidationError):
            schedule(start="10:00", end="10:00")
