# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for daily time record mapping and rendering."""

from datetime import date

import pytest

from src.domains.attendance import build_month, display_slots, map_dtr_row, render_dtr_pdf
from src.domains.attendance.dtr import match_column


class TestMatchColumn:
    """Tests for match_column()."""

    @pytest.mark.parametrize(
        ("label", "column"),
        [
            ("AM IN", "am_arrival"),
            ("morning in", "am_arrival"),
            ("A.M. Arrival", "am_arrival"),
            ("Lunch Out", "am_departure"),
            ("NOON OUT", "am_departure"),
            ("am out", "am_departure"),
            ("PM IN", "pm_arrival"),
            ("Afternoon  In", "pm_arrival"),
            ("P.M. DEPARTURE", "pm_departure"),
            ("pm out", "pm_departure"),
            ("AFTERNOON OUT", "pm_departure"),
            ("Afternoon Out", "pm_departure"),
        ],
    )
    def test_labels_match_columns(self, label: str, column: str) -> None:
        """Test case- and spacing-insensitive label matching."""
        assert match_column(label) == column

    @pytest.mark.parametrize("label", ["", "Break", "OVERTIME IN", "Time in"])
    def test_unmatched_labels(self, label: str) -> None:
        """Test that labels outside the form are ignored."""
        assert match_column(label) is None


class TestMapDtrRow:
    """Tests for map_dtr_row()."""

    def test_full_day(self) -> None:
        """Test a day with all four entries."""
        row = map_dtr_row(
            [
                {"label": "AM IN", "time": "07:58"},
                {"label": "AM OUT", "time": "12:01"},
                {"label": "PM IN", "time": "12:55"},
                {"label": "PM OUT", "time": "17:03"},
            ]
        )

        assert row == {
            "am_arrival": "07:58",
            "am_departure": "12:01",
            "pm_arrival": "12:55",
            "pm_departure": "17:03",
        }

    def test_standard_day_labels(self) -> None:
        """Test that the afternoon departure does not overwrite the noon departure."""
        row = map_dtr_row(
            [
                {"label": "MORNING IN", "time": "07:55"},
                {"label": "NOON OUT", "time": "12:00"},
                {"label": "AFTERNOON IN", "time": "13:00"},
                {"label": "AFTERNOON OUT", "time": "17:05"},
            ]
        )

        assert row == {
            "am_arrival": "07:55",
            "am_departure": "12:00",
            "pm_arrival": "13:00",
            "pm_departure": "17:05",
        }

    def test_each_column_takes_its_latest_entry(self) -> None:
        """Test that a late morning entry still fills its column after afternoon entries."""
        row = map_dtr_row(
            [
                {"label": "AM IN", "time": "07:50"},
                {"label": "PM OUT", "time": "17:00"},
                {"label": "Lunch Out", "time": "12:10"},
            ]
        )

        assert row["am_departure"] == "12:10"
        assert row["pm_departure"] == "17:00"

    def test_missing_columns_are_none(self) -> None:
        """Test that columns without entries stay empty."""
        row = map_dtr_row([{"label": "Morning In", "time": "08:10"}])

        assert row["am_arrival"] == "08:10"
        assert row["am_departure"] is None
        assert row["pm_arrival"] is None
        assert row["pm_departure"] is None

    def test_last_matching_entry_wins(self) -> None:
        """Test that a later entry for the same column replaces an earlier one."""
        row = map_dtr_row(
            [
                {"label": "AM IN", "time": "07:50"},
                {"label": "Morning In", "time": "08:05"},
            ]
        )

        assert row["am_arrival"] == "08:05"

    def test_empty_day(self) -> None:
        """Test that a day without entries has four empty columns."""
        assert map_dtr_row([]) == dict.fromkeys(
            ["am_arrival", "am_departure", "pm_arrival", "pm_departure"]
        )


class TestDisplaySlots:
    """Tests for display_slots()."""

    def test_keeps_last_time_per_label_in_first_seen_order(self) -> None:
        """Test that relogging a label updates its time but not its position."""
        slots = display_slots(
            [
                {"label": "AM IN", "time": "07:50"},
                {"label": "AM OUT", "time": "12:00"},
                {"label": "AM IN", "time": "08:00"},
            ]
        )

        assert slots == [
            {"label": "AM IN", "time": "08:00"},
            {"label": "AM OUT", "time": "12:00"},
        ]


class TestBuildMonth:
    """Tests for build_month()."""

    def test_one_row_per_day(self) -> None:
        """Test that every calendar day appears, including leap days."""
        days = build_month(2024, 2, {})

        assert [d.day for d in days] == list(range(1, 30))
        assert all(d.am_arrival is None for d in days)

    def test_records_land_on_their_day(self) -> None:
        """Test that entries are mapped onto the matching row."""
        records = {
            date(2025, 4, 3): [{"label": "PM OUT", "time": "17:00"}],
            date(2025, 5, 1): [{"label": "AM IN", "time": "08:00"}],
        }

        days = build_month(2025, 4, records)

        assert len(days) == 30
        assert days[2].pm_departure == "17:00"
        assert all(d.am_arrival is None for d in days)

    def test_invalid_month_raises(self) -> None:
        """Test that months outside 1-12 are rejected."""
        with pytest.raises(ValueError):
            build_month(2025, 13, {})


class TestRenderDtrPdf:
    """Tests for render_dtr_pdf()."""

    def test_renders_pdf_document(self) -> None:
        """Test that a month of rows renders to a PDF."""
        days = build_month(
            2025,
            3,
            {date(2025, 3, 4): [{"label": "AM IN", "time": "07:58"}]},
        )

        content = render_dtr_pdf("Fe Faculty", 3, 2025, days)

        assert content.startswith(b"%PDF")
        assert len(content) > 1000
