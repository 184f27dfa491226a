# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Daily time record PDF rendering with reportlab."""

import io
import logging

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from src.models.project import DTRDay
from src.utils.datetime import month_name

logger = logging.getLogger(__name__)

CERTIFICATION_TEXT = (
    "I certify on my honor that the above is a true and correct report of the hours "
    "of work performed, record of which was made daily at the time of arrival and "
    "departure from office."
)


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "DTRTitle",
            parent=base["Title"],
            fontName="Helvetica-Bold",
            fontSize=16,
            alignment=TA_CENTER,
            spaceAfter=12,
        ),
        "body": ParagraphStyle("DTRBody", parent=base["Normal"], fontSize=10, leading=13),
        "small": ParagraphStyle(
            "DTRSmall",
            parent=base["Normal"],
            fontSize=8,
            leading=10,
            alignment=TA_JUSTIFY,
        ),
    }


def render_dtr_pdf(name: str, month: int, year: int, days: list[DTRDay]) -> bytes:
    """Render a one-page DTR form.

    Args:
        name: Faculty member's name.
        month: Month number, 1-12.
        year: Four digit year.
        days: One row per calendar day.

    Returns:
        PDF document bytes.
    """
    styles = _styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"DTR {name} {year}-{month:02d}",
    )

    data = [
        ["Day", "A.M.", "", "P.M.", "", "Undertime", ""],
        ["", "Arrival", "Departure", "Arrival", "Departure", "Hours", "Minutes"],
    ]
    for row in days:
        data.append(
            [
                str(row.day),
                row.am_arrival or "",
                row.am_departure or "",
                row.pm_arrival or "",
                row.pm_departure or "",
                "",
                "",
            ]
        )

    table = Table(
        data,
        colWidths=[12 * mm, 20 * mm, 20 * mm, 20 * mm, 20 * mm, 18 * mm, 18 * mm],
        repeatRows=2,
    )
    table.setStyle(
        TableStyle(
            [
                ("SPAN", (0, 0), (0, 1)),
                ("SPAN", (1, 0), (2, 0)),
                ("SPAN", (3, 0), (4, 0)),
                ("SPAN", (5, 0), (6, 0)),
                ("BACKGROUND", (0, 0), (-1, 1), colors.HexColor("#EEEEEE")),
                ("FONTNAME", (0, 0), (-1, 1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                ("BOX", (0, 0), (-1, -1), 1.5, colors.black),
                ("TOPPADDING", (0, 0), (-1, -1), 1.5),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 1.5),
            ]
        )
    )

    story = [
        Paragraph("DAILY TIME RECORD", styles["title"]),
        Paragraph(f"Name: {name}", styles["body"]),
        Paragraph(f"Month: {month_name(month)} {year}", styles["body"]),
        Spacer(1, 6 * mm),
        table,
        Spacer(1, 6 * mm),
        Paragraph(CERTIFICATION_TEXT, styles["small"]),
        Spacer(1, 10 * mm),
        Paragraph("In Charge: ___________________________", styles["body"]),
    ]
    doc.build(story)

    logger.debug("Rendered DTR PDF: name=%s, period=%d-%02d", name, year, month)
    return buffer.getvalue()
