# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Numbering domain package."""

from src.domains.numbering.service import (
    DEFAULT_FORMAT,
    DEFAULT_PADDING,
    DEFAULT_PREFIXES,
    InvalidFormatError,
    NumberingService,
    NumberingServiceError,
    NumberingType,
    render_number,
    validate_format,
)

__all__ = [
    "DEFAULT_FORMAT",
    "DEFAULT_PADDING",
    "DEFAULT_PREFIXES",
    "InvalidFormatError",
    "NumberingService",
    "NumberingServiceError",
    "NumberingType",
    "render_number",
    "validate_format",
]
