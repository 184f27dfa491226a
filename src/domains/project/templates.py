# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Project templates stored as JSON files.

Each template lives in <templates_dir>/<name>.json. Lookups never raise:
a missing, unreadable or invalid file yields None and is logged.
"""

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from src.models.project import ProjectTemplate

logger = logging.getLogger(__name__)

# Template names are plain identifiers; anything else could escape the directory
_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")


class TemplateRepository:
    """Loads project templates from a directory.

    Attributes:
        templates_dir: Directory holding the JSON files.
    """

    def __init__(self, templates_dir: Path | str) -> None:
        self.templates_dir = Path(templates_dir)

    def get(self, name: str) -> ProjectTemplate | None:
        """Load one template by name.

        Args:
            name: Template name, e.g. "attendance".

        Returns:
            The template, or None if the name is not an identifier or the
            file is missing, unreadable or invalid.
        """
        if not name or not _NAME_PATTERN.fullmatch(name):
            logger.warning("Rejected template name: %r", name)
            return None

        path = self.templates_dir / f"{name}.json"
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.info("Template not found: %s", name)
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Template %s could not be read: %s", name, str(e))
            return None

        if not isinstance(data, dict):
            logger.warning("Template %s is not a JSON object", name)
            return None

        data.setdefault("name", name)
        try:
            return ProjectTemplate.model_validate(data)
        except ValidationError as e:
            logger.warning("Template %s is invalid: %d errors", name, e.error_count())
            return None

    def list_all(self) -> list[ProjectTemplate]:
        """Load every valid template, sorted by name."""
        if not self.templates_dir.is_dir():
            return []
        templates = (self.get(path.stem) for path in sorted(self.templates_dir.glob("*.json")))
        return [t for t in templates if t is not None]
