from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Optional

from core.exceptions import ValidationError
from core.models import Project
from core.services.project.validation import ValidationOutcome
from core.services.work_calendar.dates import format_timestamp, utc_now

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"
DEFAULT_EXPORT_NAME = "project-export"

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")
_DASH_RUNS = re.compile(r"-+")


def _ensure_path(path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def export_project(project: Project) -> str:
    """
    Serialise a project, its team and its whole task tree to pretty JSON.

    The payload is ``Project.to_dict()`` plus ``exportedAt`` and
    ``exportVersion`` so that ``import_project`` can read it back.
    """
    if project is None:
        raise ValidationError("Project is required for export.", code="EXPORT_PROJECT_REQUIRED")
    if not project.id or not (project.name or "").strip():
        raise ValidationError("Project must have an id and name.", code="EXPORT_PROJECT_INVALID")

    data = project.to_dict()
    data["exportedAt"] = format_timestamp(utc_now())
    data["exportVersion"] = EXPORT_VERSION
    return json.dumps(data, indent=2, ensure_ascii=False)


def validate_project_for_export(project: Optional[Project]) -> ValidationOutcome:
    outcome = ValidationOutcome()
    if project is None:
        outcome.add_error("Project is required")
        return outcome

    if not project.id:
        outcome.add_error("Project must have an id")
    if not (project.name or "").strip():
        outcome.add_error("Project must have a name")

    for index, task in enumerate(project.tasks):
        if not task.id:
            outcome.add_error(f"Task at index {index} is missing an id")
        if not (task.title or "").strip():
            outcome.warnings.append(f"Task at index {index} is missing a title")

    for index, member in enumerate(project.team_members):
        if not isinstance(member, dict) or not member.get("id"):
            outcome.add_error(f"Team member at index {index} is missing an id")
    return outcome


def sanitize_filename(name: Optional[str]) -> str:
    if not name or not isinstance(name, str) or not name.strip():
        return DEFAULT_EXPORT_NAME
    cleaned = _INVALID_FILENAME_CHARS.sub("-", name)
    cleaned = _WHITESPACE.sub("-", cleaned)
    cleaned = _DASH_RUNS.sub("-", cleaned)
    cleaned = cleaned.strip("-").lower()[:50]
    return cleaned or DEFAULT_EXPORT_NAME


def write_export(project: Project, directory: str | Path, filename: Optional[str] = None) -> Path:
    """Write ``export_project(project)`` to ``<directory>/<filename>.json``."""
    stem = filename or sanitize_filename(project.name)
    if not stem.endswith(".json"):
        stem = f"{stem}.json"
    path = _ensure_path(Path(directory) / stem)
    path.write_text(export_project(project), encoding="utf-8")
    logger.info("Exported project %s to %s", project.id, path)
    return path


__all__ = [
    "EXPORT_VERSION",
    "export_project",
    "validate_project_for_export",
    "sanitize_filename",
    "write_export",
]
