from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from core.domain.enums import ProjectStatus, TaskPriority, TaskStatus, TaskType
from core.exceptions import DomainError, ValidationError
from core.models import Project, iter_task_tree
from core.services.hierarchy import DEFAULT_MAX_NESTING_LEVEL, build_task_tree
from core.services.project.validation import VALID_PROJECT_STATUSES, ValidationOutcome
from core.services.scheduling.models import AdjustmentReport
from core.services.work_calendar import validate_date_range
from core.services.work_calendar.dates import coerce_date, utc_now

logger = logging.getLogger(__name__)

_TASK_STATUSES = {s.value for s in TaskStatus}
_TASK_TYPES = {t.value for t in TaskType}
_TASK_PRIORITIES = {p.value for p in TaskPriority}
_DELIVERABLE_TYPES = {"presentation", "file", "exposition", "other"}
_DELIVERABLE_STATUSES = {"pending", "in_review", "completed"}
_BUILD_FAILURES = (DomainError, TypeError, ValueError)


@dataclass
class ImportResult:
    success: bool = False
    project: Optional[Project] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    adjustment: Optional[AdjustmentReport] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "project": self.project.to_dict() if self.project else None,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "adjustment": self.adjustment.to_dict() if self.adjustment else None,
        }


def _parse_date(value: Any):
    try:
        return coerce_date(value)
    except ValidationError:
        return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_member(member: Any, index: int, outcome: ValidationOutcome) -> None:
    if not isinstance(member, dict):
        outcome.add_error(f"Team member at index {index} must be an object")
        return
    if not member.get("id"):
        outcome.add_error(f"Team member at index {index} must have an id")
    name = member.get("name")
    if not isinstance(name, str) or not name.strip():
        outcome.warnings.append(f"Team member at index {index} should have a name")
    if member.get("email") and not isinstance(member["email"], str):
        outcome.warnings.append(f"Team member at index {index} email should be a string")
    if member.get("joinedAt") and _parse_date(member["joinedAt"]) is None:
        outcome.warnings.append(f"Team member at index {index} has invalid joinedAt date")


def _validate_deliverable(deliverable: Any, index: str, outcome: ValidationOutcome) -> None:
    if not isinstance(deliverable, dict):
        outcome.add_error(f"Task at index {index} deliverable must be an object")
        return
    if deliverable.get("type") and deliverable["type"] not in _DELIVERABLE_TYPES:
        outcome.warnings.append(f'Task at index {index} deliverable has invalid type "{deliverable["type"]}"')
    if deliverable.get("status") and deliverable["status"] not in _DELIVERABLE_STATUSES:
        outcome.warnings.append(f'Task at index {index} deliverable has invalid status "{deliverable["status"]}"')
    if deliverable.get("dueDate") and _parse_date(deliverable["dueDate"]) is None:
        outcome.add_error(f"Task at index {index} deliverable has invalid due date")


def _validate_task(task: Any, index: str, outcome: ValidationOutcome) -> None:
    # nested tasks are walked with an explicit stack; index reads like "2.0.1"
    stack = [(task, index)]
    while stack:
        data, label = stack.pop()
        if not isinstance(data, dict):
            outcome.add_error(f"Task at index {label} must be an object")
            continue
        if not data.get("id"):
            outcome.add_error(f"Task at index {label} must have an id")
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            outcome.warnings.append(f"Task at index {label} should have a title")

        start = _parse_date(data["startDate"]) if data.get("startDate") else None
        end = _parse_date(data["endDate"]) if data.get("endDate") else None
        if data.get("startDate") and start is None:
            outcome.add_error(f"Task at index {label} has invalid start date")
        if data.get("endDate") and end is None:
            outcome.add_error(f"Task at index {label} has invalid end date")
        if start and end and not validate_date_range(start, end):
            outcome.add_error(f"Task at index {label} end date must be after start date")

        if data.get("status") and data["status"] not in _TASK_STATUSES:
            outcome.warnings.append(f'Task at index {label} has invalid status "{data["status"]}"')
        if data.get("type") and data["type"] not in _TASK_TYPES:
            outcome.warnings.append(f'Task at index {label} has invalid type "{data["type"]}"')
        if data.get("priority") and data["priority"] not in _TASK_PRIORITIES:
            outcome.warnings.append(f'Task at index {label} has invalid priority "{data["priority"]}"')
        if "progress" in data and not (_is_number(data["progress"]) and 0 <= data["progress"] <= 100):
            outcome.warnings.append(f"Task at index {label} progress should be a number between 0 and 100")
        if data.get("duration") is not None and not (_is_number(data["duration"]) and data["duration"] >= 0):
            outcome.warnings.append(f"Task at index {label} duration should be a positive number")
        if data.get("deliverable"):
            _validate_deliverable(data["deliverable"], label, outcome)

        subtasks = data.get("subtasks")
        if isinstance(subtasks, list):
            stack.extend((sub, f"{label}.{i}") for i, sub in reversed(list(enumerate(subtasks))))


def validate_project_json(text: Any) -> ValidationOutcome:
    """
    Structural checks on an exported project document.

    Errors make the document unimportable; warnings flag values that will be
    replaced by defaults (unknown status, missing titles and the like).
    """
    outcome = ValidationOutcome()
    if not text or not isinstance(text, str):
        outcome.add_error("JSON data is required and must be a string")
        return outcome
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        outcome.add_error(f"Invalid JSON format: {e}")
        return outcome
    if not isinstance(data, dict):
        outcome.add_error("Project data must be a JSON object")
        return outcome

    if not data.get("id"):
        outcome.add_error("Project must have an id")
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        outcome.add_error("Project must have a valid name")

    start = _parse_date(data["startDate"]) if data.get("startDate") else None
    end = _parse_date(data["endDate"]) if data.get("endDate") else None
    if data.get("startDate") and start is None:
        outcome.add_error("Project start date is invalid")
    if data.get("endDate") and end is None:
        outcome.add_error("Project end date is invalid")
    if start and end and not validate_date_range(start, end):
        outcome.add_error("Project end date must be after start date")

    if data.get("status") and data["status"] not in VALID_PROJECT_STATUSES:
        outcome.warnings.append(f'Invalid project status "{data["status"]}", will default to "active"')

    members = data.get("teamMembers")
    if members is not None and not isinstance(members, list):
        outcome.add_error("Team members must be an array")
    elif members:
        for index, member in enumerate(members):
            _validate_member(member, index, outcome)

    tasks = data.get("tasks")
    if tasks is not None and not isinstance(tasks, list):
        outcome.add_error("Tasks must be an array")
    elif tasks:
        for index, task in enumerate(tasks):
            _validate_task(task, str(index), outcome)
    return outcome


def _project_from_data(data: dict, max_nesting_level: int) -> Project:
    data = dict(data)
    data.pop("exportedAt", None)
    data.pop("exportVersion", None)
    if data.get("status") not in VALID_PROJECT_STATUSES:
        data["status"] = ProjectStatus.ACTIVE.value

    project = Project.from_dict(data)
    project.tasks = build_task_tree(project.tasks, max_nesting_level)
    for task in iter_task_tree(project.tasks):
        task.project_id = project.id
    project.updated_at = utc_now()
    return project


def import_project(
    text: str,
    new_start_date: Any = None,
    max_nesting_level: int = DEFAULT_MAX_NESTING_LEVEL,
) -> Project:
    """
    Rebuild a project from exported JSON.

    When ``new_start_date`` is given the whole schedule is moved there with
    ``Project.adjust_project_dates``; a blocked move fails the import.
    """
    outcome = validate_project_json(text)
    if not outcome.is_valid:
        code = "IMPORT_INVALID_JSON" if outcome.errors[0].startswith(("Invalid JSON", "JSON data")) else "IMPORT_VALIDATION_FAILED"
        raise ValidationError(f"Project validation failed: {', '.join(outcome.errors)}", code=code)
    for warning in outcome.warnings:
        logger.warning("Import: %s", warning)

    try:
        project = _project_from_data(json.loads(text), max_nesting_level)
    except _BUILD_FAILURES as e:
        raise ValidationError(f"Failed to import project: {e}", code="IMPORT_VALIDATION_FAILED") from e

    if new_start_date:
        try:
            project.adjust_project_dates(new_start_date)
        except DomainError as e:
            raise ValidationError(f"Failed to adjust project dates: {e}", code="IMPORT_DATE_ADJUSTMENT_FAILED") from e

    logger.info("Imported project %s with %d tasks", project.id, sum(1 for _ in project.iter_tasks()))
    return project


def import_project_safe(
    text: str,
    new_start_date: Any = None,
    validate_only: bool = False,
    max_nesting_level: int = DEFAULT_MAX_NESTING_LEVEL,
) -> ImportResult:
    """``import_project`` that reports problems in an ``ImportResult`` instead of raising."""
    outcome = validate_project_json(text)
    result = ImportResult(errors=list(outcome.errors), warnings=list(outcome.warnings))
    if not outcome.is_valid or validate_only:
        result.success = outcome.is_valid
        return result

    try:
        project = _project_from_data(json.loads(text), max_nesting_level)
    except _BUILD_FAILURES as e:
        result.errors.append(str(e))
        return result

    if new_start_date:
        try:
            result.adjustment = project.adjust_project_dates(new_start_date)
        except DomainError as e:
            logger.warning("Import of %s: date adjustment failed: %s", project.id, e)
            result.errors.append(f"Failed to adjust project dates: {e}")
            return result

    result.project = project
    result.success = True
    return result


__all__ = ["ImportResult", "validate_project_json", "import_project", "import_project_safe"]
