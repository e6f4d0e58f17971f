from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from core.domain.enums import ProjectStatus
from core.exceptions import ValidationError
from core.interfaces import ProjectRepository
from core.models import Project, iter_task_tree
from core.services.hierarchy import DEFAULT_MAX_NESTING_LEVEL
from core.services.work_calendar import validate_date_range

VALID_PROJECT_STATUSES = {status.value for status in ProjectStatus}


@dataclass
class ValidationOutcome:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def merge(self, other: "ValidationOutcome") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.is_valid = self.is_valid and other.is_valid

    def to_dict(self) -> dict:
        return {"isValid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def validate_project(project: Project, max_nesting_level: int = DEFAULT_MAX_NESTING_LEVEL) -> ValidationOutcome:
    """Field-level rules for a project and every task in its tree."""
    outcome = ValidationOutcome()
    if not project.id:
        outcome.add_error("Project must have an id")
    if not (project.name or "").strip():
        outcome.add_error("Project must have a name")
    if project.end_date and not validate_date_range(project.start_date, project.end_date):
        outcome.add_error("Project end date must be after start date")

    for index, task in enumerate(iter_task_tree(project.tasks)):
        label = task.title or f"at index {index}"
        if not task.id:
            outcome.add_error(f"Task at index {index} is missing an id")
        if not (task.title or "").strip():
            outcome.warnings.append(f"Task at index {index} is missing a title")
        if task.start_date is None or task.end_date is None:
            outcome.add_error(f'Task "{label}" must have a start and an end date')
        elif not validate_date_range(task.start_date, task.end_date):
            outcome.add_error(f'Task "{label}" end date must be after start date')
        if task.duration is None or task.duration < 0:
            outcome.add_error(f'Task "{label}" duration cannot be negative')
        if task.level > max_nesting_level:
            outcome.add_error(f'Task "{label}" exceeds the maximum nesting level of {max_nesting_level}')
    return outcome


class ProjectValidationMixin:
    _project_repo: ProjectRepository

    def _validate_project_name(self, name: str, exclude_id: str | None = None) -> None:
        if not name or not name.strip():
            raise ValidationError("Project name cannot be empty.", code="PROJECT_NAME_EMPTY")
        if len(name.strip()) < 3:
            raise ValidationError("Project name must be at least 3 characters.", code="PROJECT_NAME_TOO_SHORT")

        for project in self._project_repo.list_all():
            if project.id == exclude_id:
                continue
            if project.name.strip().lower() == name.strip().lower():
                raise ValidationError("A project with this name already exists.", code="PROJECT_NAME_DUPLICATE")

    def _validate_task_title(self, title: str) -> None:
        if not title or not title.strip():
            raise ValidationError("Task title cannot be empty.", code="TASK_TITLE_EMPTY")


__all__ = ["ValidationOutcome", "validate_project", "ProjectValidationMixin", "VALID_PROJECT_STATUSES"]
