from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import ProjectRepository
from core.models import Project, ProjectStatus, Task
from core.services.project.validation import ProjectValidationMixin, validate_project
from core.services.work_calendar.dates import parse_optional_date, utc_now

logger = logging.getLogger(__name__)


class ProjectLifecycleMixin(ProjectValidationMixin):
    _session: Session
    _project_repo: ProjectRepository

    def _require_project(self, project_id: str) -> Project:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        return project

    def _require_task(self, project: Project, task_id: str) -> Task:
        task = project.find_task(task_id)
        if not task:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        return task

    def _persist(self, project: Project, *, is_new: bool = False) -> None:
        try:
            if is_new:
                self._project_repo.add(project)
            else:
                self._project_repo.update(project)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def create_project(
        self,
        name: str,
        description: str = "",
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
        team_members: list[dict] | None = None,
    ) -> Project:
        self._validate_project_name(name)
        start = parse_optional_date(start_date, "Project start date")
        end = parse_optional_date(end_date, "Project end date")
        if start and end and end < start:
            raise ValidationError("Project end date cannot be before start date.", code="PROJECT_INVALID_DATES")

        project = Project.create(
            name=name.strip(),
            description=description.strip(),
            start_date=start,
            end_date=end,
            status=status,
            team_members=list(team_members or []),
        )
        try:
            self._persist(project, is_new=True)
        except Exception as e:
            logger.error("Error creating project: %s", e)
            raise
        logger.info("Created project %s - %s", project.id, project.name)
        domain_events.project_changed.emit(project.id)
        return project

    def save_project(self, project: Project) -> Project:
        """Validate and upsert a whole project, e.g. one built by the importer."""
        outcome = validate_project(project, self._max_nesting_level())
        if not outcome.is_valid:
            raise ValidationError("; ".join(outcome.errors), code="PROJECT_INVALID")
        for warning in outcome.warnings:
            logger.warning("Project %s: %s", project.id, warning)

        project.updated_at = utc_now()
        self._persist(project, is_new=self._project_repo.get(project.id) is None)
        domain_events.project_changed.emit(project.id)
        domain_events.tasks_changed.emit(project.id)
        return project

    def update_project(
        self,
        project_id: str,
        name: str | None = None,
        description: str | None = None,
        status: ProjectStatus | None = None,
        end_date: date | str | None = None,
    ) -> Project:
        project = self._require_project(project_id)
        if name is not None:
            self._validate_project_name(name, exclude_id=project_id)
            project.name = name.strip()
        if description is not None:
            project.description = description.strip()
        if status is not None:
            project.status = status
        if end_date is not None:
            end = parse_optional_date(end_date, "Project end date")
            if end and end < project.start_date:
                raise ValidationError("Project end date cannot be before start date.", code="PROJECT_INVALID_DATES")
            project.end_date = end

        project.updated_at = utc_now()
        self._persist(project)
        domain_events.project_changed.emit(project_id)
        return project

    def delete_project(self, project_id: str) -> None:
        self._require_project(project_id)
        try:
            self._project_repo.delete(project_id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.info("Deleted project %s", project_id)
        domain_events.project_deleted.emit(project_id)

    def add_task(
        self,
        project_id: str,
        title: str,
        start_date: Any = None,
        end_date: Any = None,
        duration: Optional[int] = None,
        parent_task_id: Optional[str] = None,
        adjust_start_date: bool = False,
        **extra,
    ) -> Task:
        self._validate_task_title(title)
        if duration is not None and duration < 0:
            raise ValidationError("Task duration cannot be negative.", code="TASK_INVALID_DURATION")
        start = parse_optional_date(start_date, "Start date")
        end = parse_optional_date(end_date, "End date")
        if start and end and end < start:
            raise ValidationError("Task end date cannot be before start date.", code="TASK_INVALID_DATE")
        if (start is None and end is None) or (duration is None and (start is None or end is None)):
            raise ValidationError("Task needs a start and an end date, or a duration.", code="TASK_INVALID_DATE")

        project = self._require_project(project_id)
        parent = self._require_task(project, parent_task_id) if parent_task_id else None
        level = parent.level + 1 if parent else 0
        if level > self._max_nesting_level():
            raise ValidationError(
                f"Tasks cannot be nested deeper than {self._max_nesting_level()} levels.",
                code="TASK_NESTING_TOO_DEEP",
            )

        task = Task.create(
            title=title.strip(),
            start_date=start,
            end_date=end,
            duration=duration,
            adjust_start_date=adjust_start_date,
            project_id=project_id,
            parent_task_id=parent.id if parent else None,
            level=level,
            **extra,
        )
        if parent:
            parent.subtasks.append(task)
        else:
            project.tasks.append(task)

        project.updated_at = utc_now()
        self._persist(project)
        logger.info("Created task %s - %s for project %s", task.id, task.title, project_id)
        domain_events.tasks_changed.emit(project_id)
        return task

    def remove_task(self, project_id: str, task_id: str) -> None:
        """Remove a task together with its subtasks."""
        project = self._require_project(project_id)
        task = self._require_task(project, task_id)
        siblings = project.tasks
        if task.parent_task_id:
            parent = project.find_task(task.parent_task_id)
            if parent is not None:
                siblings = parent.subtasks
        siblings[:] = [t for t in siblings if t.id != task_id]

        project.updated_at = utc_now()
        self._persist(project)
        domain_events.tasks_changed.emit(project_id)


__all__ = ["ProjectLifecycleMixin"]
