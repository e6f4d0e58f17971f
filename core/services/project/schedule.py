from __future__ import annotations

import logging
from typing import Any, Optional

from core.events.domain_events import domain_events
from core.exceptions import ScheduleAdjustmentError
from core.models import Project, Task
from core.services.scheduling.models import AdjustmentReport, ValidationReport
from core.services.work_calendar.dates import utc_now

logger = logging.getLogger(__name__)


class ProjectScheduleMixin:
    """Date edits on stored projects: single-task edits and project-wide moves."""

    def update_task_schedule(
        self,
        project_id: str,
        task_id: str,
        start_date: Any = None,
        end_date: Any = None,
        duration: Optional[int] = None,
        adjust_start_date: Optional[bool] = None,
    ) -> Task:
        """
        Apply date edits through the task's own setters, in the order
        policy flag, start, end, duration.
        """
        project: Project = self._require_project(project_id)
        task: Task = self._require_task(project, task_id)

        if adjust_start_date is not None:
            task.adjust_start_date = adjust_start_date
        if start_date is not None:
            task.set_start_date(start_date)
        if end_date is not None:
            task.set_end_date(end_date)
        if duration is not None:
            task.set_duration(duration)

        project.updated_at = utc_now()
        self._persist(project)
        domain_events.tasks_changed.emit(project_id)
        return task

    def validate_date_adjustment(self, project_id: str, new_start_date: Any) -> ValidationReport:
        return self._require_project(project_id).validate_date_adjustment(new_start_date)

    def adjust_project_dates(self, project_id: str, new_start_date: Any) -> AdjustmentReport:
        project: Project = self._require_project(project_id)
        try:
            report = project.adjust_project_dates(new_start_date)
        except ScheduleAdjustmentError as exc:
            logger.warning(
                "Project %s date adjustment blocked: %s",
                project_id,
                [failed.task_id for failed in exc.report.failed_tasks],
            )
            raise

        self._persist(project)
        domain_events.project_changed.emit(project_id)
        domain_events.tasks_changed.emit(project_id)
        return report

    def recalculate_end_date(self, project_id: str) -> Project:
        project: Project = self._require_project(project_id)
        project.recalculate_project_end_date()
        self._persist(project)
        domain_events.project_changed.emit(project_id)
        return project


__all__ = ["ProjectScheduleMixin"]
