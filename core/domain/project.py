from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterator, List, Optional

from core.domain.enums import ProjectStatus, coerce_enum
from core.domain.identifiers import generate_id
from core.domain.task import Task, iter_task_tree
from core.services.scheduling import adjustment
from core.services.scheduling.models import AdjustmentReport, ValidationReport
from core.services.work_calendar.dates import (
    coerce_date,
    coerce_timestamp,
    format_timestamp,
    parse_optional_date,
    utc_now,
)


@dataclass
class Project:
    id: str = ""
    name: str = ""
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    team_members: List[dict] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.id:
            self.id = generate_id("project")
        self.start_date = coerce_date(self.start_date) if self.start_date is not None else date.today()
        self.end_date = parse_optional_date(self.end_date)
        self.status = coerce_enum(ProjectStatus, self.status, ProjectStatus.ACTIVE)

    @staticmethod
    def create(name: str, description: str = "", **extra) -> "Project":
        return Project(id=generate_id("project"), name=name, description=description, **extra)

    def iter_tasks(self) -> Iterator[Task]:
        return iter_task_tree(self.tasks)

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((task for task in self.iter_tasks() if task.id == task_id), None)

    # ---------- scheduling ----------

    def validate_date_adjustment(self, new_start_date: Any) -> ValidationReport:
        """Dry run of ``adjust_project_dates``: reports errors and warnings, mutates nothing."""
        return adjustment.validate_date_adjustment(self, new_start_date)

    def adjust_project_dates(self, new_start_date: Any) -> AdjustmentReport:
        """
        Move the project to ``new_start_date`` and shift every task by the same
        working-day delta, keeping each task's duration.

        Raises ``MissingInputError``/``InvalidDateError`` for a bad anchor and
        ``ScheduleAdjustmentError`` when any task cannot be moved; in both
        cases neither the project nor its tasks are modified.
        """
        return adjustment.adjust_project_dates(self, new_start_date)

    def recalculate_project_end_date(self) -> Optional[date]:
        return adjustment.recalculate_project_end_date(self)

    # ---------- projection ----------

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "status": self.status.value,
            "teamMembers": list(self.team_members),
            "tasks": [task.to_dict() for task in self.tasks],
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @staticmethod
    def from_dict(data: dict) -> "Project":
        return Project(
            id=data.get("id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            start_date=parse_optional_date(data.get("startDate"), "Project start date"),
            end_date=parse_optional_date(data.get("endDate"), "Project end date"),
            status=data.get("status"),
            team_members=list(data.get("teamMembers") or []),
            tasks=[Task.from_dict(task) for task in data.get("tasks") or []],
            created_at=coerce_timestamp(data.get("createdAt")),
            updated_at=coerce_timestamp(data.get("updatedAt")),
        )


__all__ = ["Project"]
