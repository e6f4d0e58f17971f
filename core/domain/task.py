from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Iterator, List, Optional

from core.domain.enums import TaskPriority, TaskStatus, TaskType, coerce_enum
from core.domain.identifiers import generate_id
from core.exceptions import ValidationError
from core.services.work_calendar.dates import (
    coerce_date,
    coerce_timestamp,
    format_timestamp,
    parse_optional_date,
    utc_now,
)
from core.services.work_calendar.engine import default_engine

logger = logging.getLogger(__name__)


def _date_error_policy() -> str:
    policy = os.getenv("PM_TASK_DATE_ERRORS", "degrade").strip().lower()
    return "raise" if policy == "raise" else "degrade"


@dataclass
class Task:
    id: str = ""
    project_id: str = ""
    parent_task_id: Optional[str] = None
    title: str = ""
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration: Optional[int] = None
    adjust_start_date: bool = False
    status: TaskStatus = TaskStatus.PENDING
    type: TaskType = TaskType.SIMPLE
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[str] = None
    progress: float = 0.0
    deliverable: Optional[dict] = None
    subtasks: List["Task"] = field(default_factory=list)
    level: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.id:
            self.id = generate_id("task")
        if self.start_date is not None:
            self.start_date = self._accept_date(self.start_date, "Start date")
        if self.end_date is not None:
            self.end_date = self._accept_date(self.end_date, "End date")
        self.status = coerce_enum(TaskStatus, self.status, TaskStatus.PENDING)
        self.type = coerce_enum(TaskType, self.type, TaskType.SIMPLE)
        self.priority = coerce_enum(TaskPriority, self.priority, TaskPriority.MEDIUM)
        self.progress = max(0.0, min(100.0, float(self.progress or 0)))
        if self.duration is None:
            self.duration = self.calculate_duration(self.start_date, self.end_date)

    @staticmethod
    def create(
        title: str,
        start_date: Any = None,
        end_date: Any = None,
        duration: Optional[int] = None,
        adjust_start_date: bool = False,
        **extra,
    ) -> "Task":
        """
        Build a task from either two dates or one date plus a duration.

        With a duration, the free endpoint is derived: the end date by
        default, the start date when ``adjust_start_date`` is set and an end
        date is given.
        """
        start = parse_optional_date(start_date, "Start date")
        end = parse_optional_date(end_date, "End date")
        task = Task(
            title=title,
            start_date=start,
            end_date=end,
            duration=duration,
            adjust_start_date=adjust_start_date,
            **extra,
        )
        if duration is not None:
            if adjust_start_date and end is not None:
                task.start_date = task.calculate_start_date(end, duration)
                task._sync_duration()
            elif start is not None:
                task.end_date = task.calculate_end_date(start, duration)
                task._sync_duration()
        return task

    # ---------- degrading helpers ----------

    def calculate_duration(self, start_date: Any, end_date: Any) -> int:
        try:
            return default_engine.calculate_working_days(start_date, end_date)
        except ValidationError as exc:
            logger.warning("Task %s: error calculating duration: %s", self.id, exc)
            if _date_error_policy() == "raise":
                raise
            return 0

    def calculate_end_date(self, start_date: Any, duration: int) -> Optional[date]:
        try:
            return default_engine.span_end(start_date, duration)
        except ValidationError as exc:
            logger.warning("Task %s: error calculating end date: %s", self.id, exc)
            if _date_error_policy() == "raise":
                raise
            return start_date if isinstance(start_date, date) else None

    def calculate_start_date(self, end_date: Any, duration: int) -> Optional[date]:
        try:
            return default_engine.span_start(end_date, duration)
        except ValidationError as exc:
            logger.warning("Task %s: error calculating start date: %s", self.id, exc)
            if _date_error_policy() == "raise":
                raise
            return end_date if isinstance(end_date, date) else None

    # ---------- mutators ----------

    def _touch(self) -> None:
        self.updated_at = utc_now()

    def _sync_duration(self) -> None:
        self.duration = self.calculate_duration(self.start_date, self.end_date)

    def _accept_date(self, value: Any, field_name: str) -> Optional[date]:
        try:
            return coerce_date(value, field_name)
        except ValidationError as exc:
            logger.warning("Task %s: rejected %s %r: %s", self.id, field_name.lower(), value, exc)
            if _date_error_policy() == "raise":
                raise
            return None

    def set_start_date(self, new_start: Any) -> None:
        """Move the start date; the end date stays, the duration follows."""
        accepted = self._accept_date(new_start, "Start date")
        if accepted is not None:
            self.start_date = accepted
        self._sync_duration()
        self._touch()

    def set_end_date(self, new_end: Any) -> None:
        """Move the end date; the start date stays, the duration follows."""
        accepted = self._accept_date(new_end, "End date")
        if accepted is not None:
            self.end_date = accepted
        self._sync_duration()
        self._touch()

    def set_duration(self, new_duration: int) -> None:
        """
        Set the duration and move one endpoint to match it.

        ``adjust_start_date`` False keeps the start date and recomputes the
        end date; True keeps the end date and recomputes the start date.
        """
        self.duration = new_duration
        if self.adjust_start_date:
            self.start_date = self.calculate_start_date(self.end_date, new_duration)
        else:
            self.end_date = self.calculate_end_date(self.start_date, new_duration)
        self._sync_duration()
        self._touch()

    def shift_to(self, new_start: date, new_end: date) -> None:
        """Commit a schedule computed elsewhere; the duration is left as is."""
        self.start_date = new_start
        self.end_date = new_end
        self._touch()

    # ---------- projection ----------

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "parentTaskId": self.parent_task_id,
            "title": self.title,
            "description": self.description,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "status": self.status.value,
            "type": self.type.value,
            "deliverable": self.deliverable,
            "assignedTo": self.assigned_to,
            "priority": self.priority.value,
            "progress": self.progress,
            "subtasks": [sub.to_dict() for sub in self.subtasks],
            "level": self.level,
            "duration": self.duration,
            "adjustStartDate": self.adjust_start_date,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @staticmethod
    def from_dict(data: dict) -> "Task":
        return Task(
            id=data.get("id") or "",
            project_id=data.get("projectId") or "",
            parent_task_id=data.get("parentTaskId"),
            title=data.get("title") or "",
            description=data.get("description") or "",
            start_date=parse_optional_date(data.get("startDate"), "Start date"),
            end_date=parse_optional_date(data.get("endDate"), "End date"),
            duration=data.get("duration"),
            adjust_start_date=bool(data.get("adjustStartDate", False)),
            status=data.get("status"),
            type=data.get("type"),
            priority=data.get("priority"),
            assigned_to=data.get("assignedTo"),
            progress=data.get("progress") or 0,
            deliverable=data.get("deliverable"),
            subtasks=[Task.from_dict(sub) for sub in data.get("subtasks") or []],
            level=int(data.get("level") or 0),
            created_at=coerce_timestamp(data.get("createdAt")),
            updated_at=coerce_timestamp(data.get("updatedAt")),
        )


def iter_task_tree(tasks: Iterable[Task]) -> Iterator[Task]:
    """Pre-order walk over tasks and their nested subtasks, without recursion."""
    stack = list(reversed(list(tasks)))
    while stack:
        task = stack.pop()
        yield task
        stack.extend(reversed(task.subtasks))


__all__ = ["Task", "iter_task_tree"]
