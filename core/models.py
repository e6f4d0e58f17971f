from __future__ import annotations

from core.domain.calendar import WorkingCalendar
from core.domain.enums import ProjectStatus, TaskPriority, TaskStatus, TaskType
from core.domain.identifiers import generate_id
from core.domain.project import Project
from core.domain.task import Task, iter_task_tree

__all__ = [
    "generate_id",
    "ProjectStatus",
    "TaskStatus",
    "TaskType",
    "TaskPriority",
    "WorkingCalendar",
    "Project",
    "Task",
    "iter_task_tree",
]
