from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional

from core.models import Project, Task

TIMELINE_PADDING_DAYS = 7


@dataclass
class GanttTaskBar:
    task_id: str
    name: str
    start: date
    end: date
    duration: int
    level: int
    progress: float
    status: str
    priority: str
    parent_task_id: Optional[str] = None
    has_subtasks: bool = False
    start_offset: int = 0

    @property
    def is_summary(self) -> bool:
        return self.has_subtasks


@dataclass
class GanttTimeline:
    start: date
    end: date
    project_duration: int = 0
    bars: List[GanttTaskBar] = field(default_factory=list)


def _span(task: Task) -> tuple[date, date]:
    """Own dates widened to cover every descendant that has dates."""
    start, end = task.start_date, task.end_date
    stack = list(task.subtasks)
    while stack:
        child = stack.pop()
        if child.start_date and child.end_date:
            start = min(start, child.start_date)
            end = max(end, child.end_date)
        stack.extend(child.subtasks)
    return start, end


def build_gantt_data(project: Project) -> GanttTimeline:
    """
    Lay out a project's task tree as Gantt bars.

    Summary bars span their children; siblings are ordered by start date and
    every child follows its parent. Tasks without both dates are left out.
    The timeline is padded by a week on either side.
    """
    dated = [t for t in project.iter_tasks() if t.start_date and t.end_date]
    if not dated:
        today = date.today()
        return GanttTimeline(start=today, end=today)

    project_start = min(t.start_date for t in dated)
    project_end = max(t.end_date for t in dated)
    padded_start = project_start - timedelta(days=TIMELINE_PADDING_DAYS)
    padded_end = project_end + timedelta(days=TIMELINE_PADDING_DAYS)

    spans: Dict[str, tuple[date, date]] = {t.id: _span(t) for t in dated}

    def ordered(tasks: List[Task]) -> List[Task]:
        return sorted((t for t in tasks if t.id in spans), key=lambda t: spans[t.id][0])

    bars: List[GanttTaskBar] = []
    stack = list(reversed(ordered(project.tasks)))
    while stack:
        task = stack.pop()
        start, end = spans[task.id]
        bars.append(
            GanttTaskBar(
                task_id=task.id,
                name=task.title,
                start=start,
                end=end,
                duration=(end - start).days + 1,
                level=task.level,
                progress=task.progress,
                status=task.status.value,
                priority=task.priority.value,
                parent_task_id=task.parent_task_id,
                has_subtasks=bool(task.subtasks),
                start_offset=(start - padded_start).days,
            )
        )
        stack.extend(reversed(ordered(task.subtasks)))

    return GanttTimeline(
        start=padded_start,
        end=padded_end,
        project_duration=(project_end - project_start).days,
        bars=bars,
    )


__all__ = ["GanttTaskBar", "GanttTimeline", "build_gantt_data", "TIMELINE_PADDING_DAYS"]
