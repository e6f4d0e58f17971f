from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from core.domain.task import Task, iter_task_tree
from core.exceptions import (
    DomainError,
    InvalidDateError,
    InvalidRangeError,
    MissingInputError,
    ScheduleAdjustmentError,
    ValidationError,
)
from core.services.scheduling.models import (
    AdjustmentReport,
    FailedTask,
    ScheduleProposal,
    ValidationReport,
)
from core.services.work_calendar.dates import coerce_date, utc_now
from core.services.work_calendar.engine import WorkCalendarEngine, default_engine

if TYPE_CHECKING:
    from core.domain.project import Project

logger = logging.getLogger(__name__)

TASK_FAILURES = (DomainError, TypeError, ValueError)


def resolve_new_start(new_start_date: Any) -> date:
    if new_start_date is None or new_start_date == "":
        raise MissingInputError("New start date is required")
    try:
        return coerce_date(new_start_date, "New start date")
    except ValidationError:
        raise InvalidDateError("Invalid start date provided") from None


def compute_shift(
    current_start: Any,
    new_start: date,
    calendar: WorkCalendarEngine = default_engine,
) -> Tuple[bool, int]:
    """
    Direction and size of a project move, in working days.

    The size is a displacement (never negative): shifting a working day by it
    with ``add_working_days``/``subtract_working_days`` lands on the other anchor.
    """
    current = coerce_date(current_start, "Project start date")
    is_moving_forward = new_start >= current
    if is_moving_forward:
        days = calendar.working_day_offset(current, new_start)
    else:
        days = calendar.working_day_offset(new_start, current)
    return is_moving_forward, days


def propose_task_schedule(
    task: Task,
    days: int,
    is_moving_forward: bool,
    calendar: WorkCalendarEngine = default_engine,
) -> ScheduleProposal:
    """Shift one task's start and rebuild its end from its own duration, without mutating it."""
    start = coerce_date(task.start_date, "Task start date")
    if is_moving_forward:
        new_start = calendar.add_working_days(start, days)
    else:
        new_start = calendar.subtract_working_days(start, days)
    new_end = calendar.span_end(new_start, task.duration)
    # a zero-duration task landing on a working day would span one day
    span = calendar.calculate_working_days(new_start, new_end)
    if span != task.duration:
        raise InvalidRangeError(
            f"Shifted dates {new_start} to {new_end} span {span} working days, "
            f"task duration is {task.duration}"
        )
    return ScheduleProposal(task_id=task.id, new_start=new_start, new_end=new_end)


def validate_date_adjustment(
    project: "Project",
    new_start_date: Any,
    calendar: WorkCalendarEngine = default_engine,
) -> ValidationReport:
    tasks = list(iter_task_tree(project.tasks))
    report = ValidationReport(affected_tasks=len(tasks))

    try:
        new_start = resolve_new_start(new_start_date)
    except ValidationError as exc:
        report.add_error(str(exc))
        return report

    if project.end_date and not calendar.validate_date_range(new_start, project.end_date):
        report.warnings.append("New start date is after project end date")
    if not calendar.is_working_day(new_start):
        report.warnings.append("New start date falls on a non-working day (Sunday)")

    try:
        is_moving_forward, days = compute_shift(project.start_date, new_start, calendar)
    except ValidationError as exc:
        report.add_error(f"Error calculating date difference: {exc}")
        return report
    report.days_difference = days

    for task in tasks:
        try:
            propose_task_schedule(task, days, is_moving_forward, calendar)
        except TASK_FAILURES as exc:
            report.add_error(f'Task "{task.title}" cannot be adjusted: {exc}')

    return report


def adjust_project_dates(
    project: "Project",
    new_start_date: Any,
    calendar: WorkCalendarEngine = default_engine,
) -> AdjustmentReport:
    """
    Move the project anchor and shift every task by the same working-day delta.

    Runs in two phases: all task schedules are staged first, and nothing is
    written unless every task could be staged.
    """
    new_start = resolve_new_start(new_start_date)

    if project.end_date and not calendar.validate_date_range(new_start, project.end_date):
        logger.warning("Project %s: new start date %s is after project end date", project.id, new_start)

    try:
        is_moving_forward, days = compute_shift(project.start_date, new_start, calendar)
    except ValidationError as exc:
        raise ValidationError(
            f"Error calculating date difference: {exc}", code="DATE_DIFFERENCE_FAILED"
        ) from exc

    report = AdjustmentReport(days_difference=days, is_moving_forward=is_moving_forward)
    tasks = list(iter_task_tree(project.tasks))

    staged: List[Tuple[Task, ScheduleProposal]] = []
    for task in tasks:
        try:
            staged.append((task, propose_task_schedule(task, days, is_moving_forward, calendar)))
        except TASK_FAILURES as exc:
            logger.warning("Error adjusting dates for task %s: %s", task.id, exc)
            report.failed_tasks.append(FailedTask(task_id=task.id, task_title=task.title, error=str(exc)))

    if report.failed_tasks:
        report.success = False
        raise ScheduleAdjustmentError(
            f"Failed to adjust {len(report.failed_tasks)} tasks. Project dates not updated.",
            report,
        )

    for task, proposal in staged:
        task.shift_to(proposal.new_start, proposal.new_end)
        report.adjusted_tasks += 1

    project.start_date = new_start
    project.updated_at = utc_now()
    logger.info(
        "Project %s moved %s by %s working days (%s tasks)",
        project.id,
        "forward" if is_moving_forward else "backward",
        days,
        report.adjusted_tasks,
    )
    return report


def recalculate_project_end_date(project: "Project") -> Optional[date]:
    end_dates = [task.end_date for task in iter_task_tree(project.tasks) if task.end_date is not None]
    if not end_dates:
        return project.end_date
    project.end_date = max(end_dates)
    project.updated_at = utc_now()
    return project.end_date


__all__ = [
    "resolve_new_start",
    "compute_shift",
    "propose_task_schedule",
    "validate_date_adjustment",
    "adjust_project_dates",
    "recalculate_project_end_date",
]
