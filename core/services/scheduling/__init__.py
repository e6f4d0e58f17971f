from .adjustment import (
    adjust_project_dates,
    compute_shift,
    propose_task_schedule,
    recalculate_project_end_date,
    validate_date_adjustment,
)
from .models import AdjustmentReport, FailedTask, ScheduleProposal, ValidationReport

__all__ = [
    "adjust_project_dates",
    "compute_shift",
    "propose_task_schedule",
    "recalculate_project_end_date",
    "validate_date_adjustment",
    "AdjustmentReport",
    "FailedTask",
    "ScheduleProposal",
    "ValidationReport",
]
