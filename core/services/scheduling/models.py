from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class ValidationReport:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    days_difference: int = 0
    affected_tasks: int = 0

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "daysDifference": self.days_difference,
            "affectedTasks": self.affected_tasks,
        }


@dataclass
class FailedTask:
    task_id: str
    task_title: str
    error: str

    def to_dict(self) -> dict:
        return {"taskId": self.task_id, "taskTitle": self.task_title, "error": self.error}


@dataclass
class AdjustmentReport:
    success: bool = True
    adjusted_tasks: int = 0
    failed_tasks: List[FailedTask] = field(default_factory=list)
    days_difference: int = 0
    is_moving_forward: bool = True

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "adjustedTasks": self.adjusted_tasks,
            "failedTasks": [failed.to_dict() for failed in self.failed_tasks],
            "daysDifference": self.days_difference,
            "isMovingForward": self.is_moving_forward,
        }


@dataclass
class ScheduleProposal:
    """Staged start/end for one task, written only when the whole batch succeeds."""

    task_id: str
    new_start: Optional[date]
    new_end: Optional[date]


__all__ = ["ValidationReport", "FailedTask", "AdjustmentReport", "ScheduleProposal"]
