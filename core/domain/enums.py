from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskType(str, Enum):
    SIMPLE = "simple"
    WITH_DELIVERABLE = "with_deliverable"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def coerce_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value or default.value)
    except ValueError:
        logger.warning("Unknown %s %r, using %s", enum_cls.__name__, value, default.value)
        return default


__all__ = ["ProjectStatus", "TaskStatus", "TaskType", "TaskPriority", "coerce_enum"]
