"""Change notifications for projects and their task trees."""
from __future__ import annotations

from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.project_changed: Signal[str] = Signal("project_changed")   # project_id
        self.project_deleted: Signal[str] = Signal("project_deleted")   # project_id
        self.tasks_changed: Signal[str] = Signal("tasks_changed")       # project_id


# SINGLE global instance
domain_events = DomainEvents()
