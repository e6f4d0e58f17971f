from __future__ import annotations

from dataclasses import dataclass, field
from typing import Set


@dataclass
class WorkingCalendar:
    id: str
    name: str = "Default"
    # 0=Monday, 6=Sunday
    working_days: Set[int] = field(default_factory=lambda: {0, 1, 2, 3, 4, 5})

    @staticmethod
    def create_default() -> "WorkingCalendar":
        return WorkingCalendar(id="default", name="Default")


__all__ = ["WorkingCalendar"]
