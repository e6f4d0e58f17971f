# core/services/work_calendar/engine.py
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional, Set

from core.domain.calendar import WorkingCalendar
from core.exceptions import (
    InvalidArgumentError,
    InvalidDateError,
    InvalidRangeError,
    ValidationError,
)
from core.services.work_calendar.dates import coerce_date

_ONE_DAY = timedelta(days=1)


def _check_day_count(days: Any) -> int:
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidArgumentError(f"Days must be an integer, got {days!r}")
    if days < 0:
        raise InvalidArgumentError("Days must be a non-negative number")
    return days


def _step(current: date, delta: timedelta) -> date:
    # date arithmetic stops at year 1 and year 9999
    try:
        return current + delta
    except OverflowError:
        raise InvalidDateError("Calculated date is out of range") from None


class WorkCalendarEngine:
    """
    Working-day arithmetic over a single weekly calendar.

    Every operation walks one calendar day at a time instead of using a
    closed-form formula, so the results stay correct for any working-day set.
    """

    def __init__(self, calendar: Optional[WorkingCalendar] = None):
        self._calendar: WorkingCalendar = calendar or WorkingCalendar.create_default()

    @property
    def working_days(self) -> Set[int]:
        return self._calendar.working_days

    def is_working_day(self, d: Any) -> bool:
        return coerce_date(d).weekday() in self._calendar.working_days

    def next_working_day(self, d: Any, include_today: bool = True) -> date:
        current = coerce_date(d)
        if not include_today:
            current = _step(current, _ONE_DAY)
        while not self.is_working_day(current):
            current = _step(current, _ONE_DAY)
        return current

    def calculate_working_days(self, start: Any, end: Any) -> int:
        """Inclusive count of working days in ``[start, end]``."""
        start_d = coerce_date(start, "Start date")
        end_d = coerce_date(end, "End date")
        if start_d > end_d:
            raise InvalidRangeError(f"Start date {start_d} cannot be after end date {end_d}")

        count = 0
        for offset in range((end_d - start_d).days + 1):
            if self.is_working_day(start_d + timedelta(days=offset)):
                count += 1
        return count

    def add_working_days(self, start: Any, days: int) -> date:
        """Advance by ``days`` working days; ``start`` itself is not counted."""
        current = coerce_date(start, "Start date")
        remaining = _check_day_count(days)
        while remaining > 0:
            current = _step(current, _ONE_DAY)
            if self.is_working_day(current):
                remaining -= 1
        return current

    def subtract_working_days(self, end: Any, days: int) -> date:
        """Walk back ``days`` working days; ``end`` itself is not counted."""
        current = coerce_date(end, "End date")
        remaining = _check_day_count(days)
        while remaining > 0:
            current = _step(current, -_ONE_DAY)
            if self.is_working_day(current):
                remaining -= 1
        return current

    def working_day_offset(self, start: Any, end: Any) -> int:
        """
        Displacement in working days from ``start`` to ``end``.

        The inclusive count also counts ``start`` when it is a working day;
        the offset does not, so ``working_day_offset(s, add_working_days(s, n)) == n``.
        """
        count = self.calculate_working_days(start, end)
        if self.is_working_day(start):
            count -= 1
        return count

    def span_end(self, start: Any, duration: int) -> date:
        """End date of an inclusive span of ``duration`` working days starting at ``start``."""
        start_d = coerce_date(start, "Start date")
        duration = _check_day_count(duration)
        offset = duration - 1 if self.is_working_day(start_d) else duration
        return self.add_working_days(start_d, max(0, offset))

    def span_start(self, end: Any, duration: int) -> date:
        """Start date of an inclusive span of ``duration`` working days ending at ``end``."""
        end_d = coerce_date(end, "End date")
        duration = _check_day_count(duration)
        offset = duration - 1 if self.is_working_day(end_d) else duration
        return self.subtract_working_days(end_d, max(0, offset))

    @staticmethod
    def validate_date_range(start: Any, end: Any) -> bool:
        try:
            return coerce_date(start) <= coerce_date(end)
        except ValidationError:
            return False


default_engine = WorkCalendarEngine()

is_working_day = default_engine.is_working_day
next_working_day = default_engine.next_working_day
calculate_working_days = default_engine.calculate_working_days
add_working_days = default_engine.add_working_days
subtract_working_days = default_engine.subtract_working_days
working_day_offset = default_engine.working_day_offset
span_end = default_engine.span_end
span_start = default_engine.span_start
validate_date_range = WorkCalendarEngine.validate_date_range


__all__ = [
    "WorkCalendarEngine",
    "default_engine",
    "is_working_day",
    "next_working_day",
    "calculate_working_days",
    "add_working_days",
    "subtract_working_days",
    "working_day_offset",
    "span_end",
    "span_start",
    "validate_date_range",
]
