from .dates import coerce_date, parse_optional_date
from .engine import (
    WorkCalendarEngine,
    add_working_days,
    calculate_working_days,
    default_engine,
    is_working_day,
    next_working_day,
    subtract_working_days,
    validate_date_range,
    working_day_offset,
)

__all__ = [
    "WorkCalendarEngine",
    "default_engine",
    "coerce_date",
    "parse_optional_date",
    "is_working_day",
    "next_working_day",
    "calculate_working_days",
    "add_working_days",
    "subtract_working_days",
    "validate_date_range",
    "working_day_offset",
]
