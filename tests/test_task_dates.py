from datetime import date

import pytest

from core.exceptions import InvalidDateError, InvalidRangeError
from core.models import Task, TaskPriority, TaskStatus
from core.services.work_calendar import calculate_working_days

MONDAY = date(2024, 1, 15)


def _task(**kwargs) -> Task:
    defaults = dict(title="Design", start_date=MONDAY, end_date=date(2024, 1, 19))
    defaults.update(kwargs)
    return Task(**defaults)


def test_duration_is_derived_from_dates():
    task = _task()
    assert task.duration == 5
    assert task.id.startswith("task_")


def test_set_duration_moves_end_date():
    task = _task()
    task.set_duration(3)
    assert task.start_date == MONDAY
    assert task.end_date == date(2024, 1, 17)
    assert task.duration == 3


def test_set_duration_moves_start_date_when_flag_set():
    task = _task(adjust_start_date=True)
    task.set_duration(2)
    assert task.end_date == date(2024, 1, 19)
    assert task.start_date == date(2024, 1, 18)
    assert task.duration == 2


def test_set_duration_crossing_sunday():
    task = _task(start_date=date(2024, 1, 19), end_date=date(2024, 1, 19))
    task.set_duration(3)
    assert task.end_date == date(2024, 1, 22)
    assert task.duration == 3


def test_set_start_and_end_keep_invariant():
    task = _task()
    task.set_start_date(date(2024, 1, 17))
    assert task.duration == calculate_working_days(task.start_date, task.end_date) == 3

    task.set_end_date("2024-01-23")
    assert task.end_date == date(2024, 1, 23)
    assert task.duration == calculate_working_days(task.start_date, task.end_date) == 6


def test_inverted_range_degrades_to_zero_duration():
    task = _task()
    task.set_end_date(date(2024, 1, 10))
    assert task.end_date == date(2024, 1, 10)
    assert task.duration == 0


def test_invalid_date_is_ignored_by_setter():
    task = _task()
    task.set_start_date("31/02/2024")
    assert task.start_date == MONDAY
    assert task.duration == 5


def test_raise_policy_propagates_errors(monkeypatch):
    monkeypatch.setenv("PM_TASK_DATE_ERRORS", "raise")
    task = _task()
    with pytest.raises(InvalidDateError):
        task.set_start_date("nope")
    with pytest.raises(InvalidRangeError):
        task.set_end_date(date(2024, 1, 10))


def test_duration_zero_on_working_day_becomes_one():
    task = _task()
    task.set_duration(0)
    assert task.end_date == MONDAY
    assert task.duration == 1


def test_set_duration_past_year_9999_keeps_the_end_on_the_start():
    last_week = date(9999, 12, 20)
    task = _task(start_date=last_week, end_date=last_week)

    task.set_duration(50)

    assert task.start_date == last_week
    assert task.end_date == last_week
    assert task.duration == calculate_working_days(last_week, last_week)


def test_raise_policy_reports_out_of_range_end_date(monkeypatch):
    monkeypatch.setenv("PM_TASK_DATE_ERRORS", "raise")
    task = _task(start_date=date(9999, 12, 20), end_date=date(9999, 12, 20))
    with pytest.raises(InvalidDateError):
        task.set_duration(50)


def test_set_duration_without_start_date_degrades():
    task = Task(title="Undated")
    task.set_duration(4)
    assert task.start_date is None
    assert task.end_date is None
    assert task.duration == 0


def test_create_with_start_and_duration():
    task = Task.create("Build", start_date="2024-01-15", duration=3)
    assert task.end_date == date(2024, 1, 17)
    assert task.duration == 3


def test_create_with_end_and_duration_backwards():
    task = Task.create("Build", end_date=date(2024, 1, 22), duration=2, adjust_start_date=True)
    assert task.start_date == date(2024, 1, 20)
    assert task.duration == 2


def test_enum_fields_fall_back_to_defaults():
    task = _task(status="bogus", priority="urgent")
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.MEDIUM


def test_progress_is_clamped():
    assert _task(progress=140).progress == 100.0
    assert _task(progress=-3).progress == 0.0


def test_shift_to_keeps_duration():
    task = _task()
    task.shift_to(date(2024, 1, 22), date(2024, 1, 26))
    assert task.start_date == date(2024, 1, 22)
    assert task.end_date == date(2024, 1, 26)
    assert task.duration == 5


def test_dict_round_trip_keeps_nested_subtasks():
    parent = _task(title="Parent")
    child = _task(title="Child", parent_task_id=parent.id, level=1)
    parent.subtasks.append(child)

    data = parent.to_dict()
    assert data["startDate"] == "2024-01-15"
    assert data["subtasks"][0]["parentTaskId"] == parent.id

    restored = Task.from_dict(data)
    assert restored.id == parent.id
    assert restored.duration == 5
    assert restored.subtasks[0].title == "Child"
    assert restored.subtasks[0].level == 1
