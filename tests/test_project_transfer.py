import json
from datetime import date, datetime, timedelta

import pytest

from core.exceptions import ValidationError
from core.models import Project, ProjectStatus, Task
from core.services.transfer import (
    EXPORT_VERSION,
    export_project,
    import_project,
    import_project_safe,
    sanitize_filename,
    validate_project_for_export,
    validate_project_json,
    write_export,
)

MONDAY = date(2024, 1, 15)


def _project() -> Project:
    parent = Task(title="Build", start_date=MONDAY, end_date=date(2024, 1, 19))
    child = Task(
        title="Review",
        start_date=date(2024, 1, 17),
        end_date=date(2024, 1, 18),
        parent_task_id=parent.id,
        level=1,
        deliverable={"type": "file", "description": "Report", "status": "pending"},
    )
    parent.subtasks.append(child)
    return Project(
        name="Launch Plan",
        start_date=MONDAY,
        end_date=date(2024, 2, 1),
        team_members=[{"id": "m1", "name": "Ana", "email": "ana@example.com"}],
        tasks=[parent],
    )


def test_export_contains_metadata_and_tree():
    project = _project()
    data = json.loads(export_project(project))

    assert data["exportVersion"] == EXPORT_VERSION
    assert data["exportedAt"]
    assert data["id"] == project.id
    assert data["startDate"] == "2024-01-15"
    assert data["tasks"][0]["subtasks"][0]["title"] == "Review"


def test_export_writes_calendar_dates_and_utc_timestamps():
    data = json.loads(export_project(_project()))
    task = data["tasks"][0]

    assert date.fromisoformat(task["startDate"]).isoformat() == task["startDate"]
    assert len(task["endDate"]) == len("YYYY-MM-DD")
    for stamp in (data["createdAt"], data["updatedAt"], data["exportedAt"], task["createdAt"]):
        assert datetime.fromisoformat(stamp).utcoffset() == timedelta(0)


def test_export_requires_id_and_name():
    project = _project()
    project.name = "  "
    with pytest.raises(ValidationError):
        export_project(project)


def test_validate_project_for_export():
    project = _project()
    assert validate_project_for_export(project).is_valid is True
    project.team_members.append({"name": "No id"})
    outcome = validate_project_for_export(project)
    assert outcome.is_valid is False
    assert "Team member at index 1 is missing an id" in outcome.errors
    assert validate_project_for_export(None).errors == ["Project is required"]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Launch Plan 2024", "launch-plan-2024"),
        ('a<b>c:"d"/e\\f|g?h*', "a-b-c-d-e-f-g-h"),
        ("  --Spaced   Out--  ", "spaced-out"),
        ("", "project-export"),
        ("???", "project-export"),
        (None, "project-export"),
    ],
)
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


def test_sanitize_filename_truncates():
    assert len(sanitize_filename("x" * 80)) == 50


def test_write_export(tmp_path):
    project = _project()
    path = write_export(project, tmp_path / "exports")
    assert path.name == "launch-plan.json"
    assert json.loads(path.read_text(encoding="utf-8"))["name"] == "Launch Plan"


def test_round_trip_keeps_tree_and_dates():
    original = _project()
    imported = import_project(export_project(original))

    assert imported.id == original.id
    assert imported.start_date == MONDAY
    assert imported.team_members == original.team_members
    parent = imported.tasks[0]
    child = parent.subtasks[0]
    assert child.parent_task_id == parent.id
    assert child.level == 1
    assert child.deliverable["type"] == "file"
    assert {t.project_id for t in imported.iter_tasks()} == {original.id}
    assert [t.duration for t in imported.iter_tasks()] == [5, 2]


def test_import_with_new_start_date_moves_schedule():
    imported = import_project(export_project(_project()), new_start_date="2024-01-22")

    assert imported.start_date == date(2024, 1, 22)
    assert imported.tasks[0].start_date == date(2024, 1, 22)
    assert imported.tasks[0].duration == 5
    assert imported.tasks[0].subtasks[0].start_date == date(2024, 1, 24)


def test_import_rejects_invalid_json():
    with pytest.raises(ValidationError) as exc:
        import_project("{not json")
    assert exc.value.code == "IMPORT_INVALID_JSON"


def test_import_rejects_missing_fields():
    with pytest.raises(ValidationError) as exc:
        import_project(json.dumps({"name": "No id"}))
    assert exc.value.code == "IMPORT_VALIDATION_FAILED"


def test_import_date_adjustment_failure():
    data = json.loads(export_project(_project()))
    data["tasks"].append({"id": "t-undated", "title": "Undated"})
    with pytest.raises(ValidationError) as exc:
        import_project(json.dumps(data), new_start_date=date(2024, 1, 22))
    assert exc.value.code == "IMPORT_DATE_ADJUSTMENT_FAILED"


def test_validate_project_json_collects_errors_and_warnings():
    doc = {
        "id": "p1",
        "name": "Checks",
        "startDate": "2024-01-20",
        "endDate": "2024-01-10",
        "status": "archived",
        "teamMembers": [{"name": ""}],
        "tasks": [
            {
                "id": "t1",
                "title": "",
                "startDate": "bad",
                "priority": "urgent",
                "progress": 150,
                "subtasks": [{"title": "Child without id"}],
            }
        ],
    }
    outcome = validate_project_json(json.dumps(doc))

    assert outcome.is_valid is False
    assert "Project end date must be after start date" in outcome.errors
    assert "Team member at index 0 must have an id" in outcome.errors
    assert "Task at index 0 has invalid start date" in outcome.errors
    assert "Task at index 0.0 must have an id" in outcome.errors
    assert 'Invalid project status "archived", will default to "active"' in outcome.warnings
    assert 'Task at index 0 has invalid priority "urgent"' in outcome.warnings
    assert "Task at index 0 progress should be a number between 0 and 100" in outcome.warnings
    assert "Task at index 0 should have a title" in outcome.warnings


def test_validate_project_json_rejects_non_arrays():
    outcome = validate_project_json(json.dumps({"id": "p", "name": "X", "tasks": {}, "teamMembers": "x"}))
    assert "Tasks must be an array" in outcome.errors
    assert "Team members must be an array" in outcome.errors


def test_unknown_status_defaults_to_active():
    data = json.loads(export_project(_project()))
    data["status"] = "archived"
    assert import_project(json.dumps(data)).status == ProjectStatus.ACTIVE


def test_import_safe_never_raises():
    bad = import_project_safe("[]")
    assert bad.success is False
    assert bad.errors == ["Project data must be a JSON object"]

    checked = import_project_safe(export_project(_project()), validate_only=True)
    assert checked.success is True
    assert checked.project is None

    moved = import_project_safe(export_project(_project()), new_start_date="2024-01-22")
    assert moved.success is True
    assert moved.adjustment.days_difference == 6
    assert moved.to_dict()["project"]["startDate"] == "2024-01-22"
