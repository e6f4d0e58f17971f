from datetime import date

from core.models import Project, Task
from core.services.project import validate_project

MONDAY = date(2024, 1, 15)


def test_valid_project_passes():
    project = Project(name="Valid", start_date=MONDAY, tasks=[Task(title="A", start_date=MONDAY, end_date=MONDAY)])
    outcome = validate_project(project)
    assert outcome.is_valid is True
    assert outcome.to_dict() == {"isValid": True, "errors": [], "warnings": []}


def test_field_rules():
    deep = Task(title="Deep", start_date=MONDAY, end_date=MONDAY, level=4)
    untitled = Task(title="", start_date=MONDAY, end_date=MONDAY)
    undated = Task(title="Undated")
    project = Project(name=" ", start_date=MONDAY, end_date=date(2024, 1, 1), tasks=[deep, untitled, undated])

    outcome = validate_project(project, max_nesting_level=3)

    assert outcome.is_valid is False
    assert "Project must have a name" in outcome.errors
    assert "Project end date must be after start date" in outcome.errors
    assert 'Task "Deep" exceeds the maximum nesting level of 3' in outcome.errors
    assert 'Task "Undated" must have a start and an end date' in outcome.errors
    assert "Task at index 1 is missing a title" in outcome.warnings
