import json
import logging
from datetime import date

import matplotlib
import pytest

matplotlib.use("Agg")

import main as cli  # noqa: E402
from core.models import Project, Task  # noqa: E402
from core.services.transfer import export_project  # noqa: E402
from infra.logging_config import setup_logging  # noqa: E402


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda: None)
    return f"sqlite:///{(tmp_path / 'cli.db').as_posix()}"


@pytest.fixture
def export_file(tmp_path):
    task = Task(title="Design", start_date=date(2024, 1, 15), end_date=date(2024, 1, 17))
    project = Project(id="project_cli", name="CLI Project", start_date=date(2024, 1, 15), tasks=[task])
    path = tmp_path / "in.json"
    path.write_text(export_project(project), encoding="utf-8")
    return path


def test_import_list_adjust_export(db_url, export_file, tmp_path, capsys):
    assert cli.main(["--db-url", db_url, "import", str(export_file)]) == 0
    assert capsys.readouterr().out.strip() == "project_cli"

    assert cli.main(["--db-url", db_url, "list"]) == 0
    assert "CLI Project\t2024-01-15" in capsys.readouterr().out

    assert cli.main(["--db-url", db_url, "adjust", "project_cli", "2024-01-22"]) == 0
    assert "6 working days forward" in capsys.readouterr().out

    assert cli.main(["--db-url", db_url, "export", "project_cli", "--out-dir", str(tmp_path / "out")]) == 0
    written = tmp_path / "out" / "cli-project.json"
    assert json.loads(written.read_text(encoding="utf-8"))["startDate"] == "2024-01-22"


def test_unknown_project_exits_with_error(db_url, capsys):
    assert cli.main(["--db-url", db_url, "export", "missing"]) == 1
    assert "Project not found" in capsys.readouterr().err


def test_import_check_only(db_url, export_file, capsys):
    assert cli.main(["--db-url", db_url, "import", str(export_file), "--check"]) == 0
    assert cli.main(["--db-url", db_url, "list"]) == 0
    assert capsys.readouterr().out == ""


def test_setup_logging_writes_rotating_file(tmp_path, monkeypatch):
    monkeypatch.setenv("PM_LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(tmp_path / "logs")
        assert root.level == logging.DEBUG
        logging.getLogger("planner.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
