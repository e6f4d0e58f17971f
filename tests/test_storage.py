from datetime import date

import pytest
from sqlalchemy import create_engine, inspect

from core.exceptions import BusinessRuleError, DomainError, NotFoundError
from core.models import Project, Task
from infra.db.models import StorageItemORM
from infra.db.project import DEFAULT_SETTINGS, PROJECTS_KEY, StoredProjectRepository, StoredSettingsRepository
from infra.db.store import SqlAlchemyKeyValueStore
from infra.migrate import run_migrations


def _project(name: str = "Stored") -> Project:
    task = Task(title="Only task", start_date=date(2024, 1, 15), end_date=date(2024, 1, 17))
    return Project(name=name, start_date=date(2024, 1, 15), tasks=[task])


def test_key_value_round_trip(session):
    store = SqlAlchemyKeyValueStore(session)
    assert store.get_item("missing") is None

    store.set_item("pm_settings", {"theme": "dark"})
    store.set_item("pm_settings", {"theme": "light", "language": "en"})
    session.commit()

    assert store.get_item("pm_settings") == {"theme": "light", "language": "en"}
    assert store.keys() == ["pm_settings"]

    store.remove_item("pm_settings")
    store.remove_item("pm_settings")
    session.commit()
    assert store.keys() == []


def test_corrupt_payload_raises(session):
    session.add(StorageItemORM(key="broken", payload="{oops"))
    session.commit()
    with pytest.raises(DomainError) as exc:
        SqlAlchemyKeyValueStore(session).get_item("broken")
    assert exc.value.code == "STORAGE_CORRUPT"


def test_project_repository_crud(session):
    repo = StoredProjectRepository(SqlAlchemyKeyValueStore(session))
    project = _project()

    repo.add(project)
    session.commit()
    with pytest.raises(BusinessRuleError):
        repo.add(project)

    loaded = repo.get(project.id)
    assert loaded.name == "Stored"
    assert loaded.tasks[0].duration == 3

    loaded.name = "Renamed"
    repo.update(loaded)
    assert [p.name for p in repo.list_all()] == ["Renamed"]

    repo.delete(project.id)
    assert repo.get(project.id) is None
    with pytest.raises(NotFoundError):
        repo.update(project)


def test_projects_are_stored_under_one_key(session):
    store = SqlAlchemyKeyValueStore(session)
    repo = StoredProjectRepository(store)
    repo.add(_project("One"))
    repo.add(_project("Two"))
    assert [row["name"] for row in store.get_item(PROJECTS_KEY)] == ["One", "Two"]


def test_settings_defaults_and_merge(session):
    settings = StoredSettingsRepository(SqlAlchemyKeyValueStore(session))
    assert settings.get_settings() == DEFAULT_SETTINGS

    saved = settings.save_settings({"theme": "dark", "maxNestingLevel": 3})
    assert saved["theme"] == "dark"
    assert saved["language"] == "es"
    assert settings.get_settings()["maxNestingLevel"] == 3


def test_migrations_create_storage_table(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'planner.db').as_posix()}"
    run_migrations(db_url)

    engine = create_engine(db_url, future=True)
    try:
        assert "storage_items" in inspect(engine).get_table_names()
    finally:
        engine.dispose()
