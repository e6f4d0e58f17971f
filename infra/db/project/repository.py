from __future__ import annotations

from typing import List, Optional

from core.exceptions import BusinessRuleError, NotFoundError
from core.interfaces import KeyValueStore, ProjectRepository, SettingsRepository
from core.models import Project

PROJECTS_KEY = "pm_projects"
SETTINGS_KEY = "pm_settings"

DEFAULT_SETTINGS = {
    "maxNestingLevel": 100,
    "defaultView": "projects",
    "theme": "light",
    "language": "es",
}


class StoredProjectRepository(ProjectRepository):
    """Projects kept as one JSON collection; every call reads or rewrites it whole."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self) -> List[dict]:
        return list(self.store.get_item(PROJECTS_KEY) or [])

    def _save(self, rows: List[dict]) -> None:
        self.store.set_item(PROJECTS_KEY, rows)

    def add(self, project: Project) -> None:
        rows = self._load()
        if any(row.get("id") == project.id for row in rows):
            raise BusinessRuleError("Project already exists.", code="PROJECT_DUPLICATE_ID")
        rows.append(project.to_dict())
        self._save(rows)

    def update(self, project: Project) -> None:
        rows = self._load()
        for index, row in enumerate(rows):
            if row.get("id") == project.id:
                rows[index] = project.to_dict()
                self._save(rows)
                return
        raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")

    def delete(self, project_id: str) -> None:
        rows = self._load()
        self._save([row for row in rows if row.get("id") != project_id])

    def get(self, project_id: str) -> Optional[Project]:
        row = next((row for row in self._load() if row.get("id") == project_id), None)
        return Project.from_dict(row) if row else None

    def list_all(self) -> List[Project]:
        return [Project.from_dict(row) for row in self._load()]


class StoredSettingsRepository(SettingsRepository):
    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_settings(self) -> dict:
        return {**DEFAULT_SETTINGS, **(self.store.get_item(SETTINGS_KEY) or {})}

    def save_settings(self, settings: dict) -> dict:
        merged = {**self.get_settings(), **settings}
        self.store.set_item(SETTINGS_KEY, merged)
        return merged
