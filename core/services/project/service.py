from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import ProjectRepository, SettingsRepository
from core.services.hierarchy import DEFAULT_MAX_NESTING_LEVEL
from core.services.project.lifecycle import ProjectLifecycleMixin
from core.services.project.query import ProjectQueryMixin
from core.services.project.schedule import ProjectScheduleMixin


class ProjectService(ProjectLifecycleMixin, ProjectScheduleMixin, ProjectQueryMixin):
    """Project service orchestrator: wiring repositories + composing mixins."""

    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        settings_repo: SettingsRepository | None = None,
    ):
        self._session: Session = session
        self._project_repo: ProjectRepository = project_repo
        self._settings_repo: SettingsRepository | None = settings_repo

    def _max_nesting_level(self) -> int:
        if self._settings_repo is None:
            return DEFAULT_MAX_NESTING_LEVEL
        return int(self._settings_repo.get_settings().get("maxNestingLevel", DEFAULT_MAX_NESTING_LEVEL))


__all__ = ["ProjectService"]
