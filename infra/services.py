from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.project import ProjectService
from core.services.work_calendar import WorkCalendarEngine, default_engine
from infra.db.project import StoredProjectRepository, StoredSettingsRepository
from infra.db.store import SqlAlchemyKeyValueStore


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    store: SqlAlchemyKeyValueStore
    settings_repo: StoredSettingsRepository
    project_service: ProjectService
    work_calendar_engine: WorkCalendarEngine

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "store": self.store,
            "settings_repo": self.settings_repo,
            "project_service": self.project_service,
            "work_calendar_engine": self.work_calendar_engine,
        }


def build_service_graph(session: Session) -> ServiceGraph:
    store = SqlAlchemyKeyValueStore(session)
    project_repo = StoredProjectRepository(store)
    settings_repo = StoredSettingsRepository(store)

    project_service = ProjectService(session, project_repo, settings_repo)

    return ServiceGraph(
        session=session,
        store=store,
        settings_repo=settings_repo,
        project_service=project_service,
        work_calendar_engine=default_engine,
    )


def build_service_dict(session: Session) -> dict[str, Any]:
    return build_service_graph(session).as_dict()
