from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from core.models import Project


class KeyValueStore(ABC):
    """Whole-collection storage: each key holds one JSON-compatible value."""

    @abstractmethod
    def get_item(self, key: str) -> Any: ...

    @abstractmethod
    def set_item(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...

    @abstractmethod
    def keys(self) -> List[str]: ...


class ProjectRepository(ABC):
    @abstractmethod
    def add(self, project: Project) -> None: ...

    @abstractmethod
    def update(self, project: Project) -> None: ...

    @abstractmethod
    def delete(self, project_id: str) -> None: ...

    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def list_all(self) -> List[Project]: ...


class SettingsRepository(ABC):
    @abstractmethod
    def get_settings(self) -> dict: ...

    @abstractmethod
    def save_settings(self, settings: dict) -> dict: ...


__all__ = ["KeyValueStore", "ProjectRepository", "SettingsRepository"]
