from infra.db.project.repository import (
    DEFAULT_SETTINGS,
    PROJECTS_KEY,
    SETTINGS_KEY,
    StoredProjectRepository,
    StoredSettingsRepository,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "PROJECTS_KEY",
    "SETTINGS_KEY",
    "StoredProjectRepository",
    "StoredSettingsRepository",
]
