from .export_service import (
    EXPORT_VERSION,
    export_project,
    sanitize_filename,
    validate_project_for_export,
    write_export,
)
from .import_service import ImportResult, import_project, import_project_safe, validate_project_json

__all__ = [
    "EXPORT_VERSION",
    "export_project",
    "sanitize_filename",
    "validate_project_for_export",
    "write_export",
    "ImportResult",
    "import_project",
    "import_project_safe",
    "validate_project_json",
]
