from .service import ProjectService
from .validation import ValidationOutcome, validate_project

__all__ = ["ProjectService", "ValidationOutcome", "validate_project"]
