"""Domain records. The flat re-export lives in ``core.models``."""
