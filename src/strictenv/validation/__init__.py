from .types import SUPPORTED_TYPES, coerce
from .validators import FieldValidator, SchemaValidator, ValidationError, run_validators

__all__ = [
    "SUPPORTED_TYPES",
    "coerce",
    "FieldValidator",
    "SchemaValidator",
    "ValidationError",
    "run_validators",
]
