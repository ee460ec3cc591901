from __future__ import annotations

"""
Validation of a parsed env mapping.

Callers hand in either a schema object exposing ``validate(mapping)`` or a
mapping of key to per-value validators exposing ``validate_safely(value)``.
The built-in :class:`SchemaValidator` and :class:`FieldValidator` satisfy both
shapes.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .types import SUPPORTED_TYPES, coerce

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when env values are rejected by a validator."""


@dataclass(frozen=True)
class FieldValidator:
    kind: str = "string"
    required: bool = True
    choices: Optional[Sequence[str]] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind not in SUPPORTED_TYPES:
            raise ValueError(f"Unsupported value type: {self.kind}")

    def validate_safely(self, value: Optional[str]) -> List[str]:
        """Return the list of problems with ``value``; empty when it is acceptable."""
        if value is None:
            return ["value is required"] if self.required else []

        errors: List[str] = []
        if self.choices is not None and value not in self.choices:
            errors.append(f"must be one of {list(self.choices)}, got {value!r}")
        if self.pattern is not None and re.search(self.pattern, value) is None:
            errors.append(f"does not match pattern {self.pattern!r}")
        if self.min_length is not None and len(value) < self.min_length:
            errors.append(f"must be at least {self.min_length} characters long")
        if self.max_length is not None and len(value) > self.max_length:
            errors.append(f"must be at most {self.max_length} characters long")

        try:
            typed = coerce(value, self.kind)
        except ValueError as exc:
            errors.append(str(exc))
            return errors

        if self.kind in ("number", "integer"):
            if self.minimum is not None and typed < self.minimum:
                errors.append(f"must be >= {self.minimum}")
            if self.maximum is not None and typed > self.maximum:
                errors.append(f"must be <= {self.maximum}")
        return errors


@dataclass(frozen=True)
class SchemaValidator:
    fields: Dict[str, FieldValidator] = field(default_factory=dict)
    allow_unknown: bool = True

    def validate(self, mapping: Mapping) -> None:
        for key, validator in self.fields.items():
            errors = validator.validate_safely(mapping.get(key))
            if errors:
                raise ValidationError(f"For key '{key}': {errors[0]}")
        if not self.allow_unknown:
            unknown = [key for key in mapping if key not in self.fields]
            if unknown:
                raise ValidationError(f"Unknown keys in env file: {sorted(unknown)}")


def run_validators(validators: Any, env_map: Mapping) -> None:
    """Check ``env_map`` against ``validators``, raising :class:`ValidationError` on the first failure."""
    if hasattr(validators, "validate") and callable(validators.validate):
        try:
            validators.validate(env_map)
        except ValidationError:
            raise
        except Exception as exc:
            raise ValidationError("Something went wrong, please re-check your validator.") from exc
        return

    if not isinstance(validators, Mapping):
        raise ValidationError("Invalid validator object was passed.")

    for key, validator in validators.items():
        check = getattr(validator, "validate_safely", None)
        if not callable(check):
            raise ValidationError("Invalid validator object was passed.")
        try:
            errors = check(env_map.get(key))
        except Exception as exc:
            raise ValidationError("Something went wrong, please re-check your validator.") from exc
        if errors:
            logger.debug("Validator for %s reported %d error(s)", key, len(errors))
            raise ValidationError(f"For key '{key}': {errors[0]}")
