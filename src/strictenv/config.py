from __future__ import annotations

"""
Schema configuration for env validation.

A YAML document maps onto the typed dataclasses below. Unknown keys are
rejected at every level so that typos in a schema surface immediately.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

try:
    import yaml
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise RuntimeError(
        "PyYAML is required to load schema files. "
        "Install with `pip install pyyaml`."
    ) from exc

from .validation import SUPPORTED_TYPES, FieldValidator, SchemaValidator


def _require_keys(source: Dict[str, Any], allowed: Iterable[str], section: str) -> None:
    unknown = set(source) - set(allowed)
    if unknown:
        raise ValueError(f"Unknown keys in {section}: {sorted(unknown)}")


def _optional_float(value: Any, name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number") from exc


def _optional_int(value: Any, name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if parsed < 0:
        raise ValueError(f"{name} must be non-negative")
    return parsed


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str = "string"
    required: bool = True
    choices: Optional[List[str]] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @classmethod
    def from_dict(cls, name: str, payload: Optional[Dict[str, Any]]) -> "FieldSpec":
        payload = payload or {}
        if not isinstance(payload, dict):
            raise ValueError(f"fields.{name} must be a mapping")
        section = f"fields.{name}"
        _require_keys(
            payload,
            ("type", "required", "choices", "pattern", "min_length", "max_length", "minimum", "maximum"),
            section,
        )
        kind = str(payload.get("type", "string")).lower()
        if kind not in SUPPORTED_TYPES:
            raise ValueError(f"{section}.type must be one of {list(SUPPORTED_TYPES)}")
        choices = payload.get("choices")
        if choices is not None:
            if not isinstance(choices, list) or not choices:
                raise ValueError(f"{section}.choices must be a non-empty list")
            choices = [str(c) for c in choices]
        pattern = payload.get("pattern")
        return cls(
            name=name,
            kind=kind,
            required=bool(payload.get("required", True)),
            choices=choices,
            pattern=str(pattern) if pattern is not None else None,
            min_length=_optional_int(payload.get("min_length"), f"{section}.min_length"),
            max_length=_optional_int(payload.get("max_length"), f"{section}.max_length"),
            minimum=_optional_float(payload.get("minimum"), f"{section}.minimum"),
            maximum=_optional_float(payload.get("maximum"), f"{section}.maximum"),
        )

    def to_validator(self) -> FieldValidator:
        return FieldValidator(
            kind=self.kind,
            required=self.required,
            choices=tuple(self.choices) if self.choices is not None else None,
            pattern=self.pattern,
            min_length=self.min_length,
            max_length=self.max_length,
            minimum=self.minimum,
            maximum=self.maximum,
        )


@dataclass(frozen=True)
class SchemaConfig:
    fields: List[FieldSpec] = field(default_factory=list)
    allow_unknown: bool = True

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SchemaConfig":
        _require_keys(payload, ("fields", "allow_unknown"), "schema")
        raw_fields = payload.get("fields") or {}
        if not isinstance(raw_fields, dict):
            raise ValueError("schema.fields must be a mapping of key to field options")
        fields = [FieldSpec.from_dict(str(name), opts) for name, opts in raw_fields.items()]
        return cls(fields=fields, allow_unknown=bool(payload.get("allow_unknown", True)))

    def to_validator(self) -> SchemaValidator:
        return SchemaValidator(
            fields={spec.name: spec.to_validator() for spec in self.fields},
            allow_unknown=self.allow_unknown,
        )


def load_schema(path: Path | str) -> SchemaConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        try:
            payload = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Schema root must be a mapping/object")
    return SchemaConfig.from_dict(payload)
