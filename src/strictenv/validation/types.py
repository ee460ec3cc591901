from __future__ import annotations

import json
from datetime import date
from typing import Any, Callable, Dict

import pandas as pd

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _to_date(value: str) -> date:
    ts = pd.to_datetime(value, utc=False, errors="raise")
    return ts.date()


def _to_json(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"expected JSON, got {value!r}") from exc


def _to_array(value: str) -> list:
    payload = _to_json(value)
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {value!r}")
    return payload


def _to_object(value: str) -> dict:
    payload = _to_json(value)
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {value!r}")
    return payload


_CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "string": str,
    "number": float,
    "integer": int,
    "boolean": _to_bool,
    "date": _to_date,
    "json": _to_json,
    "array": _to_array,
    "object": _to_object,
}

SUPPORTED_TYPES = tuple(_CONVERTERS)


def coerce(value: str, kind: str = "string") -> Any:
    """Convert a raw env string into ``kind``; raises ``ValueError`` when it does not fit."""
    try:
        converter = _CONVERTERS[kind]
    except KeyError as exc:
        raise ValueError(f"Unsupported value type: {kind}") from exc
    try:
        return converter(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"cannot convert {value!r} to {kind}: {exc}") from exc
