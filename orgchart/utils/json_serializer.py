"""
JSON helpers for snapshots stored in audit log JSON columns
"""
import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import UUID
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel


def to_json_safe(value: Any) -> Any:
    """
    Recursively convert Python objects to JSON-safe values

    Mapping order is preserved so snapshots keep their field order.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return to_json_safe(value.value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, BaseModel):
        return to_json_safe(value.model_dump())
    if isinstance(value, Mapping):
        return {str(k): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(item) for item in value]
    return str(value)


def sanitize_snapshot(snapshot: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy a snapshot into a plain ordered dict of JSON-safe values (None stays None)"""
    if snapshot is None:
        return None
    return to_json_safe(dict(snapshot))


def _integral_floats_as_int(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _integral_floats_as_int(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_integral_floats_as_int(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """
    Serialize a value so that equal values produce identical strings

    Keys are sorted at every level, so key order inside nested objects is insignificant.
    Integral floats are written as integers, so 1 and 1.0 compare equal.
    """
    return json.dumps(
        _integral_floats_as_int(to_json_safe(value)),
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )
