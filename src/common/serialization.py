"""Serialization utilities."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from typing import Any


def to_camel(name: str) -> str:
    """Convert a snake_case field name to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _convert(value: Any, camel_case: bool) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {
            (to_camel(k) if camel_case and isinstance(k, str) else k): _convert(v, camel_case)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_convert(v, camel_case) for v in value]
    return value


def serialize_dataclass(obj, camel_case: bool = False) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings and tuples to lists."""
    return _convert(asdict(obj), camel_case)


def dumps_stable(payload: Any) -> str:
    """Render JSON deterministically: fixed indent, UTF-8 text, trailing newline."""
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
