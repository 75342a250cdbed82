"""
Canonical serialization of message data, plus the small helpers every
envelope needs: vacuuming empty sections, UTF-8 normalization, UUIDs and JSON.

The canonical form is what gets signed, so it must be byte-identical on both
sides of the wire no matter how the data mapping was built:

    {"b": "2", "a": {"y": "1", "x": ["p", "q"]}}  ->  "axpqy1b2"

Keys are visited in ascending order at every level: numerically when every
key of a mapping is a number, as strings otherwise. Numeric keys (list
indices, or mapping keys that look like numbers) contribute only their value.
"""

from __future__ import annotations

import json
import re
import uuid
from typing import Any, Optional

# Bytes that are not valid UTF-8 are assumed to be in this single-byte encoding.
LEGACY_ENCODING = "iso-8859-1"

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def _is_numeric(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, (int, float)):
        return True
    return isinstance(key, str) and _NUMERIC.match(key) is not None


def _sorted_items(data: dict) -> list:
    # Only-numeric mappings sort by value, anything else sorts by string form.
    # Ties (1 vs "1", "1" vs "01") fall through to the string form and type name.
    if all(_is_numeric(k) for k in data):
        return sorted(data.items(), key=lambda item: (float(item[0]), str(item[0]), type(item[0]).__name__))
    return sorted(data.items(), key=lambda item: (str(item[0]), type(item[0]).__name__))


def _scalar(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    if isinstance(value, bytes):
        return ensure_utf8(value)
    return str(value)


def serialize(data: Any) -> str:
    """Flatten ``data`` into its canonical string form."""
    if isinstance(data, dict):
        items = _sorted_items(data)
    elif isinstance(data, (list, tuple)):
        items = list(enumerate(data))
    else:
        return _scalar(data)

    parts = []
    for key, value in items:
        if _is_numeric(key):
            parts.append(serialize(value))
        else:
            parts.append(f"{key}{serialize(value)}")
    return "".join(parts)


def vacuum(data: Any) -> Any:
    """Recursively drop ``None`` values and sections that end up empty.

    Returns ``None`` when nothing is left, so callers can omit the section.
    Empty strings and zeroes are values and are kept.
    """
    if data is None:
        return None
    if isinstance(data, dict):
        cleaned = {}
        for key, value in data.items():
            value = vacuum(value)
            if value is not None:
                cleaned[key] = value
        return cleaned or None
    if isinstance(data, (list, tuple)):
        items = [item for item in (vacuum(v) for v in data) if item is not None]
        return items or None
    return data


def ensure_utf8(value: Any) -> Any:
    """Return ``value`` with every string in it guaranteed to be valid UTF-8.

    ``bytes`` are decoded as UTF-8 when they are valid UTF-8, otherwise as
    ISO-8859-1. ``str`` values carrying undecodable bytes as surrogate escapes
    are repaired the same way. Mappings and lists are normalized recursively.
    """
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.decode(LEGACY_ENCODING)
    if isinstance(value, str):
        try:
            value.encode("utf-8")
            return value
        except UnicodeEncodeError:
            pass
        try:
            return ensure_utf8(value.encode("utf-8", "surrogateescape"))
        except UnicodeEncodeError:
            return value.encode("utf-8", "replace").decode("utf-8")
    if isinstance(value, dict):
        return {key: ensure_utf8(item) for key, item in value.items()}
    if isinstance(value, list):
        return [ensure_utf8(item) for item in value]
    return value


def generate_uuid() -> str:
    return str(uuid.uuid4())


def to_json(data: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(data, indent=4, sort_keys=True, ensure_ascii=False)
    return json.dumps(data)


def signable_material(method: Optional[str], uuid_: Optional[str], data: Any) -> bytes:
    """The exact bytes that are signed: method, UUID and serialized data."""
    return f"{method or ''}{uuid_ or ''}{serialize(data)}".encode("utf-8")
