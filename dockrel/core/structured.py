"""Helpers for reading untyped JSON structures.

``package.json`` and ``version.json`` are ingested as plain ``object`` trees;
these helpers validate shape at the boundary and narrow types for the rest of
the code.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, TypeGuard, cast

from .result import Err, Ok, Result

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value from a mapping, stripping whitespace.

    Numbers are accepted and converted, since manifests sometimes store
    revisions as bare integers. Returns None if missing, of another type or
    empty after stripping.
    """
    value = table.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        value = str(value)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))


def read_json_object(path: Path) -> Result[StrDict, str]:
    """Read a JSON file whose top level must be an object.

    Returns:
        Ok(object) on success, Err(message) if the file is missing, not JSON
        or not an object.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(f"file not found: {path}")
    except UnicodeDecodeError as e:
        return Err(f"invalid UTF-8 in {path.name}: {e}")
    except OSError as e:
        return Err(f"cannot read {path}: {e}")

    try:
        data: object = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(f"invalid JSON in {path.name}: {e}")

    obj = as_str_dict(data)
    if obj is None:
        return Err(f"{path.name}: expected a JSON object at top level")
    return Ok(obj)
