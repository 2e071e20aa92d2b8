"""
Lightweight JSON serialization/deserialization utilities.

Provides `json_loads` as a thin wrapper around the stdlib `json` module, `json_dumps_pretty`
for human-readable transport output, `to_jsonable` to turn pydantic models into plain JSON
values, and re-exports `canonicalize_json` from `autopilot.core.canonical` to keep a
single canonical JSON policy across the codebase. This module is zero-IO.

Notes:
    - Use `canonicalize_json` for strings that are hashed or compared.
    - `json_dumps_pretty` sorts keys and indents by two spaces; it is for files and
      terminals, never for fingerprints.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from .canonical import UNDEFINED

# Re-export canonical dumps to keep a single canonicalization policy.
from .canonical import canonicalize_json  # noqa: F401

__all__ = [
    "json_loads",
    "json_dumps_pretty",
    "to_jsonable",
    "canonicalize_json",
]


def json_loads(s: str | bytes) -> Any:
    """
    Deserialize a JSON document to Python objects using the stdlib json module.

    Args:
        s (str | bytes): JSON text.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
    """
    return json.loads(s)


def to_jsonable(value: Any) -> Any:
    """
    Convert pydantic models (at any depth) into plain JSON values.

    Models are dumped with ``mode="json"`` so enums become their wire values and
    optional fields that are unset stay present as ``None``. Mappings and sequences
    are rebuilt, ``UNDEFINED`` becomes ``None``; other values are returned unchanged.

    Examples:
        >>> to_jsonable({"a": (1, 2)})
        {'a': [1, 2]}
    """
    if value is UNDEFINED:
        return None
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def json_dumps_pretty(value: Any) -> str:
    """
    Serialize to sorted-key JSON indented by two spaces.

    Args:
        value (Any): JSON value or pydantic model.

    Returns:
        str: Indented JSON text without a trailing newline.
    """
    return json.dumps(to_jsonable(value), indent=2, sort_keys=True, ensure_ascii=False)
