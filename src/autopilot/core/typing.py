"""
Lightweight typing aliases used across contracts, hashing, and bundles.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from autopilot.core.typing import Digest, JsonDict
    >>> def fingerprint() -> Digest:
    ...     return Digest("0" * 64)
    >>> def payload() -> JsonDict:
    ...     return {"url": "https://example.com"}
"""

from __future__ import annotations

from typing import Any, NewType

__all__ = [
    "JsonValue",
    "JsonDict",
    "Digest",
    "ShortHash",
    "TenantId",
    "ProjectId",
    "TraceId",
]

# JSON values are checked at runtime by autopilot.core.canonical.classify, not statically.
JsonValue = Any
JsonDict = dict[str, Any]

# 64-char lowercase hex SHA-256 digest / its 16-char prefix.
Digest = NewType("Digest", str)
ShortHash = NewType("ShortHash", str)

TenantId = NewType("TenantId", str)
ProjectId = NewType("ProjectId", str)
TraceId = NewType("TraceId", str)
