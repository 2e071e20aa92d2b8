"""
Canonical JSON encoding, stable hashing, and canonical-object helpers.

Provides the single canonicalization policy every fingerprint in autopilot depends on:
idempotency keys, content-addressable ids and bundle integrity hashes are all SHA-256
digests over the string produced by ``canonicalize_json``. This module is zero-IO and
uses only the Python standard library.

Notes:
    - Canonical JSON:
        - mapping keys sorted by code point (the same order as UTF-8 bytes); JavaScript
          sorts by UTF-16 code unit instead, so keys mixing U+E000..U+FFFF with astral
          characters order differently there
        - no whitespace, separators "," and ":"
        - non-ASCII emitted literally; lone surrogates escaped as ``\\udxxx``
        - numbers follow the ECMAScript Number-to-String rules applied to the
          shortest round-tripping decimal, so JavaScript producers and this package
          agree on digests for every finite number
    - Values outside the JSON data model (sets, bytes, datetimes, NaN, mappings with
      non-string keys, ...) classify as ``JsonKind.UNSUPPORTED`` and encode as ``null``.
      The encoder never raises.
    - ``UNDEFINED`` marks an absent value. It encodes as ``null`` wherever it appears
      and is dropped only by ``remove_undefined`` / ``canonicalize_object``.
      ``undefined_as_null`` rewrites it to ``None`` for code that dumps with the
      standard ``json`` module or pydantic.
    - Hashing is performed over the UTF-8 encoded canonical string.

Examples:
    >>> from autopilot.core.canonical import canonicalize_json, short_hash
    >>> canonicalize_json({"z": 1, "a": 2, "m": 3})
    '{"a":2,"m":3,"z":1}'
    >>> len(short_hash({"a": 1}))
    16
"""

from __future__ import annotations

import hashlib
import json
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Final, NamedTuple

from .constants import SHORT_HASH_LENGTH

__all__ = [
    "Undefined",
    "UNDEFINED",
    "JsonKind",
    "classify",
    "format_number",
    "canonicalize_json",
    "sha256_hex",
    "stable_hash",
    "short_hash",
    "CanonicalHash",
    "hash_canonical_json",
    "content_addressable_id",
    "deep_equal",
    "sort_keys",
    "remove_undefined",
    "undefined_as_null",
    "canonicalize_object",
]


class Undefined(Enum):
    """Marker type for an absent value; distinct from ``None`` (JSON null)."""

    UNDEFINED = "undefined"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = Undefined.UNDEFINED


class JsonKind(Enum):
    """Shape of a value as seen by the canonical encoder."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> JsonKind:
    """
    Classify a Python value into the JSON data model.

    Args:
        value (Any): Candidate value.

    Returns:
        JsonKind: Tag the encoder dispatches on. ``bool`` is checked before ``int``;
        non-finite floats and mappings with any non-``str`` key are UNSUPPORTED.

    Examples:
        >>> classify(True) is JsonKind.BOOL
        True
        >>> classify(float("nan")) is JsonKind.UNSUPPORTED
        True
        >>> classify({1: "a"}) is JsonKind.UNSUPPORTED
        True
    """
    if value is None or value is UNDEFINED:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, int):
        return JsonKind.NUMBER
    if isinstance(value, float):
        return JsonKind.NUMBER if math.isfinite(value) else JsonKind.UNSUPPORTED
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.SEQUENCE
    if isinstance(value, Mapping):
        if all(isinstance(k, str) for k in value.keys()):
            return JsonKind.MAPPING
        return JsonKind.UNSUPPORTED
    return JsonKind.UNSUPPORTED


def format_number(value: int | float) -> str:
    """
    Format a finite number the way ECMAScript ``Number.prototype.toString`` does.

    Integers keep their exact decimal form. Floats start from the shortest digit string
    that round-trips (``repr``), then choose plain or exponent notation by the decimal
    exponent: plain for 1e-7 < |x| < 1e21, exponent otherwise.

    Args:
        value (int | float): Finite number (bools are not accepted here).

    Returns:
        str: Canonical decimal text.

    Examples:
        >>> format_number(1.0)
        '1'
        >>> format_number(-0.0)
        '0'
        >>> format_number(1e21)
        '1e+21'
        >>> format_number(1e-7)
        '1e-7'
        >>> format_number(0.000001)
        '0.000001'
        >>> format_number(1.5)
        '1.5'
    """
    if isinstance(value, int):
        return str(value)
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped

    k = len(digits)
    n = exponent + k  # position of the decimal point relative to the first digit

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        exp_text = f"e+{e}" if e >= 0 else f"e-{-e}"
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        body = mantissa + exp_text
    return sign + body


_LONE_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def _encode_string(s: str) -> str:
    text = json.dumps(s, ensure_ascii=False)
    return _LONE_SURROGATE_RE.sub(lambda m: f"\\u{ord(m.group(0)):04x}", text)


def canonicalize_json(value: Any) -> str:
    """
    Encode a value into its canonical JSON string.

    Args:
        value (Any): JSON value. Anything outside the JSON data model encodes as
            ``null`` rather than raising.

    Returns:
        str: Canonical string; equal JSON values always produce equal strings.

    Examples:
        >>> canonicalize_json({"b": {"d": 1, "c": 2}, "a": 3})
        '{"a":3,"b":{"c":2,"d":1}}'
        >>> canonicalize_json([3, 1, 2])
        '[3,1,2]'
        >>> canonicalize_json({"when": object()})
        '{"when":null}'
    """
    kind = classify(value)
    if kind is JsonKind.NULL or kind is JsonKind.UNSUPPORTED:
        return "null"
    if kind is JsonKind.BOOL:
        return "true" if value else "false"
    if kind is JsonKind.NUMBER:
        return format_number(value)
    if kind is JsonKind.STRING:
        return _encode_string(value)
    if kind is JsonKind.SEQUENCE:
        return "[" + ",".join(canonicalize_json(item) for item in value) + "]"
    # JsonKind.MAPPING
    parts = [
        _encode_string(key) + ":" + canonicalize_json(value[key]) for key in sorted(value.keys())
    ]
    return "{" + ",".join(parts) + "}"


def sha256_hex(text: str) -> str:
    """Compute the lowercase SHA-256 hex digest of a UTF-8 string."""
    h = hashlib.sha256()
    h.update(text.encode("utf-8"))
    return h.hexdigest()


def stable_hash(value: Any) -> str:
    """
    Compute the stable SHA-256 digest of a value's canonical encoding.

    Args:
        value (Any): JSON value.

    Returns:
        str: 64-character lowercase hex digest.

    Notes:
        Re-ordering mapping keys never changes the result; re-ordering sequence
        elements does.
    """
    return sha256_hex(canonicalize_json(value))


def short_hash(value: Any) -> str:
    """First 16 hex characters of ``stable_hash(value)``."""
    return stable_hash(value)[:SHORT_HASH_LENGTH]


class CanonicalHash(NamedTuple):
    """Canonical string together with its digest."""

    canonical_json: str
    hash: str


def hash_canonical_json(value: Any) -> CanonicalHash:
    """
    Canonicalize once and return both the string and its digest.

    Examples:
        >>> result = hash_canonical_json({"a": 1})
        >>> result.canonical_json
        '{"a":1}'
        >>> result.hash == stable_hash({"a": 1})
        True
    """
    canonical = canonicalize_json(value)
    return CanonicalHash(canonical_json=canonical, hash=sha256_hex(canonical))


def content_addressable_id(value: Any, prefix: str | None = None) -> str:
    """
    Build a content-addressable identifier for a value.

    Args:
        value (Any): JSON value to address.
        prefix (str | None): Optional label; empty or None yields the bare short hash.

    Returns:
        str: ``"{prefix}-{short_hash}"`` or ``short_hash``.

    Examples:
        >>> content_addressable_id({"a": 1}, "ev").startswith("ev-")
        True
        >>> content_addressable_id({"a": 1}) == short_hash({"a": 1})
        True
    """
    short = short_hash(value)
    return f"{prefix}-{short}" if prefix else short


def deep_equal(a: Any, b: Any) -> bool:
    """True iff both values have the same canonical encoding."""
    return canonicalize_json(a) == canonicalize_json(b)


def sort_keys(value: Any) -> Any:
    """
    Return a new structure whose mappings have keys in ascending code-point order.

    Sequences keep their element order (tuples become lists). Scalars and values
    outside the JSON data model are returned as-is. The input is not mutated.

    Examples:
        >>> list(sort_keys({"b": 1, "a": {"d": 2, "c": 3}}))
        ['a', 'b']
    """
    kind = classify(value)
    if kind is JsonKind.SEQUENCE:
        return [sort_keys(item) for item in value]
    if kind is JsonKind.MAPPING:
        return {key: sort_keys(value[key]) for key in sorted(value.keys())}
    return value


def remove_undefined(value: Any) -> Any:
    """
    Return a new structure with every ``UNDEFINED`` entry removed.

    Mapping entries whose value is ``UNDEFINED`` are omitted and ``UNDEFINED`` sequence
    elements are dropped. ``None`` is preserved. The input is not mutated.

    Examples:
        >>> remove_undefined({"a": None, "b": UNDEFINED})
        {'a': None}
        >>> remove_undefined([1, UNDEFINED, 2])
        [1, 2]
    """
    kind = classify(value)
    if kind is JsonKind.SEQUENCE:
        return [remove_undefined(item) for item in value if item is not UNDEFINED]
    if kind is JsonKind.MAPPING:
        return {k: remove_undefined(v) for k, v in value.items() if v is not UNDEFINED}
    return value


def undefined_as_null(value: Any) -> Any:
    """
    Return a new structure with every ``UNDEFINED`` replaced by ``None``.

    The result encodes to the same canonical string as the input. Contract models run
    their free-form JSON fields through this so that a model dump never carries the
    marker itself.

    Examples:
        >>> undefined_as_null({"a": UNDEFINED, "b": [UNDEFINED, 1]})
        {'a': None, 'b': [None, 1]}
    """
    if value is UNDEFINED:
        return None
    kind = classify(value)
    if kind is JsonKind.SEQUENCE:
        return [undefined_as_null(item) for item in value]
    if kind is JsonKind.MAPPING:
        return {k: undefined_as_null(v) for k, v in value.items()}
    return value


def canonicalize_object(value: Any) -> Any:
    """
    Produce a structurally canonical object: ``sort_keys(remove_undefined(value))``.

    The result is still a rich Python structure (not a string), suitable for storage or
    snapshot comparison. Applying it twice equals applying it once.
    """
    return sort_keys(remove_undefined(value))
