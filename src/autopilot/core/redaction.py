"""
Field-level redaction for payloads, logs and artifacts.

Two complementary policies:

- Hint-based redaction (``redact`` / ``redact_string``) driven by an immutable
  `RedactionConfig`: default sensitive top-level fields are masked, dot-path hints apply a
  strategy (mask, hash, omit, encrypt), and global regex patterns scrub strings.
- Denylist redaction (``redact_keys`` / ``redact_key_values``) used for logs and
  evidence artifacts: any mapping key whose normalized form contains a denied key is
  replaced by "[REDACTED]", at any depth.

Notes:
    - Inputs are never mutated; every helper returns a new structure.
    - Configuration is always passed explicitly; `DEFAULT_REDACTION_CONFIG` is a frozen
      value.
    - Key normalization lowercases and drops ``-``, ``_`` and whitespace, so "API-Key",
      "api_key" and "apiKey" all match "api_key".

Examples:
    >>> from autopilot.core.redaction import redact, redact_keys
    >>> redact({"password": "hunter2", "user": "ada"})
    {'password': '***', 'user': 'ada'}
    >>> redact_keys({"headers": {"X-Api-Key": "abc"}})
    {'headers': {'X-Api-Key': '[REDACTED]'}}
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Mapping
from typing import Any, Final

from .canonical import UNDEFINED, canonicalize_json, sha256_hex
from .constants import MASK, REDACTED
from .grammar import RedactionStrategy, redaction_strategy_from_value
from .schema import RedactionConfig, RedactionPattern

__all__ = [
    "DEFAULT_REDACTION_CONFIG",
    "DEFAULT_DENY_KEYS",
    "redact",
    "redact_string",
    "apply_redaction_strategy",
    "normalize_key",
    "is_denied_key",
    "redact_keys",
    "redact_key_values",
]

DEFAULT_REDACTION_CONFIG: Final[RedactionConfig] = RedactionConfig(
    enabled=True,
    hints=(),
    global_patterns=(
        RedactionPattern(pattern=r"Bearer [a-zA-Z0-9_\-\.]+", replacement="Bearer ***"),
        RedactionPattern(pattern=r"Basic [a-zA-Z0-9=]+", replacement="Basic ***"),
        RedactionPattern(pattern=r"api[_-]?key[=:]\s*[^\s&]+", replacement="api_key=***"),
    ),
    default_sensitive_fields=(
        "password",
        "secret",
        "token",
        "api_key",
        "private_key",
        "credential",
        "auth",
        "authorization",
    ),
)

DEFAULT_DENY_KEYS: Final[frozenset[str]] = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "api-key",
        "authorization",
        "auth_token",
        "access_token",
        "refresh_token",
        "private_key",
        "privatekey",
        "secret_key",
        "secretkey",
        "credential",
        "credentials",
        "aws_secret_access_key",
        "aws_access_key_id",
        "database_url",
        "connection_string",
        "session_token",
        "cookie",
        "x-api-key",
        "bearer",
        "client_secret",
    }
)


# ============================================================================
# Hint-based redaction
# ============================================================================


def apply_redaction_strategy(value: Any, strategy: RedactionStrategy | str) -> Any:
    """
    Replace a value according to a redaction strategy.

    Returns:
        Any: "***" (mask, strings), "[REDACTED]" (mask, other values),
        "[HASH:xxxxxxxx]" (hash, first 8 hex chars of SHA-256), "[ENCRYPTED]" (encrypt),
        or UNDEFINED (omit; callers drop the entry).

    Examples:
        >>> apply_redaction_strategy("secret", "mask")
        '***'
        >>> apply_redaction_strategy(42, "mask")
        '[REDACTED]'
        >>> apply_redaction_strategy("x", "hash").startswith("[HASH:")
        True
    """
    kind = redaction_strategy_from_value(strategy)
    if kind is RedactionStrategy.MASK:
        return MASK if isinstance(value, str) else REDACTED
    if kind is RedactionStrategy.HASH:
        text = value if isinstance(value, str) else canonicalize_json(value)
        return f"[HASH:{sha256_hex(text)[:8]}]"
    if kind is RedactionStrategy.OMIT:
        return UNDEFINED
    return "[ENCRYPTED]"


def _lookup(obj: Any, parts: list[str]) -> Any:
    current = obj
    for part in parts:
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return UNDEFINED
    return current


def _assign(obj: dict[str, Any], parts: list[str], value: Any) -> None:
    current = obj
    for part in parts[:-1]:
        current = current[part]
    if value is UNDEFINED:
        del current[parts[-1]]
    else:
        current[parts[-1]] = value


def redact(
    obj: Mapping[str, Any], config: RedactionConfig = DEFAULT_REDACTION_CONFIG
) -> dict[str, Any]:
    """
    Redact a mapping according to a redaction config.

    Default sensitive fields are matched on top-level keys only. Hints address nested
    fields by dot path and are skipped when the path does not exist. A hint with a
    ``pattern`` only rewrites the matching substrings of a string value.

    Args:
        obj (Mapping[str, Any]): Mapping to redact; not mutated.
        config (RedactionConfig): Redaction rules.

    Returns:
        dict[str, Any]: Redacted deep copy.
    """
    redacted: dict[str, Any] = copy.deepcopy(dict(obj))
    if not config.enabled:
        return redacted

    for name in config.default_sensitive_fields:
        if name in redacted:
            redacted[name] = MASK

    for hint in config.hints:
        parts = hint.field.split(".")
        value = _lookup(redacted, parts)
        if value is UNDEFINED:
            continue
        if hint.pattern and isinstance(value, str):
            replacement = apply_redaction_strategy(value, hint.strategy)
            text = "" if replacement is UNDEFINED else replacement
            new_value = re.sub(hint.pattern, lambda _m: text, value)
        else:
            new_value = apply_redaction_strategy(value, hint.strategy)
        _assign(redacted, parts, new_value)
    return redacted


def redact_string(value: str, config: RedactionConfig = DEFAULT_REDACTION_CONFIG) -> str:
    """
    Apply the config's global patterns (case-insensitive) to a string.

    Examples:
        >>> redact_string("Authorization: Bearer abc.def")
        'Authorization: Bearer ***'
    """
    if not config.enabled:
        return value
    out = value
    for p in config.global_patterns:
        out = re.sub(p.pattern, p.replacement, out, flags=re.IGNORECASE)
    return out


# ============================================================================
# Denylist redaction
# ============================================================================

_KEY_NOISE_RE = re.compile(r"[-_\s]")


def normalize_key(key: str) -> str:
    """Lowercase and drop ``-``, ``_`` and whitespace."""
    return _KEY_NOISE_RE.sub("", key.lower())


def _deny_set(extra_deny_keys: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_key(k) for k in (*DEFAULT_DENY_KEYS, *extra_deny_keys))


def is_denied_key(key: str, deny_keys: Iterable[str] = DEFAULT_DENY_KEYS) -> bool:
    """
    True if the normalized key contains any normalized denied key.

    Examples:
        >>> is_denied_key("DB_PASSWORD")
        True
        >>> is_denied_key("username")
        False
    """
    norm = normalize_key(key)
    return any(normalize_key(d) in norm for d in deny_keys)


def redact_keys(
    obj: Any,
    extra_deny_keys: Iterable[str] = (),
    replacement: str = REDACTED,
) -> Any:
    """
    Replace the values of denied keys at any depth.

    Args:
        obj (Any): JSON-like structure; not mutated.
        extra_deny_keys (Iterable[str]): Keys added to DEFAULT_DENY_KEYS.
        replacement (str): Replacement value.

    Returns:
        Any: New structure. Mappings become dicts, sequences become lists; a container
        that contains itself is replaced where the cycle closes.
    """
    deny = _deny_set(extra_deny_keys)

    def denied(key: Any) -> bool:
        norm = normalize_key(str(key))
        return any(d in norm for d in deny)

    def walk(node: Any, active: frozenset[int]) -> Any:
        if isinstance(node, (Mapping, list, tuple)):
            if id(node) in active:
                return replacement
            active = active | {id(node)}
        if isinstance(node, Mapping):
            return {
                k: (replacement if denied(k) else walk(v, active)) for k, v in node.items()
            }
        if isinstance(node, (list, tuple)):
            return [walk(item, active) for item in node]
        return node

    return walk(obj, frozenset())


def redact_key_values(
    text: str,
    extra_deny_keys: Iterable[str] = (),
    replacement: str = REDACTED,
) -> str:
    """
    Scrub ``key=value`` / ``key: value`` and JSON ``"key": "value"`` pairs in free text.

    Examples:
        >>> redact_key_values("password=hunter2 user=ada")
        'password=[REDACTED] user=ada'
        >>> redact_key_values('{"token": "abc"}')
        '{"token": "[REDACTED]"}'
    """
    out = text
    for key in sorted({*DEFAULT_DENY_KEYS, *extra_deny_keys}):
        k = re.escape(key)
        out = re.sub(
            rf"({k}\s*[=:]\s*)([^\s,;\"'\}}\]]+)",
            lambda m: m.group(1) + replacement,
            out,
            flags=re.IGNORECASE,
        )
        out = re.sub(
            rf"(\"{k}\"\s*:\s*)\"[^\"]*\"",
            lambda m: m.group(1) + f'"{replacement}"',
            out,
            flags=re.IGNORECASE,
        )
    return out
