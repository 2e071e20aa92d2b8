"""
Shared constants for autopilot contracts, hashing, and request generation.

Defines canonicalization labels, stable-output placeholders, and the thresholds used by
request validation. This module is zero-IO and uses only the Python standard library.

Notes:
    - CANONICALIZATION_ALGORITHM and HASH_ALGORITHM are written verbatim into every
      bundle's canonicalization record; receivers compare them as literals.
    - STABLE_TIMESTAMP replaces clock-derived fields when callers
      ask for stable output (golden files, fixtures, reproducible bundles).
    - Changing any value here changes bundle hashes.
"""

from __future__ import annotations

__all__ = [
    "CANONICALIZATION_ALGORITHM",
    "HASH_ALGORITHM",
    "SHORT_HASH_LENGTH",
    "STABLE_TIMESTAMP",
    "DEFAULT_MODULE_ID",
    "DEFAULT_EXPIRATION_HOURS",
    "MIN_EXPIRATION_HOURS",
    "MAX_EXPIRATION_HOURS",
    "MAX_BATCH_SIZE",
    "MASK",
    "REDACTED",
]

CANONICALIZATION_ALGORITHM: str = "json-lexicographic"
HASH_ALGORITHM: str = "sha256"

# Hex characters kept by short_hash / content_addressable_id.
SHORT_HASH_LENGTH: int = 16

STABLE_TIMESTAMP: str = "2000-01-01T00:00:00.000Z"

DEFAULT_MODULE_ID: str = "autopilot"

DEFAULT_EXPIRATION_HOURS: int = 24
MIN_EXPIRATION_HOURS: int = 1
MAX_EXPIRATION_HOURS: int = 168  # 7 days

MAX_BATCH_SIZE: int = 100

# Replacement used by hint-based masking.
MASK: str = "***"
# Replacement used by denylist redaction of logs and artifacts.
REDACTED: str = "[REDACTED]"
