"""
Core exception types raised by grammar normalization, contract helpers, and versioning.

Provides typed exceptions for contract-level failures:
- GrammarError for unknown or malformed enum-like values (job types, severities, ...).
- ContractError as the base for helper-level rule violations, with the concrete
  TenantMismatchError, EmptyBatchError, BuilderError and ProfileNotFoundError.
- VersionMismatch for contract/bundle schema versions this package cannot read.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Validators in autopilot.core.schema raise GrammarError; pydantic wraps it into
      pydantic.ValidationError because GrammarError is a ValueError.
    - Canonicalization and hashing never raise; see autopilot.core.canonical.

Examples:
    Catch a batching failure.

    >>> from autopilot.core.errors import EmptyBatchError, ContractError
    >>> try:
    ...     raise EmptyBatchError("Cannot create empty batch")
    ... except ContractError as e:
    ...     msg = str(e)
    >>> "empty batch" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "GrammarError",
    "ContractError",
    "TenantMismatchError",
    "EmptyBatchError",
    "BuilderError",
    "ProfileNotFoundError",
    "VersionMismatch",
]


class GrammarError(ValueError):
    """Enum-like value is malformed or not part of the contract vocabulary."""


class ContractError(ValueError):
    """A contract helper was asked to build something the contracts forbid."""


class TenantMismatchError(ContractError):
    """Requests that must share one tenant context do not."""


class EmptyBatchError(ContractError):
    """A batch was requested with no job requests in it."""


class BuilderError(ContractError):
    """A request builder or client is missing a required field (job type, tenant)."""


class ProfileNotFoundError(ContractError):
    """No registered profile has the requested id."""


class VersionMismatch(RuntimeError):
    """Incompatible or unexpected contract/bundle schema version encountered."""
