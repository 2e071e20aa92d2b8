"""
Custom exceptions for the autopilot.io module.

Boundaries
- autopilot.core.errors covers grammar, contract and versioning failures.
- autopilot.io raises Io* errors for configuration and filesystem concerns:
  - IoConfigError: invalid or unreadable configuration.
  - IoWriteError: atomic write path failed (tmp write/fsync/rename).
  - IoReadError: an artifact directory or file could not be read back.
"""

from __future__ import annotations

__all__ = ["IoError", "IoConfigError", "IoWriteError", "IoReadError"]


class IoError(Exception):
    """Base class for IO-layer failures, distinct from autopilot.core errors."""


class IoConfigError(IoError):
    """
    Raised when configuration is invalid.

    Examples:
        - AUTOPILOT_DEFAULT_EXPIRATION_HOURS is not a number
        - A TOML file exists but cannot be parsed
    """


class IoWriteError(IoError):
    """
    Raised when a write fails to complete atomically.

    Notes:
        The write path is tmp file -> fsync -> os.replace(tmp, final). The tmp file is
        removed before this is raised.
    """


class IoReadError(IoError):
    """Raised when an artifact file exists but is not valid JSON."""
