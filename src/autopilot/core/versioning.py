"""
Contract version metadata and helpers for autopilot envelopes and bundles.

Exposes the canonical contract version (CONTRACT_V) stamped into events, job requests,
reports and bundles, and provides semver parsing plus compatibility and successor checks.
This module is zero-IO.

Notes:
    - Envelopes carry ``version`` and bundles carry ``schema_version``; both are written as
      CONTRACT_V.semver.
    - Compatibility follows semantic versioning: same major, any minor/patch.
    - Loaders may call ensure_compatible before trusting an inbound payload.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from .errors import VersionMismatch

__all__ = [
    "SchemaVersion",
    "CONTRACT_V",
    "CONTRACT_VERSION",
    "parse_semver",
    "is_compatible",
    "is_successor_of",
    "ensure_compatible",
]

_SEMVER_CORE_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(?:[-+].*)?$")


@dataclass(frozen=True)
class SchemaVersion:
    """
    Immutable semantic version with ISO release date for autopilot contracts.

    Attributes:
        major (int): Non-negative major component signalling breaking changes.
        minor (int): Non-negative minor component for additive changes.
        patch (int): Non-negative patch component for fixes that keep the wire format.
        date (str): ISO YYYY-MM-DD release date.

    Raises:
        ValueError: If any component is negative or the date is not ISO compliant.
    """

    major: int
    minor: int
    patch: int
    date: str  # ISO YYYY-MM-DD

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"SchemaVersion {name} must be non-negative, got {value}")
        try:
            date.fromisoformat(self.date)
        except ValueError as exc:
            raise ValueError(
                f"SchemaVersion date must be ISO YYYY-MM-DD, got {self.date!r}"
            ) from exc

    @property
    def semver(self) -> str:
        """Wire form, e.g. ``"1.0.0"``."""
        return f"{self.major}.{self.minor}.{self.patch}"


CONTRACT_V = SchemaVersion(1, 0, 0, "2026-01-15")
CONTRACT_VERSION: str = CONTRACT_V.semver


def parse_semver(text: str) -> tuple[int, int, int]:
    """
    Parse the ``major.minor.patch`` core of a semantic version string.

    Pre-release and build suffixes are accepted and ignored.

    Raises:
        VersionMismatch: If text is not a semantic version.

    Examples:
        >>> parse_semver("1.2.3-rc.1")
        (1, 2, 3)
    """
    match = _SEMVER_CORE_RE.match(text or "")
    if match is None:
        raise VersionMismatch(f"not a semantic version: {text!r}")
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def is_compatible(ver: SchemaVersion | str) -> bool:
    """
    Check whether a version can be read by this package.

    Args:
        ver (SchemaVersion | str): Version descriptor or semver string.

    Returns:
        bool: True if ver shares the major component with CONTRACT_V.

    Examples:
        >>> is_compatible("1.4.0")
        True
        >>> is_compatible("2.0.0")
        False
    """
    if isinstance(ver, str):
        try:
            major = parse_semver(ver)[0]
        except VersionMismatch:
            return False
    else:
        major = ver.major
    return major == CONTRACT_V.major


def is_successor_of(candidate: SchemaVersion, current: SchemaVersion) -> bool:
    """
    Determine whether a version is the immediate successor of another.

    Patch bumps keep major/minor; minor bumps reset patch; major bumps reset both.
    Anything else is non-sequential.

    Examples:
        >>> is_successor_of(SchemaVersion(1, 0, 1, "2026-02-01"), CONTRACT_V)
        True
        >>> is_successor_of(SchemaVersion(1, 2, 0, "2026-02-01"), CONTRACT_V)
        False
    """
    if candidate.major == current.major and candidate.minor == current.minor:
        return candidate.patch == current.patch + 1
    if candidate.major == current.major:
        return candidate.minor == current.minor + 1 and candidate.patch == 0
    return candidate.major == current.major + 1 and candidate.minor == 0 and candidate.patch == 0


def ensure_compatible(version: str, what: str = "payload") -> str:
    """
    Return version unchanged if compatible, else raise.

    Raises:
        VersionMismatch: If version is malformed or has a different major component.
    """
    if not is_compatible(version):
        raise VersionMismatch(
            f"{what} version {version!r} is not compatible with contract {CONTRACT_VERSION}"
        )
    return version
