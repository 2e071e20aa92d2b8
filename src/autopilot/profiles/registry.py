"""
Registry of built-in profiles and lookup helpers.

``PROFILE_REGISTRY`` holds the base profile followed by the product overlays, keyed by
profile id in that order. Lookups hand out deep copies, so callers may modify what they
get without touching the registry.

Examples:
    >>> from autopilot.profiles.registry import get_profile, list_profiles
    >>> list_profiles()[:2]
    ['base', 'jobforge']
    >>> get_profile("keys").voice.tone
    'professional'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.envelopes import ProfileValidation, extend_profile, validate_profile
from ..core.errors import ProfileNotFoundError
from ..core.schema import Profile, ProfileRegistry
from .base import BASE_PROFILE
from .overlays import OVERLAY_PROFILES

__all__ = [
    "PROFILE_REGISTRY_VERSION",
    "PROFILE_REGISTRY",
    "get_profile",
    "has_profile",
    "list_profiles",
    "get_all_profiles",
    "create_custom_profile",
    "validate_custom_profile",
    "get_profiles_by_category",
    "get_default_profile",
]

PROFILE_REGISTRY_VERSION = "1.0.0"

PROFILE_REGISTRY: ProfileRegistry = ProfileRegistry(
    version=PROFILE_REGISTRY_VERSION,
    profiles={p.id: p for p in (BASE_PROFILE, *OVERLAY_PROFILES)},
)


def get_profile(profile_id: str) -> Profile:
    """
    Look up a built-in profile by id.

    Args:
        profile_id (str): Registry key, e.g. "base" or "jobforge".

    Returns:
        Profile: Deep copy of the registered profile.

    Raises:
        ProfileNotFoundError: If no profile is registered under ``profile_id``.
    """
    profile = PROFILE_REGISTRY.profiles.get(profile_id)
    if profile is None:
        raise ProfileNotFoundError(f"Profile not found: {profile_id}")
    return profile.model_copy(deep=True)


def has_profile(profile_id: str) -> bool:
    return profile_id in PROFILE_REGISTRY.profiles


def list_profiles() -> list[str]:
    """Registered profile ids, base first."""
    return list(PROFILE_REGISTRY.profiles)


def get_all_profiles() -> list[Profile]:
    return [p.model_copy(deep=True) for p in PROFILE_REGISTRY.profiles.values()]


def create_custom_profile(base_id: str, overrides: Profile | Mapping[str, Any]) -> Profile:
    """
    Extend a registered profile with overrides (see ``extend_profile`` for merge rules).

    Raises:
        ProfileNotFoundError: If ``base_id`` is not registered.
        pydantic.ValidationError: If the merged profile is invalid.
    """
    return extend_profile(get_profile(base_id), overrides)


def validate_custom_profile(profile: Any) -> ProfileValidation:
    return validate_profile(profile)


def get_profiles_by_category(category: str) -> list[Profile]:
    """Profiles whose ``metadata["category"]`` equals ``category``."""
    return [
        p.model_copy(deep=True)
        for p in PROFILE_REGISTRY.profiles.values()
        if (p.metadata or {}).get("category") == category
    ]


def get_default_profile() -> Profile:
    return get_profile(BASE_PROFILE.id)
