"""
autopilot.profiles: built-in product profiles and the registry that serves them.

## Responsibilities
- Ship the base profile and one overlay per autopilot product.
- Look up, list and filter registered profiles by id or metadata category.
- Build custom profiles by extending a registered one.

## Import DAG discipline
- Depends only on pydantic and autopilot.core.*.

## Examples
```python
from autopilot.profiles import create_custom_profile, get_profiles_by_category

custom = create_custom_profile("base", {"id": "acme", "name": "Acme"})
[p.id for p in get_profiles_by_category("devops")]  # ['readylayer']
```
"""

from __future__ import annotations

from .base import BASE_PROFILE
from .overlays import (
    AIAS_PROFILE,
    JOBFORGE_PROFILE,
    KEYS_PROFILE,
    OVERLAY_PROFILES,
    READYLAYER_PROFILE,
    SETTLER_PROFILE,
)
from .registry import (
    PROFILE_REGISTRY,
    PROFILE_REGISTRY_VERSION,
    create_custom_profile,
    get_all_profiles,
    get_default_profile,
    get_profile,
    get_profiles_by_category,
    has_profile,
    list_profiles,
    validate_custom_profile,
)

__all__ = [
    # Profiles
    "BASE_PROFILE",
    "JOBFORGE_PROFILE",
    "SETTLER_PROFILE",
    "READYLAYER_PROFILE",
    "AIAS_PROFILE",
    "KEYS_PROFILE",
    "OVERLAY_PROFILES",
    # Registry
    "PROFILE_REGISTRY",
    "PROFILE_REGISTRY_VERSION",
    "get_profile",
    "has_profile",
    "list_profiles",
    "get_all_profiles",
    "create_custom_profile",
    "validate_custom_profile",
    "get_profiles_by_category",
    "get_default_profile",
]
