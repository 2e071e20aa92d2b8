from __future__ import annotations

import pytest
from pydantic import ValidationError

from autopilot.core.errors import ContractError, ProfileNotFoundError
from autopilot.core.schema import Profile
from autopilot.profiles import (
    BASE_PROFILE,
    OVERLAY_PROFILES,
    PROFILE_REGISTRY,
    create_custom_profile,
    get_all_profiles,
    get_default_profile,
    get_profile,
    get_profiles_by_category,
    has_profile,
    list_profiles,
    validate_custom_profile,
)


def test_registry_lists_base_then_overlays() -> None:
    assert list_profiles() == ["base", "jobforge", "settler", "readylayer", "aias", "keys"]
    assert PROFILE_REGISTRY.version == "1.0.0"
    assert [p.id for p in get_all_profiles()] == list_profiles()


@pytest.mark.parametrize(
    ("profile_id", "category", "tone"),
    [
        ("base", "saas", "professional"),
        ("jobforge", "infrastructure", "technical"),
        ("settler", "productivity", "friendly"),
        ("readylayer", "devops", "technical"),
        ("aias", "ai", "technical"),
        ("keys", "security", "professional"),
    ],
)
def test_builtin_profiles(profile_id: str, category: str, tone: str) -> None:
    profile = get_profile(profile_id)
    assert profile.id == profile_id
    assert profile.metadata == {"version": "1.0.0", "category": category}
    assert profile.voice.tone == tone
    assert len(profile.features) == 3
    assert profile.prohibited_claims


def test_every_builtin_profile_validates() -> None:
    for profile in (BASE_PROFILE, *OVERLAY_PROFILES):
        result = validate_custom_profile(profile.model_dump())
        assert result.valid, result.errors


def test_unknown_profile() -> None:
    assert has_profile("jobforge")
    assert not has_profile("nope")
    with pytest.raises(ProfileNotFoundError, match="Profile not found: nope"):
        get_profile("nope")
    assert issubclass(ProfileNotFoundError, ContractError)


def test_lookups_return_copies() -> None:
    profile = get_profile("base")
    profile.keywords.primary.append("mutated")
    profile.metadata["category"] = "changed"
    assert "mutated" not in get_profile("base").keywords.primary
    assert get_profile("base").metadata["category"] == "saas"
    assert get_profiles_by_category("saas")[0].id == "base"


def test_profiles_by_category() -> None:
    assert [p.id for p in get_profiles_by_category("technical")] == []
    assert [p.id for p in get_profiles_by_category("devops")] == ["readylayer"]
    assert [p.id for p in get_profiles_by_category("security")] == ["keys"]


def test_default_profile_is_base() -> None:
    default = get_default_profile()
    assert default == BASE_PROFILE
    assert default is not BASE_PROFILE


def test_custom_profile_extends_registered_base() -> None:
    custom = create_custom_profile(
        "base",
        {
            "id": "acme",
            "name": "Acme",
            "icp": {"title": "CTO"},
            "keywords": {"primary": ["acme"]},
            "prohibited_claims": ["best in class"],
        },
    )
    assert isinstance(custom, Profile)
    assert custom.id == "acme"
    assert custom.icp.title == "CTO"
    assert custom.icp.company_size == "10-500 employees"
    assert custom.keywords.primary == [*BASE_PROFILE.keywords.primary, "acme"]
    assert custom.prohibited_claims[-1] == "best in class"
    assert custom.features == BASE_PROFILE.features
    assert not has_profile("acme")


def test_custom_profile_errors() -> None:
    with pytest.raises(ProfileNotFoundError):
        create_custom_profile("missing", {"name": "x"})
    with pytest.raises(ValidationError):
        create_custom_profile("keys", {"voice": {"tone": "sarcastic"}})


def test_validate_custom_profile_reports_errors() -> None:
    result = validate_custom_profile({"id": "x"})
    assert not result.valid
    assert result.profile is None
    assert result.errors
