from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from autopilot.core.canonical import UNDEFINED
from autopilot.core.envelopes import create_job_request
from autopilot.core.grammar import JobType
from autopilot.core.schema import JobPolicy
from autopilot.jobforge.idempotency import (
    IDEMPOTENCY_METADATA_KEY,
    attach_idempotency_key,
    derive_idempotency_key,
    idempotency_projection,
)

TENANT = {"tenant_id": "tenant-123", "project_id": "project-456"}


def _req(**kwargs):
    kwargs.setdefault("payload", {"url": "https://example.com"})
    return create_job_request("autopilot.growth.seo_scan", TENANT, **kwargs)


def test_requested_at_does_not_change_the_key() -> None:
    a = _req(requested_at="2026-01-15T10:00:00.000Z")
    b = _req(requested_at="2026-03-01T23:59:59.999Z")
    assert derive_idempotency_key(a) == derive_idempotency_key(b)


def test_clock_and_metadata_fields_are_excluded() -> None:
    a = _req(expires_at="2026-01-16T10:00:00.000Z", metadata={"trace": "1"}, priority="low")
    b = _req(metadata={"trace": "2"}, priority="high", cost_estimate={"credits": 5})
    assert derive_idempotency_key(a) == derive_idempotency_key(b)


def test_identity_fields_change_the_key() -> None:
    base = derive_idempotency_key(_req())
    assert derive_idempotency_key(_req(payload={"url": "https://other.example"})) != base
    assert derive_idempotency_key(_req(policy=JobPolicy(requires_approval=False))) != base
    other_tenant = create_job_request(
        "autopilot.growth.seo_scan",
        {"tenant_id": "tenant-999", "project_id": "project-456"},
        {"url": "https://example.com"},
    )
    assert derive_idempotency_key(other_tenant) != base


def test_payload_key_order_is_irrelevant() -> None:
    a = _req(payload={"a": 1, "b": {"c": 2, "d": 3}})
    b = _req(payload={"b": {"d": 3, "c": 2}, "a": 1})
    assert derive_idempotency_key(a) == derive_idempotency_key(b)


def test_model_and_mapping_agree() -> None:
    req = _req()
    assert derive_idempotency_key(req) == derive_idempotency_key(req.model_dump(mode="json"))


def test_projection_fields() -> None:
    projection = idempotency_projection(_req())
    assert sorted(projection) == ["job_type", "payload", "policy", "tenant_context"]
    assert projection["policy"] == JobPolicy().model_dump(mode="json")


def test_invalid_mapping_is_rejected() -> None:
    with pytest.raises(ValidationError):
        idempotency_projection({"job_type": "autopilot.growth.seo_scan"})


def test_attach_key_records_it_without_changing_it() -> None:
    req = _req()
    updated, key = attach_idempotency_key(req)
    assert re.fullmatch(r"[a-f0-9]{64}", key)
    assert updated.metadata[IDEMPOTENCY_METADATA_KEY] == key
    assert IDEMPOTENCY_METADATA_KEY not in req.metadata
    assert derive_idempotency_key(updated) == key


def test_mapping_without_defaults_keys_like_the_model() -> None:
    req = _req(requested_at="2026-01-15T10:00:00.000Z")
    sparse = {
        "version": req.version,
        "job_type": req.job_type,
        "tenant_context": TENANT,
        "requested_at": req.requested_at,
        "payload": {"url": "https://example.com"},
    }
    assert derive_idempotency_key(sparse) == derive_idempotency_key(req)


def test_mapping_job_type_member_is_normalized() -> None:
    data = _req().model_dump(mode="json")
    data["job_type"] = JobType.GROWTH_SEO_SCAN
    assert derive_idempotency_key(data) == derive_idempotency_key(_req())


def test_undefined_in_payload_keys_like_null() -> None:
    with_marker = _req(
        payload={"url": "https://example.com", "ref": UNDEFINED, "tags": [UNDEFINED]}
    )
    with_null = _req(payload={"url": "https://example.com", "ref": None, "tags": [None]})
    assert derive_idempotency_key(with_marker) == derive_idempotency_key(with_null)
    assert with_marker.model_dump(mode="json")["payload"] == {
        "url": "https://example.com",
        "ref": None,
        "tags": [None],
    }


def test_undefined_in_mapping_payload_keys_like_null() -> None:
    data = _req().model_dump(mode="json")
    data["payload"] = {"url": "https://example.com", "ref": UNDEFINED}
    expected = _req(payload={"url": "https://example.com", "ref": None})
    assert derive_idempotency_key(data) == derive_idempotency_key(expected)
