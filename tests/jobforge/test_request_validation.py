from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from autopilot.core.envelopes import batch_job_requests, create_job_request, iso_timestamp
from autopilot.core.schema import JobPolicy
from autopilot.jobforge.validation import (
    SCHEMA_VIOLATION,
    is_valid_batch,
    is_valid_request,
    validate_batch,
    validate_request,
)

TENANT = {"tenant_id": "tenant-123", "project_id": "project-456"}
NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
LINK = {"type": "finding", "id": "f-1", "description": "Missing meta description"}


def _req(**kwargs):
    kwargs.setdefault("evidence_links", [LINK])
    return create_job_request("autopilot.growth.seo_scan", TENANT, {"url": "u"}, **kwargs)


def _in(hours: float) -> str:
    return iso_timestamp(NOW + timedelta(hours=hours))


def test_clean_request_has_no_issues() -> None:
    result = validate_request(_req(expires_at=_in(24)), now=NOW)
    assert result.valid
    assert result.issues == []


def test_warnings_do_not_invalidate() -> None:
    req = create_job_request(
        "autopilot.growth.seo_scan",
        TENANT,
        {"url": "u"},
        priority="high",
        policy=JobPolicy(requires_policy_token=False),
    )
    result = validate_request(req, now=NOW)
    assert result.valid
    assert result.codes == ["POLICY_WARNING", "COST_WARNING", "EVIDENCE_WARNING"]
    assert result.errors == []
    assert [w.path for w in result.warnings] == [
        "policy.requires_policy_token",
        "cost_estimate",
        "evidence_links",
    ]


def test_cost_estimate_silences_cost_warning() -> None:
    req = _req(priority="high", cost_estimate={"credits": 10, "confidence": "high"})
    assert "COST_WARNING" not in validate_request(req, now=NOW).codes


@pytest.mark.parametrize(
    ("hours", "code", "valid"),
    [
        (0.5, "EXPIRATION_ERROR", False),
        (-2, "EXPIRATION_ERROR", False),
        (200, "EXPIRATION_WARNING", True),
    ],
)
def test_expiration_rules(hours: float, code: str, valid: bool) -> None:
    result = validate_request(_req(expires_at=_in(hours)), now=NOW)
    assert code in result.codes
    assert result.valid is valid


@pytest.mark.parametrize("hours", [1, 168])
def test_expiration_bounds_are_inclusive(hours: float) -> None:
    result = validate_request(_req(expires_at=_in(hours)), now=NOW)
    assert result.issues == []


def test_schema_violations_are_reported_not_raised() -> None:
    result = validate_request({"job_type": "autopilot.growth.seo_scan"})
    assert not result.valid
    assert set(result.codes) == {SCHEMA_VIOLATION}
    assert "version" in {i.path for i in result.issues}
    assert not is_valid_request({"job_type": "nope"})
    assert is_valid_request(_req())


def test_batch_prefixes_request_paths() -> None:
    batch = batch_job_requests([_req(), _req(evidence_links=[])])
    result = validate_batch(batch, now=NOW)
    assert result.valid
    assert [i.path for i in result.issues] == ["requests[1].evidence_links"]
    assert is_valid_batch(batch)


def test_batch_errors_propagate() -> None:
    batch = batch_job_requests([_req(), _req(expires_at=_in(0.1))])
    result = validate_batch(batch, now=NOW)
    assert not result.valid
    assert result.errors[0].path == "requests[1].expires_at"


def test_large_batch_warning() -> None:
    batch = batch_job_requests([_req() for _ in range(101)])
    result = validate_batch(batch, now=NOW)
    assert result.valid
    assert result.codes == ["BATCH_SIZE_WARNING"]


def test_invalid_batch_mapping() -> None:
    result = validate_batch({"requests": []})
    assert not result.valid
    assert set(result.codes) == {SCHEMA_VIOLATION}
