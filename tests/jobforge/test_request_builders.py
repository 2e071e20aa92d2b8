from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from autopilot.core.envelopes import create_evidence
from autopilot.core.errors import BuilderError
from autopilot.core.grammar import JobType
from autopilot.jobforge.builders import QuickBuilders, build_request

TENANT = {"tenant_id": "tenant-123", "project_id": "project-456"}


def test_fluent_chain() -> None:
    req = (
        build_request()
        .for_job(JobType.GROWTH_SEO_SCAN)
        .for_tenant("tenant-123", "project-456")
        .with_payload({"url": "https://example.com"})
        .add_payload_field("depth", 2)
        .with_priority("high")
        .with_evidence("finding", "f-1", "Missing meta description")
        .with_cost_estimate(100, "high")
        .expires_at_date(datetime(2026, 2, 1, tzinfo=timezone.utc))
        .with_metadata("trace_id", "trace-1")
        .build()
    )
    assert req.job_type == "autopilot.growth.seo_scan"
    assert req.payload == {"url": "https://example.com", "depth": 2}
    assert req.priority == "high"
    assert req.evidence_links[0].id == "f-1"
    assert req.cost_estimate is not None and req.cost_estimate.credits == 100
    assert req.expires_at == "2026-02-01T00:00:00.000Z"
    assert req.metadata == {"trace_id": "trace-1"}


def test_evidence_object_and_tenant_context() -> None:
    ev = create_evidence("lighthouse.score", "warning", "Score dropped")
    req = (
        build_request()
        .for_job("autopilot.growth.seo_scan")
        .with_tenant_context(TENANT)
        .with_evidence_object(ev)
        .expires_in(12)
        .build()
    )
    assert req.evidence_links[0].id == ev.id
    assert req.evidence_links[0].type == "signal"
    assert req.expires_at is not None


@pytest.mark.parametrize(
    ("builder", "message"),
    [
        (lambda: build_request().for_tenant("t", "p"), "Job type is required"),
        (lambda: build_request().for_job("autopilot.growth.seo_scan"), "Tenant context is required"),
    ],
)
def test_build_requires_job_and_tenant(builder, message: str) -> None:
    with pytest.raises(BuilderError, match=message):
        builder().build()


def test_unknown_job_type_fails_schema() -> None:
    with pytest.raises(ValidationError):
        build_request().for_job("autopilot.growth.nope").for_tenant("t", "p").build()


def test_quick_seo_scan() -> None:
    ev = create_evidence("crawl", "info", "Page crawled")
    req = QuickBuilders.seo_scan(TENANT, "https://example.com", evidence=[ev])
    assert req.job_type == "autopilot.growth.seo_scan"
    assert req.payload == {"url": "https://example.com"}
    assert [link.id for link in req.evidence_links] == [ev.id]


def test_quick_content_draft_defaults() -> None:
    req = QuickBuilders.content_draft(TENANT, "blog_post", "awareness")
    assert req.job_type == "autopilot.growth.content_draft"
    assert req.payload == {
        "content_type": "blog_post",
        "goal": "awareness",
        "profile_id": "base",
        "variants": 3,
    }


def test_quick_experiment_proposal() -> None:
    req = QuickBuilders.experiment_proposal(TENANT, {"visits": 1000}, priority="low")
    assert req.job_type == "autopilot.growth.experiment_propose"
    assert req.payload == {"funnel_data": {"visits": 1000}, "max_proposals": 5}
    assert req.priority == "low"
