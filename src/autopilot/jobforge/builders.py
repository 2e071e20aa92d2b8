"""
Fluent job request builder and shortcuts for common growth jobs.

Examples:
    >>> from autopilot.jobforge.builders import build_request
    >>> req = (
    ...     build_request()
    ...     .for_job("autopilot.growth.seo_scan")
    ...     .for_tenant("tenant-123", "project-456")
    ...     .with_payload({"url": "https://example.com"})
    ...     .with_evidence("finding", "f-1", "Missing meta description")
    ...     .with_cost_estimate(100, "high")
    ...     .build()
    ... )
    >>> req.evidence_links[0].id
    'f-1'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from ..core.envelopes import create_job_request, iso_timestamp
from ..core.errors import BuilderError
from ..core.grammar import JobType
from ..core.schema import CostEstimate, Evidence, EvidenceLink, JobRequest, TenantContext
from .client import expires_in

__all__ = [
    "RequestBuilder",
    "build_request",
    "QuickBuilders",
]


class RequestBuilder:
    """
    Accumulate job request fields, then ``build()`` a validated `JobRequest`.

    Every ``for_*`` / ``with_*`` / ``add_*`` / ``expires_*`` method returns the builder.
    """

    def __init__(self) -> None:
        self._job_type: Any = None
        self._tenant_context: TenantContext | None = None
        self._payload: dict[str, Any] = {}
        self._priority: Any = "normal"
        self._evidence_links: list[EvidenceLink] = []
        self._cost_estimate: CostEstimate | None = None
        self._expires_at: str | None = None
        self._metadata: dict[str, Any] = {}

    def for_job(self, job_type: Any) -> RequestBuilder:
        self._job_type = job_type
        return self

    def for_tenant(self, tenant_id: str, project_id: str) -> RequestBuilder:
        self._tenant_context = TenantContext(tenant_id=tenant_id, project_id=project_id)
        return self

    def with_tenant_context(self, context: TenantContext | Mapping[str, Any]) -> RequestBuilder:
        self._tenant_context = (
            context if isinstance(context, TenantContext) else TenantContext.model_validate(context)
        )
        return self

    def with_payload(self, payload: Mapping[str, Any]) -> RequestBuilder:
        self._payload = dict(payload)
        return self

    def add_payload_field(self, key: str, value: Any) -> RequestBuilder:
        self._payload[key] = value
        return self

    def with_priority(self, priority: Any) -> RequestBuilder:
        self._priority = priority
        return self

    def with_evidence(self, type: str, id: str, description: str) -> RequestBuilder:
        self._evidence_links.append(EvidenceLink(type=type, id=id, description=description))
        return self

    def with_evidence_object(self, evidence: Evidence) -> RequestBuilder:
        return self.with_evidence(evidence.type, evidence.id, evidence.description)

    def with_cost_estimate(self, credits: int | float, confidence: str = "medium") -> RequestBuilder:
        self._cost_estimate = CostEstimate(credits=credits, confidence=confidence)
        return self

    def expires_in(self, hours: float) -> RequestBuilder:
        self._expires_at = expires_in(hours)
        return self

    def expires_at_date(self, when: datetime) -> RequestBuilder:
        self._expires_at = iso_timestamp(when)
        return self

    def with_metadata(self, key: str, value: Any) -> RequestBuilder:
        self._metadata[key] = value
        return self

    def build(self) -> JobRequest:
        """
        Validate and return the job request.

        Raises:
            BuilderError: If the job type or tenant context was never set.
            pydantic.ValidationError: If a field violates the schema.
        """
        if not self._job_type:
            raise BuilderError("Job type is required (use .for_job())")
        if self._tenant_context is None:
            raise BuilderError(
                "Tenant context is required (use .for_tenant() or .with_tenant_context())"
            )
        return create_job_request(
            self._job_type,
            self._tenant_context,
            self._payload,
            priority=self._priority,
            evidence_links=self._evidence_links,
            cost_estimate=self._cost_estimate,
            expires_at=self._expires_at,
            metadata=self._metadata,
        )


def build_request() -> RequestBuilder:
    return RequestBuilder()


def _links(evidence: Sequence[Evidence] | None) -> list[EvidenceLink]:
    return [EvidenceLink(type=e.type, id=e.id, description=e.description) for e in evidence or []]


class QuickBuilders:
    """Ready-made requests for the growth job types."""

    @staticmethod
    def seo_scan(
        tenant_context: TenantContext | Mapping[str, Any],
        url: str,
        *,
        priority: Any = "normal",
        evidence: Sequence[Evidence] | None = None,
    ) -> JobRequest:
        return create_job_request(
            JobType.GROWTH_SEO_SCAN,
            tenant_context,
            {"url": url},
            priority=priority,
            evidence_links=_links(evidence),
        )

    @staticmethod
    def content_draft(
        tenant_context: TenantContext | Mapping[str, Any],
        content_type: str,
        goal: str,
        *,
        priority: Any = "normal",
        profile_id: str = "base",
        variants: int = 3,
    ) -> JobRequest:
        return create_job_request(
            JobType.GROWTH_CONTENT_DRAFT,
            tenant_context,
            {
                "content_type": content_type,
                "goal": goal,
                "profile_id": profile_id,
                "variants": variants,
            },
            priority=priority,
        )

    @staticmethod
    def experiment_proposal(
        tenant_context: TenantContext | Mapping[str, Any],
        funnel_data: Mapping[str, Any],
        *,
        priority: Any = "normal",
        max_proposals: int = 5,
    ) -> JobRequest:
        return create_job_request(
            JobType.GROWTH_EXPERIMENT_PROPOSE,
            tenant_context,
            {"funnel_data": dict(funnel_data), "max_proposals": max_proposals},
            priority=priority,
        )
