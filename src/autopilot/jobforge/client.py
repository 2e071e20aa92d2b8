"""
Request-generator client.

`JobForgeClient` turns job types and payloads into validated `JobRequest` models, batches
and serializes them. It has no endpoints and no credentials: requests are generated
here and executed elsewhere, after policy and approval gates.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from ..core.constants import DEFAULT_EXPIRATION_HOURS
from ..core.envelopes import (
    batch_job_requests,
    create_job_request,
    iso_timestamp,
    serialize_job_batch,
    serialize_job_request,
)
from ..core.errors import BuilderError
from ..core.schema import (
    CostEstimate,
    EvidenceLink,
    JobPolicy,
    JobRequest,
    JobRequestBatch,
    TenantContext,
)
from .validation import ValidationResult, validate_batch, validate_request

__all__ = [
    "ClientConfig",
    "JobForgeClient",
    "create_client",
    "expires_in",
]

logger = logging.getLogger(__name__)


def expires_in(hours: float, now: datetime | None = None) -> str:
    """ISO-8601 timestamp ``hours`` from now (or from ``now``)."""
    start = now or datetime.now(timezone.utc)
    return iso_timestamp(start + timedelta(hours=hours))


@dataclass(frozen=True)
class ClientConfig:
    """
    Defaults applied by `JobForgeClient.create_request`.

    Attributes:
        default_tenant_context (TenantContext | None): Used when a call gives none.
        default_priority (str): Priority wire value; "normal".
        require_policy_token (bool): Value of ``policy.requires_policy_token``; True.
        default_expiration_hours (float | None): Expiry horizon; 24. None leaves
            requests without ``expires_at``.
    """

    default_tenant_context: TenantContext | None = None
    default_priority: str = "normal"
    require_policy_token: bool = True
    default_expiration_hours: float | None = DEFAULT_EXPIRATION_HOURS


class JobForgeClient:
    """
    Generate validated job requests with per-client defaults.

    Examples:
        >>> client = JobForgeClient(ClientConfig(
        ...     default_tenant_context=TenantContext(tenant_id="t1", project_id="p1")))
        >>> req = client.create_request("autopilot.growth.seo_scan", {"url": "https://example.com"})
        >>> req.priority, req.expires_at is not None
        ('normal', True)
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        self.config = config or ClientConfig()

    def create_request(
        self,
        job_type: Any,
        payload: Mapping[str, Any],
        *,
        tenant_context: TenantContext | Mapping[str, Any] | None = None,
        priority: Any = None,
        evidence_links: Sequence[EvidenceLink | Mapping[str, Any]] | None = None,
        cost_estimate: CostEstimate | Mapping[str, Any] | None = None,
        expires_in_hours: float | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> JobRequest:
        """
        Create a job request, filling gaps from the client config.

        Raises:
            BuilderError: If neither the call nor the config provides a tenant context.
            pydantic.ValidationError: If any field violates the schema.
        """
        tenant = tenant_context
        if tenant is None:
            tenant = self.config.default_tenant_context
        if tenant is None:
            raise BuilderError("Tenant context is required (provide in options or config)")

        hours = expires_in_hours
        if hours is None:
            hours = self.config.default_expiration_hours
        request = create_job_request(
            job_type,
            tenant,
            payload,
            priority=priority if priority is not None else self.config.default_priority,
            evidence_links=evidence_links,
            cost_estimate=cost_estimate,
            expires_at=expires_in(hours) if hours is not None else None,
            policy=JobPolicy(requires_policy_token=self.config.require_policy_token),
            metadata=metadata,
        )
        logger.debug("created job request", extra={"job_type": request.job_type})
        return request

    def batch_requests(self, requests: Sequence[JobRequest]) -> JobRequestBatch:
        return batch_job_requests(requests)

    def serialize(self, request: JobRequest) -> str:
        return serialize_job_request(request)

    def serialize_batch(self, batch: JobRequestBatch) -> str:
        return serialize_job_batch(batch)

    def validate(self, request: Any) -> ValidationResult:
        return validate_request(request)

    def validate_batch(self, batch: Any) -> ValidationResult:
        return validate_batch(batch)


def create_client(config: ClientConfig | None = None) -> JobForgeClient:
    return JobForgeClient(config)
