"""
Factories and pure update helpers for autopilot envelopes.

Builds validated tenant contexts, evidence, event envelopes, job requests, batches,
reports and profiles. Every update helper returns a new model and leaves its input
untouched. Clock and uuid reads happen only here, never in canonicalization.

Notes:
    - Timestamps are written as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC, millisecond precision).
    - Validation helpers return result objects instead of raising; factories raise
      pydantic.ValidationError or a ContractError subclass.

Examples:
    >>> from autopilot.core.envelopes import create_job_request, batch_job_requests
    >>> tenant = {"tenant_id": "tenant-123", "project_id": "project-456"}
    >>> req = create_job_request("autopilot.growth.seo_scan", tenant, {"url": "https://example.com"})
    >>> req.policy.requires_policy_token
    True
    >>> len(batch_job_requests([req]).requests)
    1
"""

from __future__ import annotations

import secrets
import time
import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from .errors import EmptyBatchError, TenantMismatchError
from .grammar import RecommendationAction, max_severity
from .schema import (
    CostEstimate,
    Evidence,
    EvidenceCollection,
    EventEnvelope,
    EvidenceLink,
    JobPolicy,
    JobRequest,
    JobRequestBatch,
    ModuleInfo,
    Profile,
    Recommendation,
    ReportEnvelope,
    TenantContext,
)
from .versioning import CONTRACT_VERSION

__all__ = [
    "iso_timestamp",
    "format_validation_errors",
    "TenantValidation",
    "ProfileValidation",
    "create_tenant_context",
    "validate_tenant_context",
    "create_evidence",
    "aggregate_severity",
    "collect_evidence",
    "create_event_envelope",
    "mark_event_processed",
    "create_job_request",
    "batch_job_requests",
    "serialize_job_request",
    "serialize_job_batch",
    "create_report_envelope",
    "add_recommendation",
    "add_evidence",
    "add_job_request",
    "validate_profile",
    "extend_profile",
]


def iso_timestamp(when: datetime | None = None) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Examples:
        >>> iso_timestamp(datetime(2000, 1, 1, tzinfo=timezone.utc))
        '2000-01-01T00:00:00.000Z'
    """
    when = when or datetime.now(timezone.utc)
    return when.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _local_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(3)[:5]}"


def format_validation_errors(exc: ValidationError) -> list[str]:
    """Render pydantic errors as ``"dotted.path: message"`` strings."""
    return [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    ]


@dataclass(frozen=True)
class TenantValidation:
    valid: bool
    context: TenantContext | None = None
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProfileValidation:
    valid: bool
    profile: Profile | None = None
    errors: list[str] = field(default_factory=list)


def _tenant(tenant_context: TenantContext | Mapping[str, Any]) -> TenantContext:
    if isinstance(tenant_context, TenantContext):
        return TenantContext(
            tenant_id=tenant_context.tenant_id, project_id=tenant_context.project_id
        )
    return TenantContext.model_validate(dict(tenant_context))


# ============================================================================
# Tenancy
# ============================================================================


def create_tenant_context(tenant_id: str, project_id: str) -> TenantContext:
    """
    Build a validated tenant context.

    Raises:
        pydantic.ValidationError: If either identifier is empty or longer than 256 chars.
    """
    return TenantContext(tenant_id=tenant_id, project_id=project_id)


def validate_tenant_context(context: Any) -> TenantValidation:
    """
    Validate an untrusted tenant context.

    Returns:
        TenantValidation: ``valid`` with the parsed context, or the error strings.
    """
    try:
        parsed = TenantContext.model_validate(context)
    except ValidationError as e:
        return TenantValidation(valid=False, errors=format_validation_errors(e))
    return TenantValidation(valid=True, context=parsed)


# ============================================================================
# Evidence
# ============================================================================


def create_evidence(
    signal: str,
    severity: str,
    description: str,
    *,
    location: str | None = None,
    raw_value: Any = None,
) -> Evidence:
    """
    Create signal evidence with a fresh id and collection time.

    Args:
        signal (str): Identifier of the signal; recorded as the evidence source.
        severity (str): Severity wire value.
        description (str): Human-readable description.
        location (str | None): Where the signal was observed.
        raw_value (Any): Raw JSON snapshot.

    Returns:
        Evidence: Evidence of type "signal".
    """
    return Evidence(
        id=_local_id("ev"),
        type="signal",
        description=description,
        severity=severity,
        location=location,
        raw_value=raw_value,
        collected_at=iso_timestamp(),
        source=signal,
    )


def aggregate_severity(evidence: Iterable[Evidence]) -> str:
    """
    Highest severity across evidence items; "info" when there are none.

    Examples:
        >>> aggregate_severity([])
        'info'
    """
    return max_severity(e.severity for e in evidence).value


def collect_evidence(
    items: Iterable[Evidence | Mapping[str, Any]], summary: str | None = None
) -> EvidenceCollection:
    """Wrap evidence items in a collection whose ``total`` is the item count."""
    evidence = list(items)
    return EvidenceCollection.model_validate(
        {"items": evidence, "total": len(evidence), "summary": summary}
    )


# ============================================================================
# Events
# ============================================================================


def create_event_envelope(
    event_type: Any,
    tenant_context: TenantContext | Mapping[str, Any],
    payload: Mapping[str, Any],
    *,
    source: Mapping[str, Any] | None = None,
    priority: Any = "normal",
    correlation_id: str | None = None,
    evidence: Sequence[Evidence] | None = None,
) -> EventEnvelope:
    """
    Wrap an inbound signal in a validated event envelope.

    A missing source defaults to ``{"system": "autopilot.unknown"}`` and a missing
    correlation id to a fresh UUID.
    """
    return EventEnvelope(
        version=CONTRACT_VERSION,
        event_id=str(uuid.uuid4()),
        event_type=event_type,
        tenant_context=_tenant(tenant_context),
        timestamp=iso_timestamp(),
        payload=dict(payload),
        evidence=list(evidence or []),
        source=dict(source) if source is not None else {"system": "autopilot.unknown"},
        priority=priority,
        correlation_id=correlation_id or str(uuid.uuid4()),
        processed=False,
    )


def mark_event_processed(envelope: EventEnvelope, processor: str) -> EventEnvelope:
    """Return a copy of the envelope marked processed by ``processor`` now."""
    return envelope.model_copy(
        update={"processed": True, "processed_at": iso_timestamp(), "processed_by": processor}
    )


# ============================================================================
# Jobs
# ============================================================================


def create_job_request(
    job_type: Any,
    tenant_context: TenantContext | Mapping[str, Any],
    payload: Mapping[str, Any] | None = None,
    *,
    priority: Any = "normal",
    evidence_links: Sequence[EvidenceLink | Mapping[str, Any]] | None = None,
    cost_estimate: CostEstimate | Mapping[str, Any] | None = None,
    expires_at: str | None = None,
    policy: JobPolicy | Mapping[str, Any] | None = None,
    metadata: Mapping[str, Any] | None = None,
    requested_at: str | None = None,
) -> JobRequest:
    """
    Create a validated job request.

    The default policy requires both a policy token and human approval.

    Args:
        job_type (Any): JobType member or wire value.
        tenant_context (TenantContext | Mapping[str, Any]): Tenant scope.
        payload (Mapping[str, Any] | None): Job-specific JSON data.
        priority (Any): Priority member or wire value.
        evidence_links (Sequence | None): Links to motivating evidence.
        cost_estimate (CostEstimate | Mapping | None): Estimated credits.
        expires_at (str | None): ISO-8601 expiry.
        policy (JobPolicy | Mapping | None): Overrides the default policy.
        metadata (Mapping[str, Any] | None): Free-form metadata.
        requested_at (str | None): Request time; now when omitted.

    Returns:
        JobRequest: Validated request.

    Raises:
        pydantic.ValidationError: If any field violates the schema.
    """
    return JobRequest.model_validate(
        {
            "version": CONTRACT_VERSION,
            "job_type": job_type,
            "tenant_context": _tenant(tenant_context),
            "priority": priority,
            "requested_at": requested_at or iso_timestamp(),
            "expires_at": expires_at,
            "payload": dict(payload or {}),
            "evidence_links": list(evidence_links or []),
            "cost_estimate": cost_estimate,
            "policy": policy if policy is not None else JobPolicy(),
            "metadata": dict(metadata or {}),
        }
    )


def batch_job_requests(requests: Sequence[JobRequest]) -> JobRequestBatch:
    """
    Group requests that share one tenant context into a batch.

    Raises:
        EmptyBatchError: If requests is empty.
        TenantMismatchError: If any request has a different tenant context.
    """
    if not requests:
        raise EmptyBatchError("Cannot create empty batch")
    tenant = requests[0].tenant_context
    for req in requests[1:]:
        if req.tenant_context != tenant:
            raise TenantMismatchError("All requests in batch must have same tenant_context")
    return JobRequestBatch(
        batch_id=str(uuid.uuid4()),
        tenant_context=tenant,
        requests=list(requests),
        created_at=iso_timestamp(),
    )


def serialize_job_request(request: JobRequest) -> str:
    """Pretty JSON (two-space indent) for transport or inspection; not for hashing."""
    return request.model_dump_json(indent=2)


def serialize_job_batch(batch: JobRequestBatch) -> str:
    return batch.model_dump_json(indent=2)


# ============================================================================
# Reports
# ============================================================================


def create_report_envelope(
    report_type: Any,
    tenant_context: TenantContext | Mapping[str, Any],
    module: ModuleInfo | Mapping[str, Any],
) -> ReportEnvelope:
    """Start an empty report: zeroed summary, no evidence or recommendations."""
    return ReportEnvelope(
        version=CONTRACT_VERSION,
        report_id=str(uuid.uuid4()),
        report_type=report_type,
        tenant_context=_tenant(tenant_context),
        module=module if isinstance(module, ModuleInfo) else ModuleInfo.model_validate(module),
        generated_at=iso_timestamp(),
    )


def add_recommendation(
    envelope: ReportEnvelope, recommendation: Recommendation | Mapping[str, Any]
) -> ReportEnvelope:
    """
    Return a copy of the report with one more recommendation.

    A missing id is generated. Recommendation counters, the actionable count (every
    action except "observe") and the severity histogram are updated.
    """
    if isinstance(recommendation, Recommendation):
        rec = recommendation
    else:
        data = dict(recommendation)
        if not data.get("id"):
            data["id"] = _local_id("rec")
        rec = Recommendation.model_validate(data)

    summary = envelope.summary
    by_severity = dict(summary.by_severity)
    by_severity[rec.severity] = by_severity.get(rec.severity, 0) + 1
    actionable = 0 if rec.action == RecommendationAction.OBSERVE.value else 1
    new_summary = summary.model_copy(
        update={
            "total_recommendations": summary.total_recommendations + 1,
            "actionable_count": summary.actionable_count + actionable,
            "by_severity": by_severity,
        }
    )
    return envelope.model_copy(
        update={"recommendations": [*envelope.recommendations, rec], "summary": new_summary}
    )


def add_evidence(envelope: ReportEnvelope, evidence: Evidence) -> ReportEnvelope:
    """Return a copy of the report with the evidence appended and counted as a finding."""
    summary = envelope.summary
    by_severity = dict(summary.by_severity)
    by_severity[evidence.severity] = by_severity.get(evidence.severity, 0) + 1
    new_summary = summary.model_copy(
        update={"total_findings": summary.total_findings + 1, "by_severity": by_severity}
    )
    return envelope.model_copy(
        update={"evidence": [*envelope.evidence, evidence], "summary": new_summary}
    )


def add_job_request(envelope: ReportEnvelope, job_request: JobRequest) -> ReportEnvelope:
    return envelope.model_copy(update={"job_requests": [*envelope.job_requests, job_request]})


# ============================================================================
# Profiles
# ============================================================================


def validate_profile(profile: Any) -> ProfileValidation:
    """Validate an untrusted profile mapping."""
    try:
        parsed = Profile.model_validate(profile)
    except ValidationError as e:
        return ProfileValidation(valid=False, errors=format_validation_errors(e))
    return ProfileValidation(valid=True, profile=parsed)


def extend_profile(base: Profile, overrides: Profile | Mapping[str, Any]) -> Profile:
    """
    Layer a partial profile over a base profile.

    Scalars and ``icp`` fields are overridden; vocabulary, keyword and prohibited-claim
    lists are concatenated (base first); ``features`` is replaced when given.

    Raises:
        pydantic.ValidationError: If the merged profile is invalid.
    """
    b = base.model_dump()
    o = overrides.model_dump(exclude_unset=True) if isinstance(overrides, Profile) else dict(overrides)

    o_voice = o.get("voice") or {}
    o_vocab = o_voice.get("vocabulary") or {}
    o_keywords = o.get("keywords") or {}

    extended = {**b, **o}
    extended["icp"] = {**b["icp"], **(o.get("icp") or {})}
    extended["voice"] = {
        **b["voice"],
        **o_voice,
        "vocabulary": {
            "preferred": b["voice"]["vocabulary"]["preferred"] + list(o_vocab.get("preferred", [])),
            "avoid": b["voice"]["vocabulary"]["avoid"] + list(o_vocab.get("avoid", [])),
        },
    }
    extended["keywords"] = {
        **b["keywords"],
        **o_keywords,
        **{
            name: b["keywords"][name] + list(o_keywords.get(name, []))
            for name in ("primary", "secondary", "negative")
        },
    }
    extended["features"] = o.get("features", b["features"])
    extended["prohibited_claims"] = b["prohibited_claims"] + list(o.get("prohibited_claims", []))
    return Profile.model_validate(extended)
