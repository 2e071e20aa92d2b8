"""
Pydantic v2 models for autopilot contracts: tenant context, evidence, events, job
requests, reports, redaction configuration, and profiles. Validators normalize enum-like
fields through grammar helpers and check identifiers, versions and timestamps.

Responsibilities
- Define the canonical Pydantic models every autopilot module exchanges.
- Normalize enum-like strings to their wire values via grammar helpers.
- Keep timestamps as ISO-8601 strings so serialized payloads (and their hashes) round-trip
  byte-for-byte.

Style
- Zero-IO (stdlib + pydantic only).
- Enum-like fields are typed ``str`` and hold the wire value; enum members are accepted
  on input.
- ``extra="forbid"`` everywhere: unknown keys are schema violations.

References
- grammar: src/autopilot/core/grammar.py (enums, normalization helpers)
- errors: src/autopilot/core/errors.py (GrammarError)
- helpers: src/autopilot/core/envelopes.py (factories and pure update helpers)
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .canonical import undefined_as_null
from .errors import GrammarError
from .grammar import (
    Environment,
    Seniority,
    cost_confidence_from_value,
    event_type_from_value,
    evidence_type_from_value,
    job_type_from_value,
    priority_from_value,
    recommendation_action_from_value,
    redaction_severity_from_value,
    redaction_strategy_from_value,
    report_type_from_value,
    risk_level_from_value,
    severity_from_value,
    voice_tone_from_value,
)

__all__ = [
    # Tenancy
    "TenantContext",
    "ExtendedTenantContext",
    # Evidence
    "Evidence",
    "EvidenceCollection",
    # Events
    "EventSource",
    "EventEnvelope",
    # Jobs
    "EvidenceLink",
    "CostEstimate",
    "JobPolicy",
    "JobRequest",
    "JobRequestBatch",
    # Reports
    "Recommendation",
    "ReportSummary",
    "ModuleInfo",
    "TimeRange",
    "ReportMetadata",
    "ReportRedactionHint",
    "ReportEnvelope",
    # Redaction
    "RedactionHint",
    "RedactionPattern",
    "RedactionConfig",
    "DEFAULT_SENSITIVE_FIELDS",
    # Profiles
    "ICP",
    "Vocabulary",
    "Voice",
    "Keywords",
    "Feature",
    "Profile",
    "ProfileRegistry",
    # Field checks
    "check_iso_datetime",
    "check_semver",
    "check_uuid",
]

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def check_iso_datetime(v: Any, what: str = "timestamp") -> Any:
    """
    Validate an ISO-8601 datetime string and return it unchanged.

    Args:
        v (Any): Candidate value; ``None`` passes through for optional fields.
        what (str): Label used in the error message.

    Raises:
        ValueError: If v is not a string parseable by ``datetime.fromisoformat``.
    """
    if v is None:
        return v
    if not isinstance(v, str) or "T" not in v:
        raise ValueError(f"{what} must be an ISO-8601 datetime string (got {v!r})")
    try:
        datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"{what} must be an ISO-8601 datetime string (got {v!r})") from e
    return v


def check_semver(v: Any) -> Any:
    """Validate a semantic version string (e.g. ``"1.0.0"``) and return it unchanged."""
    if not isinstance(v, str) or not _SEMVER_RE.match(v):
        raise ValueError(f"must be a valid semantic version, e.g. 1.0.0 (got {v!r})")
    return v


def check_uuid(v: Any) -> Any:
    """Validate a UUID string and return it unchanged."""
    try:
        uuid.UUID(str(v))
    except ValueError as e:
        raise ValueError(f"must be a UUID (got {v!r})") from e
    return v


def _normalize(parse: Any, v: Any) -> Any:
    if v is None:
        return v
    try:
        return parse(v).value
    except Exception as e:  # ValueError from grammar
        raise GrammarError(str(e)) from e


# ============================================================================
# Tenancy
# ============================================================================


class TenantContext(BaseModel):
    """
    Tenant and project scope required by every operation.

    Attributes:
        tenant_id (str): Tenant identifier, 1..256 characters.
        project_id (str): Project identifier within the tenant, 1..256 characters.

    Examples:
        >>> from autopilot.core.schema import TenantContext
        >>> TenantContext(tenant_id="tenant-123", project_id="project-456").tenant_id
        'tenant-123'
    """

    model_config = ConfigDict(extra="forbid")

    tenant_id: str = Field(min_length=1, max_length=256)
    project_id: str = Field(min_length=1, max_length=256)


class ExtendedTenantContext(TenantContext):
    """
    Tenant context with optional deployment metadata.

    Attributes:
        environment (str | None): One of {"development","staging","production"}.
        region (str | None): Free-form region label.
        metadata (dict[str, str] | None): String-valued labels.
    """

    environment: str | None = None
    region: str | None = None
    metadata: dict[str, str] | None = None

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, v: Any) -> Any:
        return _normalize(Environment, v)


# ============================================================================
# Evidence
# ============================================================================


class Evidence(BaseModel):
    """
    A signal that explains why a finding, recommendation or job request exists.

    Attributes:
        id (str): Unique evidence identifier.
        type (str): EvidenceType wire value.
        description (str): Human-readable description.
        location (str | None): Where the evidence was found (path, URL).
        severity (str): Severity wire value.
        raw_value (Any): Raw JSON snapshot of the evidence.
        collected_at (str | None): ISO-8601 collection time.
        source (str | None): Producing system or module.

    Raises:
        autopilot.core.errors.GrammarError: If type or severity is unknown.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    type: str
    description: str = Field(min_length=1)
    location: str | None = None
    severity: str
    raw_value: Any = None
    collected_at: str | None = None
    source: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        return _normalize(evidence_type_from_value, v)

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, v: Any) -> Any:
        return _normalize(severity_from_value, v)

    @field_validator("collected_at")
    @classmethod
    def _check_collected_at(cls, v: Any) -> Any:
        return check_iso_datetime(v, "collected_at")

    @field_validator("raw_value", mode="before")
    @classmethod
    def _null_undefined(cls, v: Any) -> Any:
        return undefined_as_null(v)


class EvidenceCollection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    items: list[Evidence]
    total: int = Field(ge=0)
    summary: str | None = None


# ============================================================================
# Events
# ============================================================================


class EventSource(BaseModel):
    model_config = ConfigDict(extra="forbid")

    system: str
    version: str | None = None
    instance_id: str | None = None


class EventEnvelope(BaseModel):
    """
    Inbound event wrapper consumed by autopilot modules.

    Attributes:
        version (str): Envelope semantic version.
        event_id (str): UUID.
        event_type (str): EventType wire value (e.g. "growth.page_scanned").
        tenant_context (TenantContext): Tenant scope.
        timestamp (str): ISO-8601 time the event occurred.
        payload (dict[str, Any]): Type-specific JSON data.
        evidence (list[Evidence]): Evidence links for traceability.
        source (EventSource): Producing system.
        correlation_id (str | None): Trace id for request chains.
        priority (str): Priority wire value; defaults to "normal".
        processed (bool): Whether a processor has handled the event.
        processed_at (str | None): ISO-8601 processing time.
        processed_by (str | None): Processor identifier.
    """

    model_config = ConfigDict(extra="forbid")

    version: str
    event_id: str
    event_type: str
    tenant_context: TenantContext
    timestamp: str
    payload: dict[str, Any]
    evidence: list[Evidence] = Field(default_factory=list)
    source: EventSource
    correlation_id: str | None = None
    priority: str = "normal"
    processed: bool = False
    processed_at: str | None = None
    processed_by: str | None = None

    @field_validator("version")
    @classmethod
    def _check_version(cls, v: Any) -> Any:
        return check_semver(v)

    @field_validator("event_id")
    @classmethod
    def _check_event_id(cls, v: Any) -> Any:
        return check_uuid(v)

    @field_validator("event_type", mode="before")
    @classmethod
    def _normalize_event_type(cls, v: Any) -> Any:
        """
        Normalize event_type using grammar.event_type_from_value.

        Raises:
            GrammarError: If not dotted lower_snake or unknown event type.
        """
        return _normalize(event_type_from_value, v)

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, v: Any) -> Any:
        return _normalize(priority_from_value, v)

    @field_validator("timestamp", "processed_at")
    @classmethod
    def _check_timestamps(cls, v: Any) -> Any:
        return check_iso_datetime(v)

    @field_validator("payload", mode="before")
    @classmethod
    def _null_undefined(cls, v: Any) -> Any:
        return undefined_as_null(v)


# ============================================================================
# Jobs
# ============================================================================


class EvidenceLink(BaseModel):
    """Reference from a job request back to the evidence that motivated it."""

    model_config = ConfigDict(extra="forbid")

    type: str
    id: str
    description: str


class CostEstimate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    credits: int | float
    confidence: str = "medium"

    @field_validator("credits")
    @classmethod
    def _check_credits(cls, v: int | float) -> int | float:
        if v < 0:
            raise ValueError(f"credits must be non-negative (got {v!r})")
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalize_confidence(cls, v: Any) -> Any:
        return _normalize(cost_confidence_from_value, v)


class JobPolicy(BaseModel):
    """
    Execution policy attached to every job request.

    Attributes:
        requires_policy_token (bool): Runner must present a policy token; default True.
        requires_approval (bool): A human must approve before execution; default True.
        risk_level (str): RiskLevel wire value; default "medium".
        required_scopes (list[str]): Scopes the runner must hold.
        compliance_tags (list[str]): Free-form compliance labels.
    """

    model_config = ConfigDict(extra="forbid")

    requires_policy_token: bool = True
    requires_approval: bool = True
    risk_level: str = "medium"
    required_scopes: list[str] = Field(default_factory=list)
    compliance_tags: list[str] = Field(default_factory=list)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _normalize_risk_level(cls, v: Any) -> Any:
        return _normalize(risk_level_from_value, v)


class JobRequest(BaseModel):
    """
    A request for a job to be run elsewhere. Autopilot generates these; it never runs them.

    Attributes:
        version (str): Contract semantic version.
        job_type (str): JobType wire value (e.g. "autopilot.growth.seo_scan").
        tenant_context (TenantContext): Tenant scope.
        priority (str): Priority wire value.
        requested_at (str): ISO-8601 request time.
        expires_at (str | None): ISO-8601 expiry.
        payload (dict[str, Any]): Job-specific JSON data.
        evidence_links (list[EvidenceLink]): Why the job was requested.
        cost_estimate (CostEstimate | None): Estimated credits.
        policy (JobPolicy): Execution policy; defaults require token and approval.
        metadata (dict[str, Any]): Free-form metadata (trace ids, idempotency key, ...).

    Notes:
        Only job_type, tenant_context, payload and policy feed the idempotency key; see
        autopilot.jobforge.idempotency.

    Raises:
        autopilot.core.errors.GrammarError: If job_type or priority is unknown.
        pydantic.ValidationError: For any other schema violation.
    """

    model_config = ConfigDict(extra="forbid")

    version: str
    job_type: str
    tenant_context: TenantContext
    priority: str = "normal"
    requested_at: str
    expires_at: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    evidence_links: list[EvidenceLink] = Field(default_factory=list)
    cost_estimate: CostEstimate | None = None
    policy: JobPolicy = Field(default_factory=JobPolicy)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("version")
    @classmethod
    def _check_version(cls, v: Any) -> Any:
        return check_semver(v)

    @field_validator("job_type", mode="before")
    @classmethod
    def _normalize_job_type(cls, v: Any) -> Any:
        """
        Normalize job_type using grammar.job_type_from_value.

        Args:
            v (Any): Proposed job type (JobType member or wire string).

        Returns:
            Any: Canonical wire value.

        Raises:
            GrammarError: If not dotted lower_snake or unknown job type.
        """
        return _normalize(job_type_from_value, v)

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, v: Any) -> Any:
        return _normalize(priority_from_value, v)

    @field_validator("requested_at", "expires_at")
    @classmethod
    def _check_timestamps(cls, v: Any) -> Any:
        return check_iso_datetime(v)

    @field_validator("payload", "metadata", mode="before")
    @classmethod
    def _null_undefined(cls, v: Any) -> Any:
        """
        Replace ``UNDEFINED`` markers inside payload and metadata with ``None``.

        The canonical encoder already treats the marker as null, so keys are unchanged;
        dumps and bundles then carry ``null`` instead of the marker's enum value.
        """
        return undefined_as_null(v)


class JobRequestBatch(BaseModel):
    """Job requests that share one tenant context; at least one request."""

    model_config = ConfigDict(extra="forbid")

    batch_id: str
    tenant_context: TenantContext
    requests: list[JobRequest] = Field(min_length=1)
    created_at: str

    @field_validator("batch_id")
    @classmethod
    def _check_batch_id(cls, v: Any) -> Any:
        return check_uuid(v)

    @field_validator("created_at")
    @classmethod
    def _check_created_at(cls, v: Any) -> Any:
        return check_iso_datetime(v, "created_at")


# ============================================================================
# Reports
# ============================================================================


class Recommendation(BaseModel):
    """
    Single recommendation in a report.

    Attributes:
        id (str): Unique recommendation identifier.
        title (str): Short title.
        description (str): Details.
        action (str): RecommendationAction wire value.
        severity (str): Severity wire value.
        evidence (list[Evidence]): Supporting evidence.
        job_request (JobRequest | None): Request generated when action is "request_job".
        metadata (dict[str, Any] | None): Free-form metadata.
        requires_review (bool): Human review needed; default True.
        reviewer_roles (list[str] | None): Suggested reviewer roles.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str
    action: str
    severity: str
    evidence: list[Evidence] = Field(default_factory=list)
    job_request: JobRequest | None = None
    metadata: dict[str, Any] | None = None
    requires_review: bool = True
    reviewer_roles: list[str] | None = None

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, v: Any) -> Any:
        return _normalize(recommendation_action_from_value, v)

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_undefined(cls, v: Any) -> Any:
        return undefined_as_null(v)

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, v: Any) -> Any:
        return _normalize(severity_from_value, v)


class ReportSummary(BaseModel):
    """
    Summary counters of a report.

    Attributes:
        total_findings (int): Evidence items recorded.
        by_severity (dict[str, int]): Count per Severity wire value.
        total_recommendations (int): Recommendations recorded.
        actionable_count (int): Recommendations whose action is not "observe".
        processing_time_ms (int | None): Processing duration.
        coverage_percent (float | None): Coverage in [0, 100].
    """

    model_config = ConfigDict(extra="forbid")

    total_findings: int = Field(default=0, ge=0)
    by_severity: dict[str, int] = Field(
        default_factory=lambda: {"info": 0, "opportunity": 0, "warning": 0, "critical": 0}
    )
    total_recommendations: int = Field(default=0, ge=0)
    actionable_count: int = Field(default=0, ge=0)
    processing_time_ms: int | None = Field(default=None, ge=0)
    coverage_percent: float | None = Field(default=None, ge=0.0, le=100.0)

    @field_validator("by_severity", mode="before")
    @classmethod
    def _normalize_by_severity(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        out: dict[str, Any] = {}
        for key, count in v.items():
            name = _normalize(severity_from_value, key)
            if isinstance(count, int) and count < 0:
                raise ValueError(f"by_severity[{name}] must be non-negative (got {count})")
            out[name] = count
        return out


class ModuleInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    version: str


class TimeRange(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _check_bounds(cls, v: Any) -> Any:
        return check_iso_datetime(v)


class ReportMetadata(BaseModel):
    model_config = ConfigDict(extra="forbid")

    input_size_bytes: int | None = Field(default=None, ge=0)
    output_size_bytes: int | None = Field(default=None, ge=0)
    correlation_id: str | None = None
    source_event_id: str | None = None
    profile_id: str | None = None


class ReportRedactionHint(BaseModel):
    """Marks a report field as sensitive for downstream consumers."""

    model_config = ConfigDict(extra="forbid")

    field: str
    reason: str
    severity: str

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, v: Any) -> Any:
        s = _normalize(redaction_severity_from_value, v)
        if s == "critical":
            raise GrammarError("report redaction hint severity must be low, medium or high")
        return s


class ReportEnvelope(BaseModel):
    """
    Module output: findings, recommendations and generated job requests.

    Attributes:
        version (str): Report semantic version.
        report_id (str): UUID.
        report_type (str): ReportType wire value.
        tenant_context (TenantContext): Tenant scope.
        module (ModuleInfo): Producing module name/version.
        generated_at (str): ISO-8601 generation time.
        time_range (TimeRange | None): Period covered.
        summary (ReportSummary): Counters kept in step by envelope helpers.
        evidence (list[Evidence]): All evidence collected.
        recommendations (list[Recommendation]): Recommendations.
        job_requests (list[JobRequest]): Generated job requests.
        findings (dict[str, Any]): Raw findings data.
        metadata (ReportMetadata): Processing metadata.
        redaction_hints (list[ReportRedactionHint]): Sensitive-field markers.

    Notes:
        Reports are self-contained and serializable to JSON; see
        autopilot.core.envelopes for pure update helpers.
    """

    model_config = ConfigDict(extra="forbid")

    version: str
    report_id: str
    report_type: str
    tenant_context: TenantContext
    module: ModuleInfo
    generated_at: str
    time_range: TimeRange | None = None
    summary: ReportSummary = Field(default_factory=ReportSummary)
    evidence: list[Evidence] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
    job_requests: list[JobRequest] = Field(default_factory=list)
    findings: dict[str, Any] = Field(default_factory=dict)
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)
    redaction_hints: list[ReportRedactionHint] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _check_version(cls, v: Any) -> Any:
        return check_semver(v)

    @field_validator("report_id")
    @classmethod
    def _check_report_id(cls, v: Any) -> Any:
        return check_uuid(v)

    @field_validator("report_type", mode="before")
    @classmethod
    def _normalize_report_type(cls, v: Any) -> Any:
        return _normalize(report_type_from_value, v)

    @field_validator("generated_at")
    @classmethod
    def _check_generated_at(cls, v: Any) -> Any:
        return check_iso_datetime(v, "generated_at")

    @field_validator("findings", mode="before")
    @classmethod
    def _null_undefined(cls, v: Any) -> Any:
        return undefined_as_null(v)


# ============================================================================
# Redaction
# ============================================================================

DEFAULT_SENSITIVE_FIELDS: tuple[str, ...] = (
    "password",
    "secret",
    "token",
    "api_key",
    "private_key",
    "credential",
    "auth",
    "authorization",
    "access_token",
    "refresh_token",
)


class RedactionHint(BaseModel):
    """
    Redaction rule for one field.

    Attributes:
        field (str): Dot-notation path (e.g. "user.ssn").
        reason (str): Why the field is sensitive.
        severity (str): RedactionSeverity wire value.
        strategy (str): RedactionStrategy wire value; default "mask".
        pattern (str | None): Optional regex for pattern-based redaction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str
    reason: str
    severity: str
    strategy: str = "mask"
    pattern: str | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, v: Any) -> Any:
        return _normalize(redaction_severity_from_value, v)

    @field_validator("strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, v: Any) -> Any:
        return _normalize(redaction_strategy_from_value, v)


class RedactionPattern(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str
    replacement: str

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid redaction pattern {v!r}: {e}") from e
        return v


class RedactionConfig(BaseModel):
    """
    Immutable redaction configuration, passed explicitly to redaction helpers.

    Attributes:
        enabled (bool): Master switch; disabled configs return inputs unchanged.
        hints (tuple[RedactionHint, ...]): Field-specific rules.
        global_patterns (tuple[RedactionPattern, ...]): Regexes applied to strings.
        default_sensitive_fields (tuple[str, ...]): Top-level keys always masked.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = True
    hints: tuple[RedactionHint, ...] = ()
    global_patterns: tuple[RedactionPattern, ...] = ()
    default_sensitive_fields: tuple[str, ...] = DEFAULT_SENSITIVE_FIELDS


# ============================================================================
# Profiles
# ============================================================================


class ICP(BaseModel):
    """Ideal customer profile."""

    model_config = ConfigDict(extra="forbid")

    title: str
    company_size: str
    pain_points: list[str]
    goals: list[str]
    industries: list[str] | None = None
    seniority: str | None = None

    @field_validator("seniority", mode="before")
    @classmethod
    def _normalize_seniority(cls, v: Any) -> Any:
        return _normalize(Seniority, v)


class Vocabulary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    preferred: list[str] = Field(default_factory=list)
    avoid: list[str] = Field(default_factory=list)


class Voice(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tone: str
    style_notes: list[str]
    vocabulary: Vocabulary
    examples: list[str] | None = None

    @field_validator("tone", mode="before")
    @classmethod
    def _normalize_tone(cls, v: Any) -> Any:
        return _normalize(voice_tone_from_value, v)


class Keywords(BaseModel):
    model_config = ConfigDict(extra="forbid")

    primary: list[str]
    secondary: list[str]
    negative: list[str]
    seo_targets: list[str] | None = None


class Feature(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str
    benefit: str
    use_cases: list[str] | None = None


class Profile(BaseModel):
    """
    App-specific voice, audience and constraints for generated content.

    Attributes:
        id (str): Profile identifier, 1..256 characters.
        name (str): Display name.
        description (str): Description.
        icp (ICP): Ideal customer profile.
        voice (Voice): Tone, style notes and vocabulary.
        keywords (Keywords): Primary/secondary/negative keywords.
        prohibited_claims (list[str]): Claims generated content must not make.
        features (list[Feature]): Key features.
        metadata (dict[str, Any] | None): Free-form metadata.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, max_length=256)
    name: str
    description: str
    icp: ICP
    voice: Voice
    keywords: Keywords
    prohibited_claims: list[str]
    features: list[Feature]
    metadata: dict[str, Any] | None = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_undefined(cls, v: Any) -> Any:
        return undefined_as_null(v)


class ProfileRegistry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    profiles: dict[str, Profile]
