"""
Canonical autopilot vocabulary and normalization helpers.

Defines the enumerations shared by every contract (event, job and report types,
priorities, severities, evidence and redaction kinds) and the zero-IO helpers that
validators in `autopilot.core.schema` use to normalize enum-like strings.

Responsibilities
- Define enums whose serialized values are the exact wire strings.
- Provide `*_from_value` parsers that accept an enum member or its wire string.
- Provide ordering helpers for severities and priorities.

Naming standard
---------------
- Enum classes: PascalCase
- Enum member names: UPPER_SNAKE (Python constants)
- Enum serialized values (wire): dotted lower_snake, e.g. "autopilot.growth.seo_scan"
  or "growth.page_scanned"; single-segment values are plain lower_snake.

Job type namespaces
-------------------
| Namespace            | Emitted by             | Examples
|----------------------|------------------------|-------------------------------
| autopilot.growth.*   | growth autopilot       | seo_scan, content_draft
| autopilot.ops.*      | ops autopilot          | health_check, alert_correlate
| autopilot.support.*  | support autopilot      | ticket_classify
| autopilot.finops.*   | finops autopilot       | cost_optimize

Examples
--------
>>> from autopilot.core.grammar import job_type_from_value, JobType, severity_rank
>>> job_type_from_value("autopilot.growth.seo_scan") is JobType.GROWTH_SEO_SCAN
True
>>> severity_rank("critical") > severity_rank("info")
True
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Final, TypeVar

__all__ = [
    # Enums
    "Priority",
    "Severity",
    "EvidenceType",
    "EventType",
    "JobType",
    "ReportType",
    "RecommendationAction",
    "RedactionSeverity",
    "RedactionStrategy",
    "RiskLevel",
    "CostConfidence",
    "VoiceTone",
    "Seniority",
    "Environment",
    # Helpers
    "is_dotted_lower_snake",
    "assert_dotted_lower_snake",
    "enum_value",
    "priority_from_value",
    "severity_from_value",
    "evidence_type_from_value",
    "event_type_from_value",
    "job_type_from_value",
    "report_type_from_value",
    "recommendation_action_from_value",
    "redaction_severity_from_value",
    "redaction_strategy_from_value",
    "risk_level_from_value",
    "cost_confidence_from_value",
    "voice_tone_from_value",
    "severity_rank",
    "max_severity",
    "ensure_all_enum_values_dotted_lower_snake",
]


# ============================================================================
# Enums
# ============================================================================


class Priority(Enum):
    """Scheduling priority for events and job requests."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class Severity(Enum):
    """
    Severity of a finding, listed from least to most severe.

    Notes:
        Declaration order is the aggregation order used by `max_severity`.
    """

    INFO = "info"
    OPPORTUNITY = "opportunity"
    WARNING = "warning"
    CRITICAL = "critical"


class EvidenceType(Enum):
    """Origin category of a piece of evidence."""

    SIGNAL = "signal"
    METRIC = "metric"
    EVENT = "event"
    FINDING = "finding"
    RECOMMENDATION = "recommendation"
    MANUAL = "manual"
    EXTERNAL = "external"


class EventType(Enum):
    """
    Inbound signal kinds that trigger observation and recommendation workflows.

    Serialized values are used in:
      - EventEnvelope.event_type (schema.EventEnvelope)
    """

    GROWTH_PAGE_SCANNED = "growth.page_scanned"
    GROWTH_FUNNEL_UPDATED = "growth.funnel_updated"
    GROWTH_EXPERIMENT_PROPOSED = "growth.experiment_proposed"
    GROWTH_CONTENT_REQUESTED = "growth.content_requested"

    OPS_METRIC_ALERT = "ops.metric_alert"
    OPS_INCIDENT_DETECTED = "ops.incident_detected"
    OPS_HEALTH_CHECK_FAILED = "ops.health_check_failed"
    OPS_COST_ANOMALY = "ops.cost_anomaly"

    SUPPORT_TICKET_CREATED = "support.ticket_created"
    SUPPORT_TICKET_UPDATED = "support.ticket_updated"
    SUPPORT_KB_REQUESTED = "support.kb_requested"
    SUPPORT_RESPONSE_DRAFTED = "support.response_drafted"

    FINOPS_USAGE_REPORTED = "finops.usage_reported"
    FINOPS_BUDGET_THRESHOLD = "finops.budget_threshold"
    FINOPS_COST_ANOMALY = "finops.cost_anomaly"
    FINOPS_OPTIMIZATION_OPPORTUNITY = "finops.optimization_opportunity"

    TRIGGER_MANUAL = "autopilot.trigger.manual"
    TRIGGER_SCHEDULED = "autopilot.trigger.scheduled"
    TRIGGER_WEBHOOK = "autopilot.trigger.webhook"


class JobType(Enum):
    """
    Job kinds a module may request. Requests are generated here, never executed.

    Serialized values are used in:
      - JobRequest.job_type (schema.JobRequest)
      - idempotency projections and bundle sort keys (jobforge)
    """

    GROWTH_SEO_SCAN = "autopilot.growth.seo_scan"
    GROWTH_EXPERIMENT_PROPOSE = "autopilot.growth.experiment_propose"
    GROWTH_CONTENT_DRAFT = "autopilot.growth.content_draft"

    OPS_HEALTH_CHECK = "autopilot.ops.health_check"
    OPS_ALERT_CORRELATE = "autopilot.ops.alert_correlate"
    OPS_RUNBOOK_GENERATE = "autopilot.ops.runbook_generate"
    OPS_RELIABILITY_REPORT = "autopilot.ops.reliability_report"

    SUPPORT_TICKET_CLASSIFY = "autopilot.support.ticket_classify"

    FINOPS_COST_OPTIMIZE = "autopilot.finops.cost_optimize"


class ReportType(Enum):
    """Module output kinds carried by ReportEnvelope.report_type."""

    GROWTH_SEO_AUDIT = "growth.seo_audit"
    GROWTH_FUNNEL_ANALYSIS = "growth.funnel_analysis"
    GROWTH_EXPERIMENT_PROPOSALS = "growth.experiment_proposals"
    GROWTH_CONTENT_DRAFTS = "growth.content_drafts"

    OPS_HEALTH_ASSESSMENT = "ops.health_assessment"
    OPS_INCIDENT_REPORT = "ops.incident_report"
    OPS_METRIC_SUMMARY = "ops.metric_summary"
    OPS_COST_ANALYSIS = "ops.cost_analysis"

    SUPPORT_TICKET_SUMMARY = "support.ticket_summary"
    SUPPORT_RESPONSE_SUGGESTIONS = "support.response_suggestions"
    SUPPORT_KB_DRAFTS = "support.kb_drafts"
    SUPPORT_SENTIMENT_REPORT = "support.sentiment_report"

    FINOPS_USAGE_REPORT = "finops.usage_report"
    FINOPS_BUDGET_STATUS = "finops.budget_status"
    FINOPS_OPTIMIZATION_RECOMMENDATIONS = "finops.optimization_recommendations"
    FINOPS_ANOMALY_REPORT = "finops.anomaly_report"


class RecommendationAction(Enum):
    """What a recommendation asks for; everything except OBSERVE is actionable."""

    OBSERVE = "observe"
    DRAFT = "draft"
    RECOMMEND = "recommend"
    REQUEST_JOB = "request_job"


class RedactionSeverity(Enum):
    LOW = "low"  # can log with masking
    MEDIUM = "medium"  # redact in most contexts
    HIGH = "high"  # always redact
    CRITICAL = "critical"  # never persist


class RedactionStrategy(Enum):
    MASK = "mask"
    HASH = "hash"
    OMIT = "omit"
    ENCRYPT = "encrypt"


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CostConfidence(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class VoiceTone(Enum):
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    TECHNICAL = "technical"
    CASUAL = "casual"
    BOLD = "bold"
    EMPATHETIC = "empathetic"


class Seniority(Enum):
    INDIVIDUAL = "individual"
    MANAGER = "manager"
    DIRECTOR = "director"
    EXECUTIVE = "executive"


class Environment(Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# ============================================================================
# Helpers
# ============================================================================

_DOTTED_LOWER_SNAKE_RE: Final[re.Pattern[str]] = re.compile(
    r"^[a-z0-9]+(?:_[a-z0-9]+)*(?:\.[a-z0-9]+(?:_[a-z0-9]+)*)*$"
)

E = TypeVar("E", bound=Enum)


def is_dotted_lower_snake(value: str) -> bool:
    """
    Check whether a string is lower_snake, optionally in dot-separated segments.

    Examples:
      >>> is_dotted_lower_snake("autopilot.growth.seo_scan")
      True
      >>> is_dotted_lower_snake("Autopilot.Growth")
      False
      >>> is_dotted_lower_snake("growth..scan")
      False
    """
    return bool(_DOTTED_LOWER_SNAKE_RE.match(value or ""))


def assert_dotted_lower_snake(value: str, what: str = "value") -> None:
    """
    Validate that a string is dotted lower_snake.

    Raises:
      ValueError: If value is not dotted lower_snake.
    """
    if not is_dotted_lower_snake(value):
        raise ValueError(f"{what} must be dotted lower_snake (got: {value!r})")


def enum_value(value: Enum | str) -> str:
    """Return the wire string for an enum member, or the string itself."""
    return value.value if isinstance(value, Enum) else value


def _parse(enum_cls: type[E], value: E | str, what: str) -> E:
    if isinstance(value, enum_cls):
        return value
    s = enum_value(value) if isinstance(value, (Enum, str)) else value
    if not isinstance(s, str):
        raise ValueError(f"{what} must be a string (got: {value!r})")
    assert_dotted_lower_snake(s, what)
    try:
        return enum_cls(s)
    except ValueError:
        allowed = sorted(m.value for m in enum_cls)
        raise ValueError(f"unknown {what} {s!r}; expected one of {allowed}") from None


def priority_from_value(s: Priority | str) -> Priority:
    """
    Parse a priority string into a Priority.

    Raises:
      ValueError: If s is not a known priority.
    """
    return _parse(Priority, s, "priority")


def severity_from_value(s: Severity | str) -> Severity:
    """
    Parse a severity string into a Severity.

    Raises:
      ValueError: If s is not a known severity.
    """
    return _parse(Severity, s, "severity")


def evidence_type_from_value(s: EvidenceType | str) -> EvidenceType:
    return _parse(EvidenceType, s, "evidence type")


def event_type_from_value(s: EventType | str) -> EventType:
    """
    Parse a dotted event type string into an EventType.

    Raises:
      ValueError: If s is not dotted lower_snake or is not a known event type.
    """
    return _parse(EventType, s, "event_type")


def job_type_from_value(s: JobType | str) -> JobType:
    """
    Parse a dotted job type string into a JobType.

    Args:
      s (JobType | str): JobType member or its wire value.

    Returns:
      JobType: Parsed job type.

    Raises:
      ValueError: If s is not dotted lower_snake or is not a known job type.
    """
    return _parse(JobType, s, "job_type")


def report_type_from_value(s: ReportType | str) -> ReportType:
    return _parse(ReportType, s, "report_type")


def recommendation_action_from_value(s: RecommendationAction | str) -> RecommendationAction:
    return _parse(RecommendationAction, s, "recommendation action")


def redaction_severity_from_value(s: RedactionSeverity | str) -> RedactionSeverity:
    return _parse(RedactionSeverity, s, "redaction severity")


def redaction_strategy_from_value(s: RedactionStrategy | str) -> RedactionStrategy:
    return _parse(RedactionStrategy, s, "redaction strategy")


def risk_level_from_value(s: RiskLevel | str) -> RiskLevel:
    return _parse(RiskLevel, s, "risk_level")


def cost_confidence_from_value(s: CostConfidence | str) -> CostConfidence:
    return _parse(CostConfidence, s, "confidence")


def voice_tone_from_value(s: VoiceTone | str) -> VoiceTone:
    return _parse(VoiceTone, s, "voice tone")


_SEVERITY_ORDER: Final[tuple[Severity, ...]] = tuple(Severity)


def severity_rank(s: Severity | str) -> int:
    """Position of a severity in ascending order (info=0 ... critical=3)."""
    return _SEVERITY_ORDER.index(severity_from_value(s))


def max_severity(values: Iterable[Severity | str]) -> Severity:
    """
    Return the most severe value, or INFO for an empty iterable.

    Examples:
      >>> max_severity(["info", "warning", "opportunity"]).value
      'warning'
      >>> max_severity([]).value
      'info'
    """
    best = Severity.INFO
    for v in values:
        s = severity_from_value(v)
        if severity_rank(s) > severity_rank(best):
            best = s
    return best


def ensure_all_enum_values_dotted_lower_snake(enums: Iterable[type[Enum]]) -> None:
    """
    Validate that all enum values across the given classes are dotted lower_snake.

    Raises:
      ValueError: On the first offending value.
    """
    for enum_cls in enums:
        for member in enum_cls:
            assert_dotted_lower_snake(member.value, f"{enum_cls.__name__}.{member.name}")
