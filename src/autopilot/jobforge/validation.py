"""
Schema and business-rule validation for job requests and batches.

Validation never raises: results carry issues with a dotted path, a message and a code.
Codes ending in ``_ERROR`` (and SCHEMA_VIOLATION) make a result invalid; ``_WARNING``
codes are advisory and are reported on valid results too.

Business rules
--------------
| Code                | Condition
|---------------------|-----------------------------------------------------------
| POLICY_WARNING      | policy.requires_policy_token is false
| COST_WARNING        | priority is "high" and no cost_estimate
| EVIDENCE_WARNING    | no evidence_links
| EXPIRATION_ERROR    | expires_at less than 1 hour away (or already past)
| EXPIRATION_WARNING  | expires_at more than 168 hours (7 days) away
| BATCH_SIZE_WARNING  | batch holds more than 100 requests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from ..core.constants import MAX_BATCH_SIZE, MAX_EXPIRATION_HOURS, MIN_EXPIRATION_HOURS
from ..core.grammar import Priority
from ..core.schema import JobRequest, JobRequestBatch

__all__ = [
    "SCHEMA_VIOLATION",
    "ValidationIssue",
    "ValidationResult",
    "validate_request",
    "validate_batch",
    "is_valid_request",
    "is_valid_batch",
]

SCHEMA_VIOLATION = "SCHEMA_VIOLATION"


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str
    code: str

    @property
    def is_error(self) -> bool:
        return self.code == SCHEMA_VIOLATION or self.code.endswith("_ERROR")


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a validation pass.

    Attributes:
        valid (bool): True iff no issue is an error.
        issues (list[ValidationIssue]): Errors and warnings, in detection order.
    """

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if not i.is_error]

    @property
    def codes(self) -> list[str]:
        return [i.code for i in self.issues]


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(valid=not any(i.is_error for i in issues), issues=issues)


def _schema_issues(exc: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(p) for p in err["loc"]),
            message=err["msg"],
            code=SCHEMA_VIOLATION,
        )
        for err in exc.errors()
    ]


def _parse_instant(text: str) -> datetime:
    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _rule_issues(request: JobRequest, now: datetime) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if not request.policy.requires_policy_token:
        issues.append(
            ValidationIssue(
                "policy.requires_policy_token",
                "Policy token is recommended for audit compliance",
                "POLICY_WARNING",
            )
        )

    if request.cost_estimate is None and request.priority == Priority.HIGH.value:
        issues.append(
            ValidationIssue(
                "cost_estimate",
                "Cost estimate recommended for high-priority jobs",
                "COST_WARNING",
            )
        )

    if not request.evidence_links:
        issues.append(
            ValidationIssue(
                "evidence_links",
                "Evidence links recommended for traceability",
                "EVIDENCE_WARNING",
            )
        )

    if request.expires_at:
        hours = (_parse_instant(request.expires_at) - now).total_seconds() / 3600
        if hours < MIN_EXPIRATION_HOURS:
            issues.append(
                ValidationIssue(
                    "expires_at",
                    "Expiration should be at least 1 hour in the future",
                    "EXPIRATION_ERROR",
                )
            )
        if hours > MAX_EXPIRATION_HOURS:
            issues.append(
                ValidationIssue(
                    "expires_at",
                    "Expiration longer than 7 days may indicate stale request",
                    "EXPIRATION_WARNING",
                )
            )
    return issues


def validate_request(request: Any, *, now: datetime | None = None) -> ValidationResult:
    """
    Validate a job request against the schema, then the business rules.

    Args:
        request (Any): JobRequest model or untrusted mapping.
        now (datetime | None): Reference time for expiry rules; current UTC time if None.

    Returns:
        ValidationResult: Schema violations only, when the schema check fails;
        otherwise the business-rule issues.
    """
    try:
        parsed = JobRequest.model_validate(request)
    except ValidationError as e:
        return _result(_schema_issues(e))
    return _result(_rule_issues(parsed, now or datetime.now(timezone.utc)))


def validate_batch(batch: Any, *, now: datetime | None = None) -> ValidationResult:
    """
    Validate a batch and every request in it.

    Per-request issue paths are prefixed with ``requests[i].``.
    """
    try:
        parsed = JobRequestBatch.model_validate(batch)
    except ValidationError as e:
        return _result(_schema_issues(e))

    when = now or datetime.now(timezone.utc)
    issues: list[ValidationIssue] = []
    for i, req in enumerate(parsed.requests):
        for issue in _rule_issues(req, when):
            issues.append(ValidationIssue(f"requests[{i}].{issue.path}", issue.message, issue.code))

    if len(parsed.requests) > MAX_BATCH_SIZE:
        issues.append(
            ValidationIssue(
                "requests",
                f"Batch size exceeds recommended maximum of {MAX_BATCH_SIZE} requests",
                "BATCH_SIZE_WARNING",
            )
        )
    return _result(issues)


def is_valid_request(request: Any) -> bool:
    return validate_request(request).valid


def is_valid_batch(batch: Any) -> bool:
    return validate_batch(batch).valid
