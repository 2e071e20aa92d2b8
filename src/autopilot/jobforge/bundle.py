"""
Outbound bundles and their canonicalization records.

A bundle groups job requests (or one report) with tenant and trace metadata and a
self-describing integrity fingerprint:

    {"algorithm": "json-lexicographic", "hash_algorithm": "sha256", "hash": <digest>}

The digest is the stable hash of every other bundle field. Any receiver can re-run
``compute_bundle_hash`` over the same fields to check it.

Notes:
    - Requests and idempotency-key entries are sorted by ``(job_type, idempotency_key)``
      before hashing, so construction order never changes the fingerprint.
    - Bundles are always ``dry_run=True``: autopilot generates requests and never runs them.
    - ``stable_output=True`` pins ``created_at`` to 2000-01-01T00:00:00.000Z for golden files.
    - Models are hashed in their JSON form (``model_dump(mode="json")``), the same form
      ``serialize_bundle`` writes, so a serialized bundle verifies after being read back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.canonical import hash_canonical_json
from ..core.constants import (
    CANONICALIZATION_ALGORITHM,
    DEFAULT_MODULE_ID,
    HASH_ALGORITHM,
    STABLE_TIMESTAMP,
)
from ..core.envelopes import format_validation_errors, iso_timestamp
from ..core.errors import TenantMismatchError
from ..core.schema import JobRequest, ReportEnvelope, check_iso_datetime
from ..core.serde import json_dumps_pretty, to_jsonable
from ..core.versioning import CONTRACT_VERSION
from .idempotency import attach_idempotency_key

__all__ = [
    "BUNDLE_SCHEMA_VERSION",
    "IdempotencyKeyEntry",
    "Canonicalization",
    "JobRequestBundle",
    "ReportEnvelopeBundle",
    "BundleValidation",
    "canonicalization_record",
    "build_job_request_bundle",
    "build_report_bundle",
    "compute_bundle_hash",
    "verify_bundle",
    "validate_bundle",
    "validate_report_bundle",
    "serialize_bundle",
]

logger = logging.getLogger(__name__)

BUNDLE_SCHEMA_VERSION: str = CONTRACT_VERSION


# ============================================================================
# Models
# ============================================================================


class IdempotencyKeyEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    job_type: str = Field(min_length=1)
    idempotency_key: str = Field(min_length=1)


class Canonicalization(BaseModel):
    """
    Integrity fingerprint of a bundle.

    Attributes:
        algorithm (str): Always "json-lexicographic".
        hash_algorithm (str): Always "sha256".
        hash (str): 64-character lowercase hex digest.
    """

    model_config = ConfigDict(extra="forbid")

    algorithm: Literal["json-lexicographic"] = "json-lexicographic"
    hash_algorithm: Literal["sha256"] = "sha256"
    hash: str = Field(pattern=r"^[a-f0-9]{64}$")


class _BundleBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: Literal["1.0.0"]
    module_id: str = Field(min_length=1)
    tenant_id: str = Field(min_length=1, max_length=256)
    project_id: str = Field(min_length=1, max_length=256)
    trace_id: str = Field(min_length=1)
    created_at: str
    dry_run: Literal[True]
    idempotency_keys: list[IdempotencyKeyEntry]
    canonicalization: Canonicalization

    @field_validator("created_at")
    @classmethod
    def _check_created_at(cls, v: Any) -> Any:
        return check_iso_datetime(v, "created_at")


class JobRequestBundle(_BundleBase):
    """Job requests for one tenant/project and trace, with idempotency keys."""

    requests: list[JobRequest]


class ReportEnvelopeBundle(_BundleBase):
    """One report for a tenant/project and trace, with the keys of its job requests."""

    report: ReportEnvelope


@dataclass(frozen=True)
class BundleValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


# ============================================================================
# Hashing
# ============================================================================


def canonicalization_record(fields: Mapping[str, Any]) -> Canonicalization:
    """
    Fingerprint a mapping of bundle fields.

    Args:
        fields (Mapping[str, Any]): Every bundle field except ``canonicalization``.
            Pydantic models inside are converted to their JSON form first.

    Returns:
        Canonicalization: Record carrying the stable hash of the fields.
    """
    result = hash_canonical_json(to_jsonable(fields))
    return Canonicalization(
        algorithm=CANONICALIZATION_ALGORITHM,
        hash_algorithm=HASH_ALGORITHM,
        hash=result.hash,
    )


def _bundle_fields(bundle: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    data = to_jsonable(bundle)
    return {k: v for k, v in data.items() if k != "canonicalization"}


def compute_bundle_hash(bundle: BaseModel | Mapping[str, Any]) -> str:
    """Recompute a bundle's digest from its own fields, ignoring its recorded record."""
    return canonicalization_record(_bundle_fields(bundle)).hash


def verify_bundle(bundle: BaseModel | Mapping[str, Any]) -> bool:
    """
    Check a bundle's recorded fingerprint against its contents.

    Args:
        bundle (BaseModel | Mapping[str, Any]): Bundle model or its JSON mapping.

    Returns:
        bool: True iff the record names the expected algorithms and its hash matches.
    """
    data = to_jsonable(bundle)
    record = data.get("canonicalization") if isinstance(data, Mapping) else None
    if not isinstance(record, Mapping):
        return False
    if record.get("algorithm") != CANONICALIZATION_ALGORITHM:
        return False
    if record.get("hash_algorithm") != HASH_ALGORITHM:
        return False
    return record.get("hash") == compute_bundle_hash(data)


# ============================================================================
# Builders
# ============================================================================


def _created_at(created_at: str | None, stable_output: bool) -> str:
    if stable_output:
        return STABLE_TIMESTAMP
    return created_at or iso_timestamp()


def _sorted_entries(
    entries: Iterable[IdempotencyKeyEntry | Mapping[str, Any]],
) -> list[IdempotencyKeyEntry]:
    parsed = [
        e if isinstance(e, IdempotencyKeyEntry) else IdempotencyKeyEntry.model_validate(e)
        for e in entries
    ]
    return sorted(parsed, key=lambda e: (e.job_type, e.idempotency_key))


def build_job_request_bundle(
    requests: Sequence[JobRequest | Mapping[str, Any]],
    *,
    tenant_id: str,
    project_id: str,
    trace_id: str,
    module_id: str = DEFAULT_MODULE_ID,
    created_at: str | None = None,
    stable_output: bool = False,
) -> JobRequestBundle:
    """
    Build a fingerprinted bundle of job requests.

    Each request gets its idempotency key recorded in ``metadata.idempotency_key``;
    requests and key entries are then sorted by ``(job_type, idempotency_key)``.

    Args:
        requests (Sequence[JobRequest | Mapping[str, Any]]): Requests for one tenant.
        tenant_id (str): Tenant identifier; every request must match it.
        project_id (str): Project identifier; every request must match it.
        trace_id (str): Trace identifier for the run that produced the requests.
        module_id (str): Producing module.
        created_at (str | None): Creation time; now when omitted.
        stable_output (bool): Pin created_at to the stable timestamp.

    Returns:
        JobRequestBundle: Bundle whose canonicalization hash covers all other fields.

    Raises:
        TenantMismatchError: If a request belongs to another tenant or project.
        pydantic.ValidationError: If a request or bundle field is invalid.
    """
    keyed: list[tuple[JobRequest, str]] = []
    for raw in requests:
        req = raw if isinstance(raw, JobRequest) else JobRequest.model_validate(raw)
        ctx = req.tenant_context
        if ctx.tenant_id != tenant_id or ctx.project_id != project_id:
            raise TenantMismatchError(
                f"request {req.job_type} belongs to {ctx.tenant_id}/{ctx.project_id}, "
                f"not {tenant_id}/{project_id}"
            )
        keyed.append(attach_idempotency_key(req))

    keyed.sort(key=lambda pair: (pair[0].job_type, pair[1]))
    fields: dict[str, Any] = {
        "schema_version": BUNDLE_SCHEMA_VERSION,
        "module_id": module_id,
        "tenant_id": tenant_id,
        "project_id": project_id,
        "trace_id": trace_id,
        "created_at": _created_at(created_at, stable_output),
        "dry_run": True,
        "requests": [to_jsonable(req) for req, _ in keyed],
        "idempotency_keys": [
            {"job_type": req.job_type, "idempotency_key": key} for req, key in keyed
        ],
    }
    record = canonicalization_record(fields)
    bundle = JobRequestBundle.model_validate({**fields, "canonicalization": record})
    logger.info(
        "built job request bundle",
        extra={"trace_id": trace_id, "requests": len(keyed), "hash": record.hash},
    )
    return bundle


def build_report_bundle(
    report: ReportEnvelope | Mapping[str, Any],
    idempotency_keys: Iterable[IdempotencyKeyEntry | Mapping[str, Any]] = (),
    *,
    trace_id: str,
    module_id: str = DEFAULT_MODULE_ID,
    created_at: str | None = None,
    stable_output: bool = False,
) -> ReportEnvelopeBundle:
    """
    Build a fingerprinted bundle around one report.

    Tenant and project identifiers are taken from the report's tenant context.
    Idempotency-key entries (usually those of the companion job request bundle) are
    sorted before hashing.

    Raises:
        pydantic.ValidationError: If the report or an entry is invalid.
    """
    rep = report if isinstance(report, ReportEnvelope) else ReportEnvelope.model_validate(report)
    fields: dict[str, Any] = {
        "schema_version": BUNDLE_SCHEMA_VERSION,
        "module_id": module_id,
        "tenant_id": rep.tenant_context.tenant_id,
        "project_id": rep.tenant_context.project_id,
        "trace_id": trace_id,
        "created_at": _created_at(created_at, stable_output),
        "dry_run": True,
        "report": to_jsonable(rep),
        "idempotency_keys": [to_jsonable(e) for e in _sorted_entries(idempotency_keys)],
    }
    record = canonicalization_record(fields)
    bundle = ReportEnvelopeBundle.model_validate({**fields, "canonicalization": record})
    logger.info("built report bundle", extra={"trace_id": trace_id, "hash": record.hash})
    return bundle


# ============================================================================
# Validation / serialization
# ============================================================================


def _validate(model: type[_BundleBase], bundle: Any) -> BundleValidation:
    try:
        parsed = model.model_validate(bundle)
    except ValidationError as e:
        return BundleValidation(valid=False, errors=format_validation_errors(e))
    source = bundle if isinstance(bundle, Mapping) else parsed
    if not verify_bundle(source):
        return BundleValidation(
            valid=False, errors=["canonicalization.hash: does not match bundle contents"]
        )
    return BundleValidation(valid=True)


def validate_bundle(bundle: Any) -> BundleValidation:
    """Schema-check a job request bundle and verify its fingerprint."""
    return _validate(JobRequestBundle, bundle)


def validate_report_bundle(bundle: Any) -> BundleValidation:
    """Schema-check a report bundle and verify its fingerprint."""
    return _validate(ReportEnvelopeBundle, bundle)


def serialize_bundle(bundle: BaseModel | Mapping[str, Any]) -> str:
    """Sorted-key JSON indented by two spaces; reading it back verifies unchanged."""
    return json_dumps_pretty(bundle)
