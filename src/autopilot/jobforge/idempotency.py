"""
Idempotency keys for job requests.

An idempotency key is the stable hash of a request's semantic projection: job type,
tenant context, payload and policy. Fields that differ between otherwise identical
resubmissions (``requested_at``, ``expires_at``, ``metadata``, ``priority``,
``evidence_links``, ``cost_estimate``, ``version``) are excluded, so a resubmitted request
keeps its key and downstream dedup can detect it.

Examples:
    >>> from autopilot.core.envelopes import create_job_request
    >>> tenant = {"tenant_id": "t1", "project_id": "p1"}
    >>> a = create_job_request("autopilot.ops.health_check", tenant, {"x": 1},
    ...                        requested_at="2026-01-01T00:00:00.000Z")
    >>> b = create_job_request("autopilot.ops.health_check", tenant, {"x": 1},
    ...                        requested_at="2026-02-01T00:00:00.000Z")
    >>> derive_idempotency_key(a) == derive_idempotency_key(b)
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.canonical import stable_hash
from ..core.schema import JobRequest
from ..core.serde import to_jsonable

__all__ = [
    "IDEMPOTENCY_FIELDS",
    "IDEMPOTENCY_METADATA_KEY",
    "idempotency_projection",
    "derive_idempotency_key",
    "attach_idempotency_key",
]

IDEMPOTENCY_FIELDS: tuple[str, ...] = ("job_type", "tenant_context", "payload", "policy")

# Where attach_idempotency_key records the key inside JobRequest.metadata.
IDEMPOTENCY_METADATA_KEY = "idempotency_key"


def idempotency_projection(request: JobRequest | Mapping[str, Any]) -> dict[str, Any]:
    """
    Project a job request onto the fields that define its identity.

    A mapping is parsed as a ``JobRequest`` first, so schema defaults (``policy``,
    ``payload``) and enum normalization apply exactly as they do for a model. A request
    file therefore keys the same as the bundle built from it.

    Args:
        request (JobRequest | Mapping[str, Any]): Request model or its JSON mapping.

    Returns:
        dict[str, Any]: ``{job_type, tenant_context, payload, policy}`` as plain JSON.

    Raises:
        pydantic.ValidationError: If a mapping is not a valid job request.
    """
    if not isinstance(request, JobRequest):
        request = JobRequest.model_validate(request)
    data = to_jsonable(request)
    return {name: data[name] for name in IDEMPOTENCY_FIELDS}


def derive_idempotency_key(request: JobRequest | Mapping[str, Any]) -> str:
    """
    Compute the idempotency key of a job request.

    Returns:
        str: 64-character lowercase hex digest of the canonical projection.
    """
    return stable_hash(idempotency_projection(request))


def attach_idempotency_key(request: JobRequest) -> tuple[JobRequest, str]:
    """
    Return a copy of the request with ``metadata.idempotency_key`` set, and the key.

    Metadata is excluded from the projection, so attaching the key never changes it.
    The input request is not modified.
    """
    key = derive_idempotency_key(request)
    updated = request.model_copy(
        update={"metadata": {**request.metadata, IDEMPOTENCY_METADATA_KEY: key}}
    )
    return updated, key
