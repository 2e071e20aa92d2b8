"""
autopilot.jobforge: job request generation, idempotency keys and fingerprinted bundles.

## Responsibilities
- Generate validated job requests (client, fluent builder, quick builders).
- Derive idempotency keys from the semantic projection of a request.
- Build, verify, validate and serialize job request / report bundles.
- Apply business-rule validation and render report bundles as markdown.

## Import DAG discipline
- Depends only on stdlib, pydantic and autopilot.core.*.
- Never executes jobs and never opens network connections.

## Examples
```python
from autopilot.jobforge import QuickBuilders, build_job_request_bundle, verify_bundle

tenant = {"tenant_id": "tenant-123", "project_id": "project-456"}
requests = [QuickBuilders.seo_scan(tenant, "https://example.com")]
bundle = build_job_request_bundle(
    requests, tenant_id="tenant-123", project_id="project-456", trace_id="trace-1"
)
verify_bundle(bundle)  # True
```
"""

from __future__ import annotations

from .builders import QuickBuilders, RequestBuilder, build_request
from .bundle import (
    JobRequestBundle,
    ReportEnvelopeBundle,
    build_job_request_bundle,
    build_report_bundle,
    compute_bundle_hash,
    serialize_bundle,
    validate_bundle,
    validate_report_bundle,
    verify_bundle,
)
from .client import ClientConfig, JobForgeClient, create_client
from .idempotency import attach_idempotency_key, derive_idempotency_key
from .render import render_report
from .validation import ValidationResult, validate_batch, validate_request

__all__ = [
    "QuickBuilders",
    "RequestBuilder",
    "build_request",
    "JobRequestBundle",
    "ReportEnvelopeBundle",
    "build_job_request_bundle",
    "build_report_bundle",
    "compute_bundle_hash",
    "serialize_bundle",
    "validate_bundle",
    "validate_report_bundle",
    "verify_bundle",
    "ClientConfig",
    "JobForgeClient",
    "create_client",
    "attach_idempotency_key",
    "derive_idempotency_key",
    "render_report",
    "ValidationResult",
    "validate_batch",
    "validate_request",
]
