"""
Core package aggregator for autopilot contracts (canonical hashing, grammar, schemas, envelopes, redaction).

## Contracts (single source of truth)
- Canonical: canonical JSON encoding, SHA-256 stable hashes, content-addressable ids.
- Grammar: enums (event/job/report types, priority, severity, ...) and normalization helpers.
- Schemas: pydantic models for tenant context, evidence, events, jobs, reports, profiles.
- Envelopes: factories and pure update helpers for those models.
- Redaction: hint-based and denylist redaction with explicit configuration.
- Versioning/Constants/Errors: contract version, shared constants, typed exceptions.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Canonicalization is total: values outside the JSON data model encode as null.
- Hashes are over canonical JSON, never over `json.dumps` output or pydantic's own JSON.

## Downstream usage
- autopilot.jobforge: derives idempotency keys and bundle fingerprints with `canonical`.
- autopilot.runner: redacts structured log records with `redaction`.
- autopilot.io: writes redacted evidence and summaries as artifacts.

## Examples
```python
from autopilot.core.canonical import canonicalize_json, stable_hash
canonicalize_json({"z": 1, "a": 2, "m": 3})  # '{"a":2,"m":3,"z":1}'
stable_hash({"a": 1}) == stable_hash({"a": 1})  # True

from autopilot.core.envelopes import create_job_request
req = create_job_request(
    "autopilot.growth.seo_scan",
    {"tenant_id": "tenant-123", "project_id": "project-456"},
    {"url": "https://example.com"},
)
req.policy.requires_approval  # True
```
"""
