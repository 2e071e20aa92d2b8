"""
autopilot.runner: shared runtime conventions for autopilot commands.

## Responsibilities
- Error envelope ``{code, message, user_message, retryable, cause?, context?}`` and
  exit codes 0/2/3/4.
- JSON-lines logging with denylist redaction.
- Retry with exponential backoff and a stable idempotency key per call.

## Import DAG discipline
- Depends only on stdlib, pydantic and autopilot.core.*.
"""

from __future__ import annotations

from .errors import (
    EXIT_BUG,
    EXIT_DEPENDENCY,
    EXIT_SUCCESS,
    EXIT_VALIDATION,
    ErrorEnvelope,
    RunnerError,
    bug_error,
    dependency_error,
    exit_code_for_error,
    to_error_envelope,
    validation_error,
)
from .logging import JsonLinesFormatter, configure_logging
from .retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    RetryResult,
    generate_idempotency_key,
    with_retry,
)

__all__ = [
    "EXIT_BUG",
    "EXIT_DEPENDENCY",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION",
    "ErrorEnvelope",
    "RunnerError",
    "bug_error",
    "dependency_error",
    "exit_code_for_error",
    "to_error_envelope",
    "validation_error",
    "JsonLinesFormatter",
    "configure_logging",
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "RetryResult",
    "generate_idempotency_key",
    "with_retry",
]
