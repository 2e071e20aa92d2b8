"""
Error envelope and process exit codes shared by every autopilot command.

Every failure that leaves a command is described by an `ErrorEnvelope`
``{code, message, user_message, retryable, cause?, context?}`` and mapped to an exit code:

| Exit | Meaning                     | Envelope code
|------|-----------------------------|------------------------
| 0    | success                     | n/a
| 2    | validation error            | VALIDATION_ERROR
| 3    | external dependency failure | DEPENDENCY_FAILURE
| 4    | unexpected bug              | UNEXPECTED_BUG

Notes:
    - pydantic.ValidationError and autopilot.core ContractError/GrammarError are treated
      as validation failures (exit 2).
    - Envelopes are plain data; `ErrorEnvelope.to_dict` drops unset optional fields.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from pydantic import ValidationError

from ..core.envelopes import format_validation_errors
from ..core.errors import ContractError, GrammarError, VersionMismatch

__all__ = [
    "EXIT_SUCCESS",
    "EXIT_VALIDATION",
    "EXIT_DEPENDENCY",
    "EXIT_BUG",
    "ErrorEnvelope",
    "RunnerError",
    "validation_error",
    "dependency_error",
    "bug_error",
    "to_error_envelope",
    "exit_code_for_error",
]

EXIT_SUCCESS: Final[int] = 0
EXIT_VALIDATION: Final[int] = 2
EXIT_DEPENDENCY: Final[int] = 3
EXIT_BUG: Final[int] = 4

_VALIDATION_TYPES = (ValidationError, ContractError, GrammarError, VersionMismatch)


@dataclass(frozen=True)
class ErrorEnvelope:
    code: str
    message: str
    user_message: str
    retryable: bool = False
    cause: str | None = None
    context: dict[str, Any] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "retryable": self.retryable,
        }
        if self.cause is not None:
            out["cause"] = self.cause
        if self.context is not None:
            out["context"] = dict(self.context)
        return out


class RunnerError(Exception):
    """
    Exception carrying an `ErrorEnvelope` and the exit code it maps to.

    Attributes:
        envelope (ErrorEnvelope): Structured description of the failure.
        exit_code (int): Process exit code (2, 3 or 4).
    """

    def __init__(self, envelope: ErrorEnvelope, exit_code: int) -> None:
        super().__init__(envelope.message)
        self.envelope = envelope
        self.exit_code = exit_code


def _ctx(context: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return dict(context) if context is not None else None


def validation_error(message: str, context: Mapping[str, Any] | None = None) -> RunnerError:
    return RunnerError(
        ErrorEnvelope(
            code="VALIDATION_ERROR",
            message=message,
            user_message=f"Input validation failed: {message}",
            retryable=False,
            context=_ctx(context),
        ),
        EXIT_VALIDATION,
    )


def dependency_error(
    message: str, cause: str | None = None, context: Mapping[str, Any] | None = None
) -> RunnerError:
    return RunnerError(
        ErrorEnvelope(
            code="DEPENDENCY_FAILURE",
            message=message,
            user_message="An external dependency is unavailable. Retry may help.",
            retryable=True,
            cause=cause,
            context=_ctx(context),
        ),
        EXIT_DEPENDENCY,
    )


def bug_error(
    message: str, cause: str | None = None, context: Mapping[str, Any] | None = None
) -> RunnerError:
    return RunnerError(
        ErrorEnvelope(
            code="UNEXPECTED_BUG",
            message=message,
            user_message="An unexpected error occurred. Please report this.",
            retryable=False,
            cause=cause,
            context=_ctx(context),
        ),
        EXIT_BUG,
    )


def to_error_envelope(error: BaseException) -> ErrorEnvelope:
    """
    Describe any exception as an `ErrorEnvelope`.

    Args:
        error (BaseException): The failure to describe.

    Returns:
        ErrorEnvelope: The carried envelope for RunnerError; VALIDATION_ERROR for
        schema and contract failures; UNEXPECTED_BUG (with the traceback as cause)
        otherwise.
    """
    if isinstance(error, RunnerError):
        return error.envelope

    if isinstance(error, ValidationError):
        details = format_validation_errors(error)
        return ErrorEnvelope(
            code="VALIDATION_ERROR",
            message=str(error),
            user_message=f"Validation failed: {'; '.join(details)}",
            retryable=False,
            context={"errors": details},
        )

    if isinstance(error, _VALIDATION_TYPES):
        return ErrorEnvelope(
            code="VALIDATION_ERROR",
            message=str(error),
            user_message=f"Validation failed: {error}",
            retryable=False,
        )

    return ErrorEnvelope(
        code="UNEXPECTED_BUG",
        message=str(error) or type(error).__name__,
        user_message="An unexpected error occurred.",
        retryable=False,
        cause="".join(traceback.format_exception(type(error), error, error.__traceback__)),
    )


def exit_code_for_error(error: BaseException) -> int:
    if isinstance(error, RunnerError):
        return error.exit_code
    if isinstance(error, _VALIDATION_TYPES):
        return EXIT_VALIDATION
    return EXIT_BUG
