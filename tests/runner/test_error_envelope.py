from __future__ import annotations

import pytest
from pydantic import ValidationError

from autopilot.core.errors import GrammarError, TenantMismatchError
from autopilot.core.schema import TenantContext
from autopilot.runner.errors import (
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


def test_exit_code_values() -> None:
    assert (EXIT_SUCCESS, EXIT_VALIDATION, EXIT_DEPENDENCY, EXIT_BUG) == (0, 2, 3, 4)


@pytest.mark.parametrize(
    ("factory", "code", "exit_code", "retryable"),
    [
        (lambda: validation_error("bad input", {"field": "x"}), "VALIDATION_ERROR", 2, False),
        (lambda: dependency_error("registry down", cause="timeout"), "DEPENDENCY_FAILURE", 3, True),
        (lambda: bug_error("boom"), "UNEXPECTED_BUG", 4, False),
    ],
)
def test_factories(factory, code: str, exit_code: int, retryable: bool) -> None:
    err = factory()
    assert isinstance(err, RunnerError)
    assert err.envelope.code == code
    assert err.envelope.retryable is retryable
    assert err.exit_code == exit_code
    assert exit_code_for_error(err) == exit_code
    assert to_error_envelope(err) is err.envelope


def test_validation_error_user_message() -> None:
    env = validation_error("missing tenant").envelope
    assert env.user_message == "Input validation failed: missing tenant"
    assert str(validation_error("missing tenant")) == "missing tenant"


def test_to_dict_drops_unset_optionals() -> None:
    env = ErrorEnvelope(code="X", message="m", user_message="u")
    assert env.to_dict() == {"code": "X", "message": "m", "user_message": "u", "retryable": False}
    full = dependency_error("m", cause="c", context={"k": 1}).envelope.to_dict()
    assert full["cause"] == "c"
    assert full["context"] == {"k": 1}


def test_pydantic_errors_map_to_validation() -> None:
    with pytest.raises(ValidationError) as info:
        TenantContext.model_validate({"tenant_id": "t"})
    env = to_error_envelope(info.value)
    assert env.code == "VALIDATION_ERROR"
    assert env.context is not None
    assert any("project_id" in e for e in env.context["errors"])
    assert exit_code_for_error(info.value) == EXIT_VALIDATION


@pytest.mark.parametrize(
    "error", [GrammarError("unknown priority"), TenantMismatchError("tenant differs")]
)
def test_contract_errors_map_to_validation(error: Exception) -> None:
    env = to_error_envelope(error)
    assert env.code == "VALIDATION_ERROR"
    assert str(error) in env.user_message
    assert exit_code_for_error(error) == EXIT_VALIDATION


def test_unexpected_errors_carry_traceback() -> None:
    try:
        raise KeyError("lost")
    except KeyError as e:
        env = to_error_envelope(e)
        code = exit_code_for_error(e)
    assert env.code == "UNEXPECTED_BUG"
    assert env.cause is not None and "KeyError" in env.cause
    assert code == EXIT_BUG
