from __future__ import annotations

import re

import pytest

from autopilot.runner.retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    backoff_delay_ms,
    generate_idempotency_key,
    with_retry,
)


def test_generate_idempotency_key() -> None:
    key = generate_idempotency_key()
    assert re.fullmatch(r"[0-9a-f-]{36}", key)
    assert generate_idempotency_key("run").startswith("run-")
    assert generate_idempotency_key() != key


@pytest.mark.parametrize(("attempt", "expected"), [(1, 200), (2, 400), (3, 800), (10, 5000)])
def test_backoff_delay(attempt: int, expected: float) -> None:
    assert backoff_delay_ms(attempt, DEFAULT_RETRY_POLICY) == expected


def test_policy_rejects_bad_values() -> None:
    with pytest.raises(ValueError, match="max_attempts"):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError, match="delays"):
        RetryPolicy(initial_delay_ms=-1)


def test_success_after_failures_keeps_one_key() -> None:
    seen: list[tuple[str, int]] = []
    delays: list[float] = []

    def flaky(key: str, attempt: int) -> str:
        seen.append((key, attempt))
        if attempt < 3:
            raise ConnectionError("down")
        return "ok"

    result = with_retry(flaky, idempotency_key="job-1", sleep=delays.append)
    assert result.success
    assert result.value == "ok"
    assert result.attempts == 3
    assert result.idempotency_key == "job-1"
    assert seen == [("job-1", 1), ("job-1", 2), ("job-1", 3)]
    assert delays == [0.2, 0.4]


def test_exhausted_attempts_return_last_error() -> None:
    delays: list[float] = []

    def always_fails(key: str, attempt: int) -> None:
        raise TimeoutError(f"attempt {attempt}")

    result = with_retry(always_fails, RetryPolicy(max_attempts=2), sleep=delays.append)
    assert not result.success
    assert result.attempts == 2
    assert isinstance(result.last_error, TimeoutError)
    assert str(result.last_error) == "attempt 2"
    assert result.value is None
    assert delays == [0.2]
    assert result.idempotency_key


def test_first_attempt_success_does_not_sleep() -> None:
    delays: list[float] = []
    result = with_retry(lambda key, attempt: 42, sleep=delays.append)
    assert result.success and result.value == 42 and result.attempts == 1
    assert delays == []
