"""
Retry with exponential backoff, carrying one idempotency key across attempts.

The callable receives ``(idempotency_key, attempt)`` so it can forward the key to
whatever it talks to; every attempt of one call sees the same key.

Examples:
    >>> calls = []
    >>> def flaky(key, attempt):
    ...     calls.append(key)
    ...     if attempt < 2:
    ...         raise ConnectionError("down")
    ...     return "ok"
    >>> result = with_retry(flaky, idempotency_key="k-1", sleep=lambda s: None)
    >>> result.success, result.value, result.attempts, set(calls)
    (True, 'ok', 2, {'k-1'})
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

__all__ = [
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "RetryResult",
    "generate_idempotency_key",
    "backoff_delay_ms",
    "with_retry",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attributes:
        max_attempts (int): Total attempts, including the first (>= 1).
        initial_delay_ms (int): Delay after the first failure.
        max_delay_ms (int): Upper bound on any single delay.
        backoff_multiplier (float): Growth factor between consecutive delays.
    """

    max_attempts: int = 3
    initial_delay_ms: int = 200
    max_delay_ms: int = 5000
    backoff_multiplier: float = 2

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("delays must be >= 0")


DEFAULT_RETRY_POLICY = RetryPolicy()


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    success: bool
    attempts: int
    idempotency_key: str
    value: T | None = None
    last_error: BaseException | None = None


def generate_idempotency_key(prefix: str | None = None) -> str:
    """Random uuid4 key, optionally ``{prefix}-{uuid}``."""
    key = str(uuid.uuid4())
    return f"{prefix}-{key}" if prefix else key


def backoff_delay_ms(attempt: int, policy: RetryPolicy = DEFAULT_RETRY_POLICY) -> float:
    """Delay after failed ``attempt`` (1-based): min(initial * mult^(attempt-1), max)."""
    delay = policy.initial_delay_ms * policy.backoff_multiplier ** (attempt - 1)
    return min(delay, policy.max_delay_ms)


def with_retry(
    fn: Callable[[str, int], T],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    idempotency_key: str | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RetryResult[T]:
    """
    Call ``fn`` until it returns or the policy's attempts run out.

    Args:
        fn (Callable[[str, int], T]): Called as ``fn(idempotency_key, attempt)``.
        policy (RetryPolicy): Attempt count and backoff.
        idempotency_key (str | None): Key shared by all attempts; generated if None.
        sleep (Callable[[float], None]): Sleeps for the given seconds; time.sleep.

    Returns:
        RetryResult[T]: ``success=True`` with the value, or ``success=False`` with the
        last exception. Exceptions from ``fn`` are never re-raised.
    """
    key = idempotency_key or generate_idempotency_key()
    last_error: BaseException | None = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            value = fn(key, attempt)
        except Exception as e:
            last_error = e
            logger.warning(
                "attempt failed",
                extra={"attempt": attempt, "idempotency_key": key, "error": repr(e)},
            )
            if attempt < policy.max_attempts:
                sleep(backoff_delay_ms(attempt, policy) / 1000)
            continue
        return RetryResult(success=True, attempts=attempt, idempotency_key=key, value=value)

    return RetryResult(
        success=False,
        attempts=policy.max_attempts,
        idempotency_key=key,
        last_error=last_error,
    )
