"""Transport-agnostic retry helper built on tenacity.

The helper knows nothing about HTTP: it calls ``attempt_fn`` until it
returns, the error is not retryable, or attempts run out.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar, Union

from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

logger = logging.getLogger(__name__)

T = TypeVar("T")

BackoffFn = Callable[[int], float]
ExceptionTypes = Union[Type[BaseException], Tuple[Type[BaseException], ...]]


def linear_backoff(base: float = 2.0) -> BackoffFn:
    """Delay of ``base * attempt`` seconds after the given failed attempt (2s, 4s, 6s...)."""

    def _backoff(attempt: int) -> float:
        return base * attempt

    return _backoff


def call_with_retries(
    attempt_fn: Callable[[], T],
    *,
    max_attempts: int,
    backoff: BackoffFn,
    retry_on: ExceptionTypes = Exception,
    sleep: Optional[Callable[[float], None]] = None,
    before_sleep: Optional[Callable[[int, BaseException, float], None]] = None,
) -> T:
    """Call ``attempt_fn`` with bounded retries.

    Args:
        attempt_fn: Zero-argument callable performing one attempt
        max_attempts: Total number of attempts (>= 1)
        backoff: Maps the number of the failed attempt to a delay in seconds
        retry_on: Exception type(s) that trigger a retry; others propagate at once
        sleep: Sleep function (defaults to time.sleep)
        before_sleep: Callback ``(attempt, error, delay)`` invoked before each sleep

    Returns:
        Result of the first successful attempt

    Raises:
        The last exception raised by ``attempt_fn`` when attempts are exhausted,
        or the first non-retryable exception.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    def _wait(retry_state: RetryCallState) -> float:
        return backoff(retry_state.attempt_number)

    def _before_sleep(retry_state: RetryCallState) -> None:
        if before_sleep is None or retry_state.outcome is None:
            return
        attempt = retry_state.attempt_number
        before_sleep(attempt, retry_state.outcome.exception(), backoff(attempt))

    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=_wait,
        retry=retry_if_exception_type(retry_on),
        sleep=sleep or time.sleep,
        before_sleep=_before_sleep,
        reraise=True,
    )
    return retrying(attempt_fn)
