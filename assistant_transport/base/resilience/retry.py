"""Retry loop with exponential backoff, jitter and idempotency-key persistence.

``request_with_retry`` drives a ``send`` callable until it obtains a response
that is final for the caller, then returns it untouched: status-code error
mapping is the caller's job. Each attempt is reduced to an
:class:`AttemptOutcome` (response or transport error) so the loop itself has
no exception-driven control flow; errors are raised only at its boundary.

Policy summary (see :class:`RetrySettings`):

- a response is retried iff its status is 409, 429 or 500-505;
- a transport exception is retried unless ``is_retryable_exception`` rejects it;
- delay for attempt ``n`` is ``min(initial * multiplier**(n-1), max_delay)``,
  scaled by a uniform factor in ``[0.5, 1.0]`` when jitter is enabled;
- idempotent calls keep one ``Idempotency-Key`` for every attempt.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import httpx

from ..errors import (
    ApiResponseValidationError,
    MaxRetryAttemptsExceededError,
    is_retryable_exception,
    is_retryable_status,
)
from ..idempotency import IDEMPOTENCY_HEADER, generate_idempotency_key
from ..logging import LogContext, get_logger, log_event
from ..settings import RetrySettings

DEFAULT_RETRY_SETTINGS = RetrySettings()

Sender = Callable[[httpx.Headers], httpx.Response]


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of a single send: exactly one of ``response`` / ``error`` is set."""

    response: Optional[httpx.Response] = None
    error: Optional[httpx.TransportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def compute_delay(
    attempt: int,
    policy: RetrySettings = DEFAULT_RETRY_SETTINGS,
    rand: Callable[[], float] = random.random,
) -> float:
    """Return the backoff delay (seconds) after the given 1-based attempt."""
    delay = policy.initial_delay * (policy.backoff_multiplier ** max(0, attempt - 1))
    delay = min(delay, policy.max_delay)
    if policy.jitter:
        delay *= 0.5 + rand() * 0.5
    return delay


def backoff_schedule(policy: RetrySettings = DEFAULT_RETRY_SETTINGS) -> List[float]:
    """Un-jittered delays slept between attempts, in order."""
    return [
        min(policy.initial_delay * (policy.backoff_multiplier ** i), policy.max_delay)
        for i in range(policy.max_attempts - 1)
    ]


def _attempt(send: Sender, headers: httpx.Headers) -> AttemptOutcome:
    try:
        return AttemptOutcome(response=send(headers))
    except httpx.TransportError as exc:
        return AttemptOutcome(error=exc)


def request_with_retry(  # noqa: PLR0913
    send: Sender,
    headers: httpx.Headers,
    *,
    policy: RetrySettings = DEFAULT_RETRY_SETTINGS,
    idempotent: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    key_factory: Callable[[], str] = generate_idempotency_key,
    rand: Callable[[], float] = random.random,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> httpx.Response:
    """Send until a final response is obtained, backing off between attempts.

    Parameters:
        send: Performs one HTTP exchange with the headers it is given.
        headers: Request headers; mutated in place when an idempotency key
            has to be added for the next attempt.
        policy: Retry/backoff settings.
        idempotent: Ensure an ``Idempotency-Key`` header exists for retries.
        sleep: Blocking sleep used for backoff (injectable for tests).
        key_factory: Generates the idempotency key when none is present.
        rand: Uniform ``[0, 1)`` source used for jitter.

    Returns:
        The first non-retryable response, or the last response once retries
        are disabled or exhausted.

    Raises:
        ApiResponseValidationError: a transport error could not be retried
            (status 502).
        MaxRetryAttemptsExceededError: no attempt ever produced a response.
    """
    log = logger or get_logger(__name__)
    max_attempts = max(1, policy.max_attempts)
    attempt = 0
    last_response: Optional[httpx.Response] = None

    while attempt < max_attempts:
        attempt += 1
        outcome = _attempt(send, headers)
        final = not policy.enabled or attempt >= max_attempts

        if outcome.ok:
            response = outcome.response
            last_response = response
            if final or not is_retryable_status(response.status_code):
                return response
            response.close()
            status, error = response.status_code, None
        else:
            exc = outcome.error
            if final or not is_retryable_exception(exc):
                log_event(
                    log,
                    "transport.request.failed",
                    ctx,
                    level=logging.WARNING,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=type(exc).__name__,
                )
                raise ApiResponseValidationError(
                    str(exc) or "Transport error during OpenAI request.", status_code=502
                ) from exc
            status, error = None, type(exc).__name__

        delay = compute_delay(attempt, policy, rand)
        log_event(
            log,
            "transport.retry",
            ctx,
            attempt=attempt,
            max_attempts=max_attempts,
            delay=round(delay, 3),
            status=status,
            error=error,
        )
        sleep(delay)

        if idempotent and IDEMPOTENCY_HEADER not in headers:
            headers[IDEMPOTENCY_HEADER] = key_factory()

    if last_response is not None:
        return last_response
    raise MaxRetryAttemptsExceededError()


__all__ = [
    "AttemptOutcome",
    "DEFAULT_RETRY_SETTINGS",
    "backoff_schedule",
    "compute_delay",
    "request_with_retry",
]
