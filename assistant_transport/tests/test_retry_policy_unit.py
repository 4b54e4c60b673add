from __future__ import annotations

import httpx
import pytest

from assistant_transport.base.errors import ApiResponseValidationError
from assistant_transport.base.resilience import backoff_schedule, compute_delay, request_with_retry
from assistant_transport.base.resilience.retry import AttemptOutcome
from assistant_transport.base.settings import RetrySettings


def test_backoff_is_capped_and_non_decreasing_without_jitter():
    policy = RetrySettings(max_attempts=10, initial_delay=0.5, backoff_multiplier=2.0, max_delay=4.0, jitter=False)

    delays = [compute_delay(n, policy) for n in range(1, 10)]

    assert delays[:4] == [0.5, 1.0, 2.0, 4.0]
    assert all(d <= 4.0 for d in delays)
    assert all(a <= b for a, b in zip(delays, delays[1:]))
    assert backoff_schedule(policy) == delays


def test_jitter_stays_within_half_and_full_delay():
    policy = RetrySettings(initial_delay=1.0, jitter=True)

    assert compute_delay(1, policy, rand=lambda: 0.0) == 0.5
    assert compute_delay(1, policy, rand=lambda: 1.0) == 1.0


def test_attempt_outcome_ok_flag():
    assert AttemptOutcome(response=httpx.Response(200)).ok
    assert not AttemptOutcome(error=httpx.ConnectError("x")).ok


def test_key_added_for_retry_when_missing():
    sent = []

    def send(headers: httpx.Headers) -> httpx.Response:
        sent.append(headers.get("Idempotency-Key"))
        return httpx.Response(429 if len(sent) == 1 else 200)

    response = request_with_retry(
        send,
        httpx.Headers(),
        idempotent=True,
        sleep=lambda _: None,
        key_factory=lambda: "generated",
    )

    assert response.status_code == 200
    assert sent == [None, "generated"]


def test_non_httpx_exceptions_propagate():
    def send(headers: httpx.Headers) -> httpx.Response:
        raise KeyError("bug")

    with pytest.raises(KeyError):
        request_with_retry(send, httpx.Headers(), sleep=lambda _: None)


def test_failure_is_logged_before_raising(log_events):
    def send(headers: httpx.Headers) -> httpx.Response:
        raise httpx.ConnectTimeout("slow")

    with pytest.raises(ApiResponseValidationError):
        request_with_retry(send, httpx.Headers(), policy=RetrySettings(max_attempts=2), sleep=lambda _: None)

    events = [e["event"] for e in log_events]
    assert events == ["transport.retry", "transport.request.failed"]
    assert log_events[-1]["error"] == "ConnectTimeout"
