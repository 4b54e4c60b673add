"""Resilience primitives (retry/backoff) for the transport layer."""

from .retry import (
    AttemptOutcome,
    DEFAULT_RETRY_SETTINGS,
    backoff_schedule,
    compute_delay,
    request_with_retry,
)

__all__ = [
    "AttemptOutcome",
    "DEFAULT_RETRY_SETTINGS",
    "backoff_schedule",
    "compute_delay",
    "request_with_retry",
]
