"""
Transport Base Package

Provider-agnostic building blocks shared by the transport, streaming and
repository layers:

- Settings: typed configuration handed to transports at construction time
- Errors: normalized error taxonomy and classification helpers
- Resilience: retry loop with backoff and idempotency-key persistence
- HTTP: pooled ``httpx`` clients
- Logging: structured JSON logging helpers
"""

from .settings import PoolSettings, RetrySettings, TransportConfig
from .errors import (
    ApiResponseValidationError,
    ErrorCode,
    MaxRetryAttemptsExceededError,
    ResponseCanceledError,
    TransportError,
)
from .idempotency import build_idempotency_key, generate_idempotency_key
from .resilience import compute_delay, request_with_retry
from .cancellation import CancellationToken
from .timeouts import endpoint_timeout, resolve_sse_timeout, resolve_timeout

__all__ = [
    # Settings
    "TransportConfig",
    "RetrySettings",
    "PoolSettings",
    # Errors
    "ErrorCode",
    "TransportError",
    "ApiResponseValidationError",
    "MaxRetryAttemptsExceededError",
    "ResponseCanceledError",
    # Idempotency
    "build_idempotency_key",
    "generate_idempotency_key",
    # Resilience
    "compute_delay",
    "request_with_retry",
    # Cancellation
    "CancellationToken",
    # Timeouts
    "endpoint_timeout",
    "resolve_timeout",
    "resolve_sse_timeout",
]
