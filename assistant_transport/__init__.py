"""assistant_transport: HTTP transport and SSE stream processing for the OpenAI API.

Typical use::

    from assistant_transport import ResponsesRepository, StreamingService, create_transport

    repo = ResponsesRepository(create_transport())
    lines = repo.stream_response({"model": "gpt-4o-mini", "input": "Hello"})
    for event in StreamingService().stream_responses(lines):
        ...
"""

from .base import (
    ApiResponseValidationError,
    CancellationToken,
    ErrorCode,
    MaxRetryAttemptsExceededError,
    PoolSettings,
    ResponseCanceledError,
    RetrySettings,
    TransportConfig,
    TransportError,
    build_idempotency_key,
    generate_idempotency_key,
)
from .config import load_transport_config
from .transport import HttpxTransport, OpenAITransport, SseLineStream, create_transport
from .streaming import ResponsesSseParser, SseEvent, StreamingService, StreamReader
from .repositories import ResponsesRepository

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "TransportConfig",
    "RetrySettings",
    "PoolSettings",
    "load_transport_config",
    "ErrorCode",
    "TransportError",
    "ApiResponseValidationError",
    "MaxRetryAttemptsExceededError",
    "ResponseCanceledError",
    "CancellationToken",
    "build_idempotency_key",
    "generate_idempotency_key",
    "OpenAITransport",
    "HttpxTransport",
    "SseLineStream",
    "create_transport",
    "SseEvent",
    "ResponsesSseParser",
    "StreamingService",
    "StreamReader",
    "ResponsesRepository",
]
