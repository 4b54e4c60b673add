"""Shared constants for the transport layer.

Centralizes wire-level literals so transport, streaming and tests agree on
them without duplicating magic strings.
"""

from __future__ import annotations

# Bytes read from a streaming body per iteration.
SSE_CHUNK_SIZE = 1024

JSON_CONTENT_TYPE = "application/json"
SSE_CONTENT_TYPE = "text/event-stream"

# Reserved multipart filename used when none can be inferred from the upload.
DEFAULT_UPLOAD_FILENAME = "upload"

# Path fragment -> default timeout (seconds) for slow endpoints.
ENDPOINT_TIMEOUTS = {
    "/audio/": 180.0,
    "/images/": 180.0,
}

EVENT_RESPONSE_COMPLETED = "response.completed"
EVENT_RESPONSE_FAILED = "response.failed"
EVENT_RESPONSE_CANCELED = "response.canceled"
EVENT_OUTPUT_TEXT_DELTA = "response.output_text.delta"
EVENT_OUTPUT_TEXT_COMPLETED = "response.output_text.completed"
EVENT_OUTPUT_TEXT_DONE = "response.output_text.done"

TERMINAL_EVENT_TYPES = frozenset(
    {EVENT_RESPONSE_COMPLETED, EVENT_RESPONSE_FAILED, EVENT_RESPONSE_CANCELED}
)

__all__ = [
    "SSE_CHUNK_SIZE",
    "JSON_CONTENT_TYPE",
    "SSE_CONTENT_TYPE",
    "DEFAULT_UPLOAD_FILENAME",
    "ENDPOINT_TIMEOUTS",
    "EVENT_RESPONSE_COMPLETED",
    "EVENT_RESPONSE_FAILED",
    "EVENT_RESPONSE_CANCELED",
    "EVENT_OUTPUT_TEXT_DELTA",
    "EVENT_OUTPUT_TEXT_COMPLETED",
    "EVENT_OUTPUT_TEXT_DONE",
    "TERMINAL_EVENT_TYPES",
]
