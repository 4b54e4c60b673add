"""HTTP transport for the OpenAI API.

- :class:`HttpxTransport`: JSON, multipart, SSE, GET and DELETE calls with
  retry, backoff, idempotency keys and error mapping
- :class:`SseLineStream`: lazy line iterator over a streaming response
- :class:`OpenAITransport`: protocol consumed by repositories and services
"""

from .protocol import OpenAITransport, ProgressCallback
from .httpx_transport import HttpxTransport, ProgressByteStream
from .sse_lines import SseLineStream
from .multipart import MultipartBody, build_multipart, sniff_content_type
from .error_mapping import UNEXPECTED_FORMAT_MESSAGE, decode_or_fail, raise_for_error
from .factory import create_transport, default_headers

__all__ = [
    "OpenAITransport",
    "ProgressCallback",
    "HttpxTransport",
    "ProgressByteStream",
    "SseLineStream",
    "MultipartBody",
    "build_multipart",
    "sniff_content_type",
    "UNEXPECTED_FORMAT_MESSAGE",
    "decode_or_fail",
    "raise_for_error",
    "create_transport",
    "default_headers",
]
