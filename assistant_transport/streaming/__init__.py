"""SSE stream processing for the Responses API.

- :class:`ResponsesSseParser`: line framing and delta accumulation
- :class:`StreamingService`: callbacks, stop predicate, cancellation, metrics
- :class:`StreamReader`: higher-level event and text-chunk projections
"""

from .sse_event import SseEvent
from .sse_parser import ResponsesSseParser, decode_data, extract_completed_text, extract_delta_text
from .streaming_metrics import StreamMetrics, event_size
from .streaming_service import EventCallback, StopPredicate, StreamingService
from .stream_reader import StreamReader

__all__ = [
    "SseEvent",
    "ResponsesSseParser",
    "decode_data",
    "extract_completed_text",
    "extract_delta_text",
    "StreamMetrics",
    "event_size",
    "EventCallback",
    "StopPredicate",
    "StreamingService",
    "StreamReader",
]
