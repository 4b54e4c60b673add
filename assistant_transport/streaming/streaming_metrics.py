"""Streaming metrics data structures.

Kept apart from the service so the orchestration loop stays small.
"""
from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .sse_event import SseEvent


@dataclass
class StreamMetrics:
    """Counters collected over one ``stream_responses`` pass.

    ``bytes`` is the size of each event serialized as JSON, a proxy for the
    volume delivered to the consumer rather than the wire size.
    """

    stream_id: str
    started_at: float = field(default_factory=time.monotonic)
    events: int = 0
    bytes: int = 0
    time_to_first_delta_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    last_event_type: Optional[str] = None

    def record(self, event: SseEvent, *, is_delta: bool) -> None:
        self.events += 1
        self.bytes += event_size(event)
        self.last_event_type = event.type
        if is_delta and self.time_to_first_delta_ms is None:
            self.time_to_first_delta_ms = self.elapsed_ms()

    def elapsed_ms(self) -> float:
        return round((time.monotonic() - self.started_at) * 1000.0, 3)

    def finish(self) -> "StreamMetrics":
        self.total_duration_ms = self.elapsed_ms()
        return self

    def as_fields(self) -> Dict[str, Any]:
        return {
            "events": self.events,
            "bytes": self.bytes,
            "time_to_first_delta_ms": self.time_to_first_delta_ms,
            "duration_ms": self.total_duration_ms,
            "last_event_type": self.last_event_type,
        }


def event_size(event: SseEvent) -> int:
    """Length in bytes of the event's JSON serialization."""
    return len(json.dumps(event.to_dict(), ensure_ascii=False, default=str).encode("utf-8"))


__all__ = ["StreamMetrics", "event_size"]
