"""Incremental parser for the Responses API Server-Sent-Events stream.

The parser consumes raw lines (as produced by ``SseLineStream``) and yields
:class:`SseEvent` records lazily. Framing rules:

- each line is stripped before inspection;
- ``event:`` opens an event; if one with data is already pending it is
  dispatched first, so framing survives transports that drop blank lines;
- ``data:`` values are joined with newlines; leading empty values are dropped;
- other fields (``id:``, ``retry:``) and ``:`` comments are ignored;
- a blank line dispatches the pending event when it has a name and
  non-empty data;
- end of input flushes the pending event.

Payloads are decoded as JSON; anything that is not a JSON object is wrapped
as ``{"data": raw}`` instead of failing the stream.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Iterator, Optional

from ..base.constants import (
    EVENT_OUTPUT_TEXT_COMPLETED,
    EVENT_OUTPUT_TEXT_DELTA,
    EVENT_OUTPUT_TEXT_DONE,
)
from .sse_event import SseEvent

_COMPLETED_TYPES = frozenset({EVENT_OUTPUT_TEXT_COMPLETED, EVENT_OUTPUT_TEXT_DONE})


def _first_string(*candidates: Any) -> Optional[str]:
    for value in candidates:
        if isinstance(value, str):
            return value
    return None


def _nested(data: Dict[str, Any], outer: str, inner: str) -> Any:
    value = data.get(outer)
    return value.get(inner) if isinstance(value, dict) else None


def extract_delta_text(data: Dict[str, Any]) -> str:
    """Text fragment of an ``output_text.delta`` payload ("" when absent)."""
    found = _first_string(
        data.get("delta"),
        data.get("text"),
        _nested(data, "item", "delta"),
        _nested(data, "output_text", "delta"),
    )
    return found or ""


def extract_completed_text(data: Dict[str, Any]) -> str:
    """Full text of an ``output_text.completed`` payload ("" when absent)."""
    found = _first_string(
        data.get("text"),
        data.get("output_text"),
        _nested(data, "item", "text"),
    )
    return found or ""


def decode_data(raw: str) -> Dict[str, Any]:
    try:
        decoded = json.loads(raw)
    except ValueError:
        return {"data": raw}
    return decoded if isinstance(decoded, dict) else {"data": raw}


class ResponsesSseParser:
    """Stateless SSE parser; all state lives in the generator of one pass."""

    def parse(self, lines: Iterable[str]) -> Iterator[SseEvent]:
        event_type: Optional[str] = None
        data = ""

        def pending() -> bool:
            return event_type is not None and data != ""

        for raw_line in lines:
            line = raw_line.strip()

            if line == "":
                if pending():
                    yield SseEvent.of(event_type, decode_data(data))
                event_type, data = None, ""
                continue

            if line.startswith("event:"):
                if pending():
                    yield SseEvent.of(event_type, decode_data(data))
                event_type, data = line[len("event:"):].strip(), ""
            elif line.startswith("data:"):
                part = line[len("data:"):].strip()
                data = f"{data}\n{part}" if data else part

        if pending():
            yield SseEvent.of(event_type, decode_data(data))

    def parse_with_accumulation(self, lines: Iterable[str]) -> Iterator[SseEvent]:
        """Parse and enrich text events with the running accumulated text.

        Delta events gain ``delta``, ``accumulated`` and ``typing: True``;
        completed events gain ``text`` and ``typing: False``. A completed event
        with empty text reports the accumulated text instead.
        ``response.output_text.done`` is enriched like ``.completed``. The
        accumulator resets after every terminal event.
        """
        accumulated = ""
        for event in self.parse(lines):
            if event.type == EVENT_OUTPUT_TEXT_DELTA:
                delta = extract_delta_text(event.data)
                accumulated += delta
                yield SseEvent(
                    type=event.type,
                    data={**event.data, "delta": delta, "accumulated": accumulated, "typing": True},
                    is_final=False,
                )
                continue

            if event.type in _COMPLETED_TYPES:
                text = extract_completed_text(event.data)
                if text == "":
                    text = accumulated
                else:
                    accumulated = text
                yield SseEvent(
                    type=event.type,
                    data={**event.data, "text": text, "typing": False},
                    is_final=False,
                )
                continue

            yield event
            if event.is_final:
                accumulated = ""


__all__ = [
    "ResponsesSseParser",
    "decode_data",
    "extract_completed_text",
    "extract_delta_text",
]
