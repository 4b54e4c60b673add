"""Higher-level projections over accumulated Responses stream events.

``normalize`` maps wire event types to a small application vocabulary:

==================================  =======================
``response.output_text.delta``      ``message.delta``
``response.output_text.completed``  ``message.completed``
``*tool_call.created*``             ``tool_call.started``
``*tool_call.delta*``               ``tool_call.args.delta``
``response.completed``              ``completed`` (final)
``response.failed``                 ``failed`` (final)
``response.canceled``               ``canceled`` (final)
==================================  =======================

Anything else passes through unchanged. ``on_text_chunks`` reduces the stream
to its non-empty text pieces.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Union

from ..base.constants import (
    EVENT_OUTPUT_TEXT_COMPLETED,
    EVENT_OUTPUT_TEXT_DELTA,
    EVENT_OUTPUT_TEXT_DONE,
    EVENT_RESPONSE_CANCELED,
    EVENT_RESPONSE_COMPLETED,
    EVENT_RESPONSE_FAILED,
)
from ..base.logging import get_logger, log_event
from .sse_event import SseEvent
from .sse_parser import extract_completed_text, extract_delta_text

EventLike = Union[SseEvent, Dict[str, Any]]

_TERMINAL_ALIASES = {
    EVENT_RESPONSE_COMPLETED: "completed",
    EVENT_RESPONSE_FAILED: "failed",
    EVENT_RESPONSE_CANCELED: "canceled",
}
_COMPLETED_TYPES = frozenset({EVENT_OUTPUT_TEXT_COMPLETED, EVENT_OUTPUT_TEXT_DONE})


def _unpack(event: EventLike) -> tuple[str, Dict[str, Any], bool]:
    if isinstance(event, SseEvent):
        return event.type, dict(event.data), event.is_final
    data = event.get("data")
    return (
        str(event.get("type") or ""),
        dict(data) if isinstance(data, dict) else {},
        bool(event.get("isFinal", event.get("is_final", False))),
    )


def extract_args_delta(data: Dict[str, Any]) -> str:
    value = data.get("delta")
    if isinstance(value, str):
        return value
    arguments = data.get("arguments")
    if isinstance(arguments, dict) and isinstance(arguments.get("delta"), str):
        return arguments["delta"]
    return ""


class StreamReader:
    """Normalize or flatten events produced by ``StreamingService``."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or get_logger(__name__)

    def normalize(self, events: Iterable[EventLike]) -> Iterator[SseEvent]:
        for event in events:
            event_type, data, is_final = _unpack(event)

            if event_type == EVENT_OUTPUT_TEXT_DELTA:
                yield SseEvent("message.delta", {"text": extract_delta_text(data), "typing": True})
            elif event_type in _COMPLETED_TYPES:
                yield SseEvent("message.completed", {"text": extract_completed_text(data), "typing": False})
            elif "tool_call.created" in event_type:
                yield SseEvent("tool_call.started", data)
            elif "tool_call.delta" in event_type:
                yield SseEvent("tool_call.args.delta", {**data, "delta": extract_args_delta(data)})
            elif event_type in _TERMINAL_ALIASES:
                yield SseEvent(_TERMINAL_ALIASES[event_type], data, is_final=True)
            else:
                yield SseEvent(event_type, data, is_final=is_final)

    def on_text_chunks(self, events: Iterable[EventLike], callback: Callable[[str], None]) -> Iterator[str]:
        """Yield each non-empty text delta or completed text, calling ``callback`` first.

        Callback exceptions are logged and otherwise ignored.
        """
        for event in events:
            event_type, data, _ = _unpack(event)
            if event_type == EVENT_OUTPUT_TEXT_DELTA:
                text = extract_delta_text(data)
            elif event_type in _COMPLETED_TYPES:
                text = extract_completed_text(data)
            else:
                continue
            if not text:
                continue
            try:
                callback(text)
            except Exception as exc:
                log_event(
                    self._logger,
                    "stream.callback_error",
                    level=logging.WARNING,
                    event_type=event_type,
                    error=type(exc).__name__,
                )
            yield text


__all__ = ["StreamReader", "EventLike", "extract_args_delta"]
