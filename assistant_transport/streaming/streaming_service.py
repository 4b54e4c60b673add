"""Drive the SSE parser for a consumer with callbacks and cooperative stop.

``StreamingService.stream_responses`` sits between the line stream returned
by ``HttpxTransport.stream_sse`` and application code:

* events are accumulated via :class:`ResponsesSseParser`;
* ``response.canceled`` is surfaced as :class:`ResponseCanceledError`;
* ``on_event`` observes every event; its exceptions are logged, never raised;
* ``should_stop`` (a callable or :class:`CancellationToken`) is checked after
  each event is delivered, so a stop never loses the event in hand;
* the line stream is closed however iteration ends, which releases the
  underlying HTTP connection.

Lifecycle events (``stream.start``, ``stream.complete``, ``stream.client_stop``,
``stream.canceled``, ``stream.error``) carry the metrics gathered so far.
"""
from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable, Iterator, Optional, Union

from ..base.cancellation import CancellationToken
from ..base.constants import EVENT_OUTPUT_TEXT_DELTA, EVENT_RESPONSE_CANCELED
from ..base.errors import ResponseCanceledError
from ..base.logging import LogContext, get_logger, log_event
from .sse_event import SseEvent
from .sse_parser import ResponsesSseParser
from .streaming_metrics import StreamMetrics

EventCallback = Callable[[SseEvent], None]
StopPredicate = Union[Callable[[], bool], CancellationToken]


def _canceled_error(event: SseEvent) -> ResponseCanceledError:
    message = event.data.get("message")
    if isinstance(message, str) and message:
        return ResponseCanceledError(message)
    return ResponseCanceledError()


def _close_lines(lines: Iterable[str]) -> None:
    close = getattr(lines, "close", None)
    if callable(close):
        close()


class StreamingService:
    """Consumer-facing wrapper over :class:`ResponsesSseParser`."""

    def __init__(
        self,
        parser: Optional[ResponsesSseParser] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._parser = parser or ResponsesSseParser()
        self._logger = logger or get_logger(__name__)

    def stream_responses(
        self,
        lines: Iterable[str],
        on_event: Optional[EventCallback] = None,
        should_stop: Optional[StopPredicate] = None,
    ) -> Iterator[SseEvent]:
        """Yield accumulated events from ``lines``.

        Raises:
            ResponseCanceledError: the server reported ``response.canceled``.
        """
        metrics = StreamMetrics(stream_id=uuid.uuid4().hex)
        ctx = LogContext(operation="stream_responses", stream_id=metrics.stream_id)
        log_event(self._logger, "stream.start", ctx)

        try:
            for event in self._parser.parse_with_accumulation(lines):
                metrics.record(event, is_delta=event.type == EVENT_OUTPUT_TEXT_DELTA)

                if event.type == EVENT_RESPONSE_CANCELED:
                    log_event(self._logger, "stream.canceled", ctx, **metrics.finish().as_fields())
                    raise _canceled_error(event)

                if on_event is not None:
                    self._notify(on_event, event, ctx)

                yield event

                if should_stop is not None and should_stop():
                    log_event(self._logger, "stream.client_stop", ctx, **metrics.finish().as_fields())
                    return

            log_event(self._logger, "stream.complete", ctx, **metrics.finish().as_fields())
        except ResponseCanceledError:
            raise
        except Exception as exc:
            log_event(
                self._logger,
                "stream.error",
                ctx,
                level=logging.ERROR,
                error=type(exc).__name__,
                message=str(exc),
                **metrics.finish().as_fields(),
            )
            raise
        finally:
            _close_lines(lines)

    def _notify(self, on_event: EventCallback, event: SseEvent, ctx: LogContext) -> None:
        try:
            on_event(event)
        except Exception as exc:  # callback failures never abort the stream
            log_event(
                self._logger,
                "stream.callback_error",
                ctx,
                level=logging.WARNING,
                event_type=event.type,
                error=type(exc).__name__,
                message=str(exc),
            )


__all__ = ["StreamingService", "EventCallback", "StopPredicate"]
