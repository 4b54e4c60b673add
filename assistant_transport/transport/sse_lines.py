"""Lazy line reader over a streaming HTTP response.

``SseLineStream`` forwards body bytes as soon as the connection delivers them,
capping each decode step at ``chunk_size`` bytes. It splits on ``\\r?\\n``
and yields each non-empty line as soon as it is complete. A line split across
two reads is carried over rather than emitted in halves.

The stream is single-pass. The underlying response is released when the body
reaches EOF, when the consumer calls :meth:`close` (or leaves a ``with``
block), or when reading fails. Network failures mid-body surface as
:class:`ApiResponseValidationError` with status 502.
"""
from __future__ import annotations

import codecs
import re
from typing import Iterator, Optional

import httpx

from ..base.constants import SSE_CHUNK_SIZE
from ..base.errors import ApiResponseValidationError

_LINE_BREAK = re.compile(r"\r?\n")


class SseLineStream:
    """Iterator of raw SSE lines bound to an open ``httpx.Response``."""

    def __init__(self, response: httpx.Response, chunk_size: int = SSE_CHUNK_SIZE) -> None:
        self._response = response
        self._chunk_size = chunk_size
        self._lines: Optional[Iterator[str]] = None
        self._closed = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> "SseLineStream":
        return self

    def __next__(self) -> str:
        if self._closed:
            raise StopIteration
        if self._lines is None:
            self._lines = self._read_lines()
        return next(self._lines)

    def __enter__(self) -> "SseLineStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the connection; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._lines is not None:
            self._lines.close()
        self._response.close()

    def _read_lines(self) -> Iterator[str]:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""
        try:
            for received in self._response.iter_bytes():
                for start in range(0, len(received), self._chunk_size):
                    pending += decoder.decode(received[start:start + self._chunk_size])
                    *complete, pending = _LINE_BREAK.split(pending)
                    for line in complete:
                        if line:
                            yield line
            pending += decoder.decode(b"", final=True)
            tail = pending.rstrip("\r")
            if tail:
                yield tail
        except httpx.TransportError as exc:
            raise ApiResponseValidationError(
                str(exc) or "Transport error while reading the event stream.", status_code=502
            ) from exc
        finally:
            self._closed = True
            self._response.close()


__all__ = ["SseLineStream"]
