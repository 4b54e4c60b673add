"""Streaming calls: initiation errors and lazy line framing."""
from __future__ import annotations

import json
from typing import Iterator, List

import httpx
import pytest

from assistant_transport.base.errors import ApiResponseValidationError
from assistant_transport.transport import SseLineStream


class _ChunkStream(httpx.SyncByteStream):
    def __init__(self, chunks: List[bytes]) -> None:
        self._chunks = chunks
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks

    def close(self) -> None:
        self.closed = True


def _sse_handler(chunks: List[bytes], seen: List[httpx.Request], status: int = 200, stream=None):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            status,
            stream=stream or _ChunkStream(chunks),
            headers={"Content-Type": "text/event-stream"},
        )

    return handler


def test_stream_sse_forces_streaming_request(make_transport):
    seen: List[httpx.Request] = []
    transport = make_transport(_sse_handler([b"event: a\ndata: {}\n\n"], seen))

    lines = transport.stream_sse("/v1/responses", {"model": "m", "stream": False}, idempotent=True)

    assert isinstance(lines, SseLineStream)
    assert list(lines) == ["event: a", "data: {}"]
    request = seen[0]
    assert request.headers["Accept"] == "text/event-stream"
    assert json.loads(request.content) == {"model": "m", "stream": True}
    assert request.headers["Idempotency-Key"] == "key-1"


def test_lines_split_across_chunks_are_joined(make_transport):
    seen: List[httpx.Request] = []
    chunks = [b"event: response.output", b"_text.delta\r\nda", b'ta: {"delta":"H\xc3', b'\xa9"}\n\n']
    transport = make_transport(_sse_handler(chunks, seen))

    lines = list(transport.stream_sse("/v1/responses", {}))

    assert lines == ["event: response.output_text.delta", 'data: {"delta":"Hé"}']


def test_trailing_line_without_newline_is_flushed(make_transport):
    seen: List[httpx.Request] = []
    transport = make_transport(_sse_handler([b"event: done\ndata: [DONE]"], seen))

    assert list(transport.stream_sse("/v1/responses", {})) == ["event: done", "data: [DONE]"]


def test_error_status_raises_before_any_line(make_transport):
    seen: List[httpx.Request] = []
    body = json.dumps({"error": {"message": "bad key", "type": "auth"}}).encode()
    transport = make_transport(_sse_handler([body], seen, status=401))

    with pytest.raises(ApiResponseValidationError) as ei:
        transport.stream_sse("/v1/responses", {})

    assert ei.value.status_code == 401
    assert "bad key" in str(ei.value)


def test_retryable_status_is_retried_before_streaming(make_transport, sleep):
    seen: List[httpx.Request] = []
    streams = [_ChunkStream([b"busy"]), _ChunkStream([b"event: ok\ndata: {}\n"])]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        status = 503 if len(seen) == 1 else 200
        return httpx.Response(status, stream=streams[len(seen) - 1])

    transport = make_transport(handler)

    lines = list(transport.stream_sse("/v1/responses", {}, idempotent=True))

    assert lines == ["event: ok", "data: {}"]
    assert streams[0].closed
    assert sleep.calls == [0.5]
    assert seen[0].headers["Idempotency-Key"] == seen[1].headers["Idempotency-Key"]


def test_close_releases_response(make_transport):
    seen: List[httpx.Request] = []
    body = _ChunkStream([b"event: a\ndata: 1\n", b"event: b\ndata: 2\n"])
    transport = make_transport(_sse_handler([], seen, stream=body))

    with transport.stream_sse("/v1/responses", {}) as lines:
        assert next(lines) == "event: a"

    assert lines.closed
    assert body.closed
    assert list(lines) == []


def test_sse_uses_stream_timeout(make_transport):
    seen: List[httpx.Request] = []
    transport = make_transport(_sse_handler([b""], seen), sse_timeout=300.0)

    list(transport.stream_sse("/v1/responses", {}))

    assert seen[0].extensions["timeout"]["read"] == 300.0


class _PacedStream(httpx.SyncByteStream):
    """Body that records when each chunk is handed to the client."""

    def __init__(self, chunks: List[bytes], log: List[str], error: Exception = None) -> None:
        self._chunks = chunks
        self._log = log
        self._error = error

    def __iter__(self) -> Iterator[bytes]:
        for number, chunk in enumerate(self._chunks, 1):
            self._log.append(f"sent chunk {number}")
            yield chunk
        if self._error is not None:
            raise self._error
        self._log.append("sent eof")


def test_first_line_is_delivered_before_next_chunk_is_read(make_transport):
    log: List[str] = []
    body = _PacedStream(
        [b'event: response.output_text.delta\ndata: {"delta":"Hi"}\n\n', b"event: response.completed\ndata: {}\n\n"],
        log,
    )
    transport = make_transport(_sse_handler([], [], stream=body))

    lines = transport.stream_sse("/v1/responses", {})
    log.append(f"got {next(lines)}")

    assert log == ["sent chunk 1", "got event: response.output_text.delta"]
    assert next(lines) == 'data: {"delta":"Hi"}'
    assert log == ["sent chunk 1", "got event: response.output_text.delta"]

    rest = list(lines)

    assert rest == ["event: response.completed", "data: {}"]
    assert log[-2:] == ["sent chunk 2", "sent eof"]


def test_large_chunk_is_split_at_chunk_size():
    raw = b"event: a\ndata: " + b"x" * 40 + b"\n"
    response = httpx.Response(200, stream=_ChunkStream([raw]))

    assert list(SseLineStream(response, chunk_size=4)) == ["event: a", "data: " + "x" * 40]


def test_read_failure_mid_body_raises_typed_error(make_transport):
    log: List[str] = []
    body = _PacedStream([b"event: a\ndata: 1\n"], log, error=httpx.ReadTimeout("read timed out"))
    transport = make_transport(_sse_handler([], [], stream=body))

    lines = transport.stream_sse("/v1/responses", {})
    received: List[str] = []
    with pytest.raises(ApiResponseValidationError) as ei:
        for line in lines:
            received.append(line)

    assert received == ["event: a", "data: 1"]
    assert ei.value.status_code == 502
    assert "read timed out" in str(ei.value)
    assert isinstance(ei.value.__cause__, httpx.ReadTimeout)
    assert lines.closed


def test_small_chunks_split_lines_and_characters():
    raw = 'event: response.output_text.delta\r\ndata: {"delta":"é"}\n\n'.encode("utf-8")
    chunks = [raw[i:i + 3] for i in range(0, len(raw), 3)]
    response = httpx.Response(200, stream=_ChunkStream(chunks))

    lines = list(SseLineStream(response, chunk_size=5))

    assert lines == ["event: response.output_text.delta", 'data: {"delta":"é"}']
    assert response.is_closed
