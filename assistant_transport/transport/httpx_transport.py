"""``httpx``-backed implementation of :class:`OpenAITransport`.

Every call shape (JSON, multipart, SSE, GET, DELETE) goes through the same
pipeline:

1. headers are prepared (content negotiation, idempotency key);
2. the timeout is resolved from the per-call value or the injected config;
3. :func:`request_with_retry` sends the request, backing off on retryable
   statuses and transport failures;
4. the final response is decoded or mapped to a typed error.

The transport keeps no per-call mutable state: retry bookkeeping and the
idempotency key live on the stack of the call that owns them, so one instance
may serve concurrent callers sharing the same pooled ``httpx.Client``.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from ..base.constants import JSON_CONTENT_TYPE, SSE_CHUNK_SIZE, SSE_CONTENT_TYPE
from ..base.idempotency import IDEMPOTENCY_FIELD, IDEMPOTENCY_HEADER, generate_idempotency_key
from ..base.logging import LogContext, get_logger
from ..base.resilience import request_with_retry
from ..base.settings import TransportConfig
from ..base.timeouts import resolve_sse_timeout, resolve_timeout
from .error_mapping import decode_or_fail, raise_for_error
from .multipart import build_multipart
from .protocol import ProgressCallback
from .sse_lines import SseLineStream


class ProgressByteStream(httpx.SyncByteStream):
    """Request body wrapper reporting ``(total_bytes, sent_bytes)`` per chunk."""

    def __init__(self, stream: httpx.SyncByteStream, total: int, callback: ProgressCallback) -> None:
        self._stream = stream
        self._total = total
        self._callback = callback

    def __iter__(self):
        sent = 0
        for chunk in self._stream:
            sent += len(chunk)
            self._callback(self._total, sent)
            yield chunk

    def close(self) -> None:
        self._stream.close()


class HttpxTransport:
    """Transport performing OpenAI API calls through an ``httpx.Client``.

    Parameters:
        client: Client to send requests with (typically pooled, see
            :func:`get_httpx_client`). Its ``base_url`` supplies the origin.
        base_path: Prefix for relative paths; absolute paths such as
            ``/v1/responses`` are used as given.
        config: Retry, timeout and idempotency policy. Defaults to
            ``TransportConfig()``.
        default_headers: Headers added to every request (e.g. authorization);
            per-call headers take precedence.
        sleep: Backoff sleep, injectable for tests.
        key_factory: Idempotency key generator.
        rand: Jitter source returning floats in ``[0, 1)``.
        sse_chunk_size: Bytes read per iteration of a streaming body.
        logger: Destination of retry and failure events.
    """

    def __init__(  # noqa: PLR0913
        self,
        client: httpx.Client,
        *,
        base_path: Optional[str] = None,
        config: Optional[TransportConfig] = None,
        default_headers: Optional[Mapping[str, str]] = None,
        sleep: Callable[[float], None] = time.sleep,
        key_factory: Callable[[], str] = generate_idempotency_key,
        rand: Callable[[], float] = random.random,
        sse_chunk_size: int = SSE_CHUNK_SIZE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client
        self._config = config or TransportConfig()
        self._base_path = base_path if base_path is not None else self._config.base_path
        self._default_headers = dict(default_headers or {})
        self._sleep = sleep
        self._key_factory = key_factory
        self._rand = rand
        self._sse_chunk_size = sse_chunk_size
        self._logger = logger or get_logger(__name__)

    @property
    def client(self) -> httpx.Client:
        return self._client

    @property
    def config(self) -> TransportConfig:
        return self._config

    # ------------------------------------------------------------------ API
    def post_json(
        self,
        path: str,
        payload: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        idempotent: bool = False,
    ) -> Dict[str, Any]:
        """POST a JSON body and return the decoded JSON object."""
        body = dict(payload)
        request_headers = self._prepare_headers(headers, body, stream=False, idempotent=idempotent)
        res = self._request_with_retry(
            "POST",
            path,
            request_headers,
            idempotent=idempotent,
            timeout=resolve_timeout(timeout, self._config, path),
            json=body,
        )
        return decode_or_fail(res)

    def post_multipart(
        self,
        path: str,
        fields: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        idempotent: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Dict[str, Any]:
        """POST a multipart/form-data body and return the decoded JSON object.

        The idempotency key may be supplied in the reserved ``_idempotency_key``
        field; it is moved to the header and never sent as a form part.
        """
        form = dict(fields)
        request_headers = httpx.Headers(self._default_headers)
        request_headers.update(headers or {})
        request_headers.setdefault("Accept", JSON_CONTENT_TYPE)
        self._apply_idempotency(request_headers, form, idempotent)

        body = build_multipart(form)
        try:
            res = self._request_with_retry(
                "POST",
                path,
                request_headers,
                idempotent=idempotent,
                timeout=resolve_timeout(timeout, self._config, path),
                progress_callback=progress_callback,
                files=body.parts or None,
            )
            return decode_or_fail(res)
        finally:
            body.close()

    def stream_sse(
        self,
        path: str,
        payload: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        idempotent: bool = False,
    ) -> SseLineStream:
        """Open a Server-Sent-Events stream and return its lazy line iterator.

        The request is sent (with retries) before this method returns, so an
        error status is raised here, before any line is produced. The caller
        owns the returned stream and should close it if it stops early.
        """
        body = dict(payload)
        body["stream"] = True
        request_headers = self._prepare_headers(headers, body, stream=True, idempotent=idempotent)
        request_headers["Accept"] = SSE_CONTENT_TYPE
        res = self._request_with_retry(
            "POST",
            path,
            request_headers,
            idempotent=idempotent,
            timeout=resolve_sse_timeout(timeout, self._config),
            stream=True,
            json=body,
        )
        if res.status_code >= 400:
            raise_for_error(res)
        return SseLineStream(res, chunk_size=self._sse_chunk_size)

    def get_json(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """GET ``path`` and return the decoded JSON object."""
        request_headers = self._prepare_headers(headers, {}, stream=False, idempotent=False)
        res = self._request_with_retry(
            "GET",
            path,
            request_headers,
            idempotent=False,
            timeout=resolve_timeout(timeout, self._config, path),
        )
        return decode_or_fail(res)

    def delete(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> bool:
        """DELETE ``path``; True on success, typed error otherwise."""
        request_headers = self._prepare_headers(headers, {}, stream=False, idempotent=False)
        res = self._request_with_retry(
            "DELETE",
            path,
            request_headers,
            idempotent=False,
            timeout=resolve_timeout(timeout, self._config, path),
        )
        if res.status_code >= 400:
            raise_for_error(res)
        res.close()
        return True

    def endpoint(self, path: str) -> str:
        """Resolve ``path`` against the base path (absolute paths pass through)."""
        if path.startswith("/"):
            return path
        return f"{self._base_path.rstrip('/')}/{path.lstrip('/')}"

    # ------------------------------------------------------------ internals
    def _prepare_headers(
        self,
        headers: Optional[Mapping[str, str]],
        payload: Dict[str, Any],
        *,
        stream: bool,
        idempotent: bool,
    ) -> httpx.Headers:
        merged = httpx.Headers(self._default_headers)
        merged.update(headers or {})
        merged.setdefault("Content-Type", JSON_CONTENT_TYPE)
        merged.setdefault("Accept", SSE_CONTENT_TYPE if stream else JSON_CONTENT_TYPE)
        self._apply_idempotency(merged, payload, idempotent)
        return merged

    def _apply_idempotency(self, headers: httpx.Headers, payload: Dict[str, Any], idempotent: bool) -> None:
        """Move/generate the idempotency key; always strips the reserved field."""
        supplied = payload.pop(IDEMPOTENCY_FIELD, None)
        if not (idempotent and self._config.idempotency_enabled):
            return
        if isinstance(supplied, str) and supplied:
            headers[IDEMPOTENCY_HEADER] = supplied
        elif IDEMPOTENCY_HEADER not in headers:
            headers[IDEMPOTENCY_HEADER] = self._key_factory()

    def _request_with_retry(
        self,
        method: str,
        path: str,
        headers: httpx.Headers,
        *,
        idempotent: bool,
        timeout: float,
        stream: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
        **content: Any,
    ) -> httpx.Response:
        url = self.endpoint(path)

        def send(current: httpx.Headers) -> httpx.Response:
            request = self._client.build_request(method, url, headers=current, timeout=timeout, **content)
            if progress_callback is not None:
                total = int(request.headers.get("Content-Length", 0) or 0)
                request.stream = ProgressByteStream(request.stream, total, progress_callback)
            return self._client.send(request, stream=stream)

        return request_with_retry(
            send,
            headers,
            policy=self._config.retry,
            idempotent=idempotent and self._config.idempotency_enabled,
            sleep=self._sleep,
            key_factory=self._key_factory,
            rand=self._rand,
            logger=self._logger,
            ctx=LogContext(operation="http", method=method, path=url),
        )


__all__ = ["HttpxTransport", "ProgressByteStream"]
