"""Repository for the ``/responses`` resource.

The repository owns endpoint paths and call options only; retries,
idempotency and error mapping belong to the injected transport.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional
from urllib.parse import quote, urlencode

from ..transport.protocol import OpenAITransport


class ResponsesRepository:
    """CRUD and streaming calls for OpenAI responses.

    Parameters:
        transport: Any :class:`OpenAITransport` implementation.
        base_path: API version prefix.
        timeout: Per-call timeout override; ``None`` defers to the transport.
    """

    def __init__(self, transport: OpenAITransport, base_path: str = "/v1", timeout: Optional[float] = None) -> None:
        self._transport = transport
        self._base_path = base_path.rstrip("/")
        self._timeout = timeout

    @property
    def transport(self) -> OpenAITransport:
        return self._transport

    def _path(self, *segments: str) -> str:
        tail = "/".join(quote(s, safe="") for s in segments)
        return f"{self._base_path}/responses" + (f"/{tail}" if tail else "")

    def create_response(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._transport.post_json(self._path(), payload, timeout=self._timeout, idempotent=True)

    def stream_response(self, payload: Mapping[str, Any]) -> Iterator[str]:
        """Open an SSE stream for a new response; feed it to ``StreamingService``."""
        return self._transport.stream_sse(self._path(), payload, timeout=self._timeout, idempotent=True)

    def get_response(self, response_id: str) -> Dict[str, Any]:
        return self._transport.get_json(self._path(response_id), timeout=self._timeout)

    def cancel_response(self, response_id: str) -> bool:
        self._transport.post_json(self._path(response_id, "cancel"), {}, timeout=self._timeout)
        return True

    def delete_response(self, response_id: str) -> bool:
        return self._transport.delete(self._path(response_id), timeout=self._timeout)

    def list_responses(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        path = self._path()
        query = {k: v for k, v in (params or {}).items() if v is not None}
        if query:
            path = f"{path}?{_encode_query(query)}"
        return self._transport.get_json(path, timeout=self._timeout)


def _encode_query(params: Mapping[str, Any]) -> str:
    return urlencode({k: ("true" if v is True else "false" if v is False else v) for k, v in params.items()})


__all__ = ["ResponsesRepository"]
