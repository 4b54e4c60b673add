"""Transport boundary consumed by repositories and services.

Higher layers depend on this protocol rather than on ``HttpxTransport`` so a
fake transport can be injected in tests, and so a client object can expose its
transport explicitly instead of having it pulled out of private state.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Protocol, runtime_checkable

ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class OpenAITransport(Protocol):
    """HTTP operations against the OpenAI API with uniform retry/error policy."""

    def post_json(
        self,
        path: str,
        payload: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        idempotent: bool = False,
    ) -> Dict[str, Any]: ...

    def post_multipart(
        self,
        path: str,
        fields: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        idempotent: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Dict[str, Any]: ...

    def stream_sse(
        self,
        path: str,
        payload: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        idempotent: bool = False,
    ) -> Iterator[str]: ...

    def get_json(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]: ...

    def delete(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> bool: ...


__all__ = ["OpenAITransport", "ProgressCallback"]
