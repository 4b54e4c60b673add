"""Shared fixtures for the transport test suite.

HTTP traffic is served by ``httpx.MockTransport`` handlers; nothing touches
the network. Backoff sleeps are recorded instead of slept.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterator, List

import httpx
import pytest

from assistant_transport.base.logging import BASE_LOGGER_NAME, get_logger
from assistant_transport.base.settings import RetrySettings, TransportConfig
from assistant_transport.transport import HttpxTransport

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingSleep:
    """Stand-in for ``time.sleep`` collecting requested delays."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def make_transport(sleep: RecordingSleep) -> Iterator[Callable[..., HttpxTransport]]:
    """Factory building an ``HttpxTransport`` over a mock handler.

    Jitter is pinned to a factor of 1.0 so recorded delays are exact.
    """
    clients: List[httpx.Client] = []

    def _make(handler: Handler, *, retry: Dict[str, Any] | None = None, **config: Any) -> HttpxTransport:
        cfg = TransportConfig(retry=RetrySettings(**(retry or {})), **config)
        client = httpx.Client(base_url="https://api.test", transport=httpx.MockTransport(handler))
        clients.append(client)
        return HttpxTransport(
            client,
            config=cfg,
            sleep=sleep,
            rand=lambda: 1.0,
            key_factory=_counting_keys(),
        )

    yield _make
    for client in clients:
        client.close()


def _counting_keys() -> Callable[[], str]:
    counter = {"n": 0}

    def factory() -> str:
        counter["n"] += 1
        return f"key-{counter['n']}"

    return factory


@pytest.fixture()
def log_events() -> Iterator[List[Dict[str, Any]]]:
    """Capture ``log_event`` payloads emitted under the package logger."""
    payloads: List[Dict[str, Any]] = []

    class _Collector(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                data = json.loads(record.getMessage())
            except ValueError:
                return
            if isinstance(data, dict):
                payloads.append(data)

    handler = _Collector()
    base = get_logger(BASE_LOGGER_NAME)
    base.addHandler(handler)
    try:
        yield payloads
    finally:
        base.removeHandler(handler)


@pytest.fixture()
def json_response() -> Callable[..., httpx.Response]:
    """Build a JSON ``httpx.Response`` (status, body, optional headers)."""

    def _build(status: int, body: Any, headers: Dict[str, str] | None = None) -> httpx.Response:
        merged = {"Content-Type": "application/json", **(headers or {})}
        return httpx.Response(status, content=json.dumps(body).encode("utf-8"), headers=merged)

    return _build
