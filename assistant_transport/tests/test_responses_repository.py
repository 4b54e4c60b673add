"""ResponsesRepository wiring over a recording fake transport."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

import httpx

from assistant_transport.repositories import ResponsesRepository
from assistant_transport.transport import OpenAITransport


class _FakeTransport:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def post_json(self, path, payload, headers=None, timeout=None, idempotent=False):
        self.calls.append(("post_json", path, {"payload": dict(payload), "timeout": timeout, "idempotent": idempotent}))
        return {"id": "resp_1"}

    def post_multipart(self, path, fields, headers=None, timeout=None, idempotent=False, progress_callback=None):
        raise AssertionError("not used by the responses repository")

    def stream_sse(self, path, payload, headers=None, timeout=None, idempotent=False):
        self.calls.append(("stream_sse", path, {"payload": dict(payload), "idempotent": idempotent}))
        return iter(["event: response.completed", "data: {}"])

    def get_json(self, path, headers=None, timeout=None):
        self.calls.append(("get_json", path, {"timeout": timeout}))
        return {"object": "list"}

    def delete(self, path, headers=None, timeout=None):
        self.calls.append(("delete", path, {}))
        return True


def test_fake_satisfies_protocol():
    assert isinstance(_FakeTransport(), OpenAITransport)


def test_create_is_idempotent_post():
    fake = _FakeTransport()
    repo = ResponsesRepository(fake, timeout=12.0)

    assert repo.create_response({"model": "m"}) == {"id": "resp_1"}
    assert fake.calls == [("post_json", "/v1/responses", {"payload": {"model": "m"}, "timeout": 12.0, "idempotent": True})]


def test_stream_get_cancel_delete_paths():
    fake = _FakeTransport()
    repo = ResponsesRepository(fake, base_path="/v1/")

    assert list(repo.stream_response({"model": "m"}))[0] == "event: response.completed"
    repo.get_response("resp_1")
    assert repo.cancel_response("resp_1") is True
    assert repo.delete_response("resp/1") is True

    assert [(c[0], c[1]) for c in fake.calls] == [
        ("stream_sse", "/v1/responses"),
        ("get_json", "/v1/responses/resp_1"),
        ("post_json", "/v1/responses/resp_1/cancel"),
        ("delete", "/v1/responses/resp%2F1"),
    ]
    assert fake.calls[0][2]["idempotent"] is True
    assert fake.calls[2][2]["idempotent"] is False


def test_list_encodes_query_and_drops_none():
    fake = _FakeTransport()
    repo = ResponsesRepository(fake)

    repo.list_responses({"limit": 5, "after": None, "include_deleted": False})
    repo.list_responses()

    assert fake.calls[0][1] == "/v1/responses?limit=5&include_deleted=false"
    assert fake.calls[1][1] == "/v1/responses"


def test_repository_over_real_transport(make_transport, json_response):
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return json_response(200, {"id": "resp_1"})

    repo = ResponsesRepository(make_transport(handler))
    repo.create_response({"model": "m"})

    assert seen[0].url.path == "/v1/responses"
    assert seen[0].headers["Idempotency-Key"] == "key-1"
