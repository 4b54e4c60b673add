"""Translate HTTP responses into decoded payloads or typed errors."""
from __future__ import annotations

import json
from typing import Any, Dict, NoReturn

import httpx

from ..base.errors import ApiResponseValidationError, extract_error_details

UNEXPECTED_FORMAT_MESSAGE = "Unexpected response format from OpenAI."


def raise_for_error(response: httpx.Response) -> NoReturn:
    """Raise ``ApiResponseValidationError`` describing an error response.

    The message is enriched with the upstream ``type``, ``code`` and ``param``
    when the body carries the standard ``{"error": {...}}`` shape, e.g.
    ``bad request [type=invalid_request_error param=model]``.
    """
    try:
        body = response.read().decode(response.encoding or "utf-8", errors="replace")
    finally:
        response.close()
    try:
        decoded: Any = json.loads(body) if body else None
    except ValueError:
        decoded = None

    msg, err_type, err_code, param = extract_error_details(decoded, body)
    details = [
        f"{label}={value}"
        for label, value in (("type", err_type), ("code", err_code), ("param", param))
        if value
    ]
    if details:
        msg = f"{msg} [{' '.join(details)}]"

    raise ApiResponseValidationError(
        msg,
        status_code=response.status_code,
        error_type=err_type,
        error_code=err_code,
        param=param,
        request_id=response.headers.get("x-request-id") or response.headers.get("request-id"),
    )


def decode_or_fail(response: httpx.Response) -> Dict[str, Any]:
    """Return the JSON object body of a successful response.

    ``text/plain`` bodies are wrapped as ``{"text": body}``.
    """
    if response.status_code >= 400:
        raise_for_error(response)

    content_type = response.headers.get("Content-Type", "")
    body = response.text
    if content_type.lower().startswith("text/plain"):
        return {"text": body}
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise ApiResponseValidationError(UNEXPECTED_FORMAT_MESSAGE) from exc
    if not isinstance(data, dict):
        raise ApiResponseValidationError(UNEXPECTED_FORMAT_MESSAGE)
    return data


__all__ = ["raise_for_error", "decode_or_fail", "UNEXPECTED_FORMAT_MESSAGE"]
