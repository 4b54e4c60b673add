from __future__ import annotations

import ssl

import httpx
import pytest

from assistant_transport.base.errors import (
    ApiResponseValidationError,
    ErrorCode,
    MaxRetryAttemptsExceededError,
    ResponseCanceledError,
    classify_status,
    extract_error_details,
    is_retryable_exception,
    is_retryable_status,
)


@pytest.mark.parametrize("status", [409, 429, 500, 501, 502, 503, 504, 505])
def test_retryable_statuses(status):
    assert is_retryable_status(status)


@pytest.mark.parametrize("status", [200, 400, 401, 403, 404, 422, 506])
def test_non_retryable_statuses(status):
    assert not is_retryable_status(status)


def test_classify_status():
    assert classify_status(401) is ErrorCode.AUTH
    assert classify_status(429) is ErrorCode.RATE_LIMIT
    assert classify_status(418) is ErrorCode.VALIDATION
    assert classify_status(599) is ErrorCode.SERVER_ERROR
    assert classify_status(302) is ErrorCode.UNKNOWN


def test_exception_classification():
    assert is_retryable_exception(httpx.ConnectError("refused"))
    assert is_retryable_exception(httpx.ReadTimeout("slow"))
    assert not is_retryable_exception(httpx.UnsupportedProtocol("ftp"))
    assert not is_retryable_exception(ValueError("x"))


def test_certificate_failure_in_cause_chain_is_not_retried():
    try:
        try:
            raise ssl.SSLCertVerificationError("certificate verify failed")
        except ssl.SSLError as inner:
            raise httpx.ConnectError("tls") from inner
    except httpx.ConnectError as exc:
        assert not is_retryable_exception(exc)


@pytest.mark.parametrize(
    "decoded, body, expected",
    [
        ({"error": {"message": "m1"}}, "", "m1"),
        ({"message": "m2"}, "", "m2"),
        ({"error": "m3"}, "", "m3"),
        ({"errors": [{"message": "m4"}]}, "", "m4"),
        (None, "upstream exploded", "upstream exploded"),
        (None, "", "OpenAI API error"),
    ],
)
def test_error_message_fallbacks(decoded, body, expected):
    assert extract_error_details(decoded, body)[0] == expected


def test_numeric_error_code_is_stringified():
    _, _, code, _ = extract_error_details({"error": {"message": "x", "code": 42}}, "")
    assert code == "42"


def test_error_defaults():
    assert ApiResponseValidationError().status_code == 502
    exhausted = MaxRetryAttemptsExceededError()
    assert (exhausted.status_code, exhausted.code) == (429, ErrorCode.RETRIES_EXHAUSTED)
    canceled = ResponseCanceledError()
    assert (canceled.status_code, canceled.code) == (499, ErrorCode.CANCELLED)
    assert isinstance(canceled, Exception)


def test_public_exports_exclude_private_names():
    from assistant_transport.base.errors_parts import classification

    assert all(not name.startswith("_") for name in classification.__all__)
    assert "classify_status" in classification.__all__
