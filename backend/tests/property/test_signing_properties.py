"""
Property-based tests for request signing and retry backoff.
"""

import base64
import json
from datetime import datetime, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tests.property.strategies import endpoint_paths, http_methods, json_payloads
from watermark_backend.domain.errors import RemoteApiError, RetryExhaustedError
from watermark_backend.domain.watermark.retry import retry_request
from watermark_backend.domain.watermark.signing import RequestSigner, SigningRequest, http_date

moments = st.datetimes(
    min_value=datetime(2000, 1, 1), max_value=datetime(2100, 1, 1), timezones=st.just(timezone.utc)
)


@given(method=http_methods, path=endpoint_paths, payload=json_payloads, moment=moments)
def test_signature_is_deterministic_sha256(method, path, payload, moment):
    signer = RequestSigner("ak", "secret")
    request = SigningRequest.capture(method, path, payload, moment=moment)

    first = signer.sign(request)
    second = signer.sign(SigningRequest.capture(method, path, payload, moment=moment))

    assert first.signature == second.signature
    assert len(base64.b64decode(first.signature)) == 32
    assert first.headers()["Date"] == http_date(moment)


@given(payload=json_payloads)
def test_signed_body_is_the_payload(payload):
    request = SigningRequest.capture("POST", "/x", payload)

    assert json.loads(request.body) == payload
    assert request.canonical_string.endswith("\n" + request.body)


@given(method=http_methods, path=endpoint_paths, moment=moments)
def test_any_change_alters_signature(method, path, moment):
    signer = RequestSigner("ak", "secret")
    base = SigningRequest.capture(method, path, {"a": 1}, moment=moment)
    changed = SigningRequest.capture(method, path, {"a": 2}, moment=moment)

    assert signer.sign(base).signature != signer.sign(changed).signature


@given(max_retries=st.integers(min_value=1, max_value=8))
def test_always_failing_call_sleeps_exponentially(max_retries):
    delays = []
    calls = []

    def failing():
        calls.append(1)
        raise RemoteApiError("unavailable", status_code=503)

    with pytest.raises(RetryExhaustedError) as exc_info:
        retry_request(failing, max_retries=max_retries, sleep=delays.append)

    assert exc_info.value.attempts == max_retries

    assert len(calls) == max_retries
    assert delays == [2.0 ** k for k in range(max_retries - 1)]
