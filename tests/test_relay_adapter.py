"""Relay provider: envelope shape, status handling, transport failures."""

import json

import httpx
import pytest

from sidegate.common.errors import ErrorKind, GatewayError
from sidegate.common.schemas import VerificationRequest
from sidegate.common.validation import SEND_OTP, validate_request
from sidegate.providers.relay import RelayAdapter


ENDPOINT = "https://relay.test/api/v1.0/email/send"


def _request(code: str = "123456", email: str = "a@b.com") -> VerificationRequest:
    return VerificationRequest(
        recipient_email=email,
        code=code,
        metadata={"service_id": "s1", "template_id": "t1", "user_id": "u1"},
    )


def _adapter(handler) -> RelayAdapter:
    return RelayAdapter(
        endpoint=ENDPOINT,
        origin="https://app.example.com",
        app_name="Campus Food App",
        timeout_seconds=5.0,
        transport=httpx.MockTransport(handler),
    )


def _leaf_values(value):
    if isinstance(value, dict):
        for item in value.values():
            yield from _leaf_values(item)
    else:
        yield value


def test_envelope_carries_code_and_recipient_in_exactly_one_field():
    adapter = _adapter(lambda request: httpx.Response(200))
    envelope = adapter.build_envelope(_request(code="0042-ab", email="first.last@example.org"))

    leaves = list(_leaf_values(envelope))
    assert leaves.count("0042-ab") == 1
    assert leaves.count("first.last@example.org") == 1
    assert envelope["template_params"]["otp_code"] == "0042-ab"
    assert envelope["template_params"]["to_email"] == "first.last@example.org"
    assert envelope["service_id"] == "s1"
    assert envelope["template_id"] == "t1"
    assert envelope["user_id"] == "u1"
    assert "expire in 10 minutes" in envelope["template_params"]["message"]


@pytest.mark.anyio
async def test_dispatch_posts_envelope_with_origin_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["origin"] = request.headers.get("origin")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, text="OK")

    result = await _adapter(handler).dispatch(_request())

    assert result.success is True
    assert seen["url"] == ENDPOINT
    assert seen["origin"] == "https://app.example.com"
    assert seen["body"]["template_params"]["otp_code"] == "123456"


@pytest.mark.anyio
@pytest.mark.parametrize("status", [201, 400, 401, 403, 500, 503])
async def test_any_non_200_status_is_provider_rejected(status):
    adapter = _adapter(lambda request: httpx.Response(status, text=f"relay said {status}"))

    with pytest.raises(GatewayError) as exc_info:
        await adapter.dispatch(_request())

    err = exc_info.value
    assert err.kind is ErrorKind.PROVIDER_REJECTED
    assert err.reason == f"http_{status}"
    assert err.cause == f"relay said {status}"
    assert str(status) in err.message


@pytest.mark.anyio
async def test_connection_failure_is_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayError) as exc_info:
        await _adapter(handler).dispatch(_request())

    assert exc_info.value.kind is ErrorKind.PROVIDER_UNAVAILABLE
    assert exc_info.value.reason == "connection_failed"


@pytest.mark.anyio
async def test_timeout_is_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(GatewayError) as exc_info:
        await _adapter(handler).dispatch(_request())

    assert exc_info.value.kind is ErrorKind.PROVIDER_UNAVAILABLE
    assert exc_info.value.reason == "timeout"


def test_validated_code_reaches_envelope_unmodified(otp_input):
    otp_input["code"] = " 12 34 "
    otp_input["recipientEmail"] = " a@b.com "
    request = validate_request(otp_input, SEND_OTP)

    envelope = _adapter(lambda request: httpx.Response(200)).build_envelope(request)

    assert envelope["template_params"]["otp_code"] == " 12 34 "
    assert envelope["template_params"]["to_email"] == "a@b.com"
