"""Shared fixtures: settings factory and stub adapters."""

import pytest

from sidegate.common.config import GatewaySettings
from sidegate.common.errors import GatewayError
from sidegate.common.schemas import DispatchResult


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_settings():
    def _make(**overrides) -> GatewaySettings:
        values = {
            "payment_key_id": "rzp_test_key",
            "payment_key_secret": "rzp_test_secret",
        }
        values.update(overrides)
        return GatewaySettings(_env_file=None, **values)

    return _make


class StubAdapter:
    """Records every request; returns `result` or raises `error`."""

    def __init__(self, name: str = "stub", result: DispatchResult | None = None, error: Exception | None = None):
        self.name = name
        self.result = result or DispatchResult(success=True, provider_reference=None)
        self.error = error
        self.calls = []

    async def dispatch(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.result


class FlakyAdapter:
    """Raises the queued errors in order, then succeeds."""

    def __init__(self, errors: list[GatewayError], name: str = "flaky"):
        self.name = name
        self.errors = list(errors)
        self.calls = 0

    async def dispatch(self, request):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return DispatchResult(success=True, provider_reference="ref-1")


@pytest.fixture
def stub_adapter_cls():
    return StubAdapter


@pytest.fixture
def flaky_adapter_cls():
    return FlakyAdapter


VALID_OTP_INPUT = {
    "recipientEmail": "a@b.com",
    "code": "123456",
    "serviceIdentifier": "s1",
    "templateIdentifier": "t1",
    "accountIdentifier": "u1",
}


@pytest.fixture
def otp_input() -> dict:
    return dict(VALID_OTP_INPUT)
