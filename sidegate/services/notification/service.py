"""Verification-code dispatch: validate, pick one provider, send once."""

from collections.abc import Mapping
from typing import Any

from sidegate.common.errors import GatewayError, invalid_input
from sidegate.common.logging import logger, mask_email, provider_ctx
from sidegate.common.metrics import dispatch_failures_total, dispatch_requests_total
from sidegate.common.schemas import DispatchResult
from sidegate.common.validation import SEND_OTP, validate_request
from sidegate.providers.base import ProviderAdapter
from sidegate.providers.errors import translate_failure


class NotificationDispatcher:
    """Routes each send_otp call to exactly one configured email provider.

    No retries and no fan-out happen here; a failed adapter call surfaces its
    canonical error unchanged.
    """

    def __init__(
        self,
        adapters: Mapping[str, ProviderAdapter],
        default_provider: str,
        service_name: str = "sidegate",
    ) -> None:
        if default_provider not in adapters:
            raise ValueError(f"default provider {default_provider!r} has no adapter")
        self.adapters = dict(adapters)
        self.default_provider = default_provider
        self.service_name = service_name

    def select_adapter(self, provider_choice: str | None) -> ProviderAdapter:
        name = provider_choice or self.default_provider
        adapter = self.adapters.get(name)
        if adapter is None:
            raise invalid_input(f"Unknown provider: {name}")
        return adapter

    async def send_verification_code(self, raw_input: Any, provider_choice: str | None = None) -> DispatchResult:
        request = validate_request(raw_input, SEND_OTP)
        adapter = self.select_adapter(provider_choice)
        token = provider_ctx.set(adapter.name)
        try:
            dispatch_requests_total.labels(
                service=self.service_name,
                operation=SEND_OTP,
                provider=adapter.name,
            ).inc()
            try:
                result = await adapter.dispatch(request)
            except GatewayError as exc:
                self._record_failure(adapter.name, exc)
                raise
            except Exception as exc:
                error = translate_failure(adapter.name, exc)
                self._record_failure(adapter.name, error)
                raise error from exc
            logger.info("verification code dispatched to=%s", mask_email(request.recipient_email))
            return result
        finally:
            provider_ctx.reset(token)

    def _record_failure(self, provider: str, error: GatewayError) -> None:
        dispatch_failures_total.labels(
            service=self.service_name,
            operation=SEND_OTP,
            provider=provider,
            kind=error.kind.value,
        ).inc()
        logger.warning(
            "verification dispatch failed kind=%s reason=%s cause=%s",
            error.kind.value,
            error.reason,
            error.cause,
        )
