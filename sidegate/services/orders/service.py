"""Order creation against the payment processor with gateway-issued receipts."""

import itertools
import secrets
import threading
import time
from typing import Any

from sidegate.common.errors import ErrorKind, GatewayError
from sidegate.common.logging import logger, provider_ctx
from sidegate.common.metrics import dispatch_failures_total, dispatch_requests_total, receipts_generated_total
from sidegate.common.schemas import OrderResult, PaymentOrder, Receipt
from sidegate.common.validation import CREATE_ORDER, validate_request
from sidegate.providers.base import ProviderAdapter
from sidegate.providers.errors import translate_failure


RECEIPT_PREFIX = "receipt_order_"


class ReceiptGenerator:
    """Issues `receipt_order_<token>` ids that never repeat within a process.

    The token is wall-clock milliseconds, a lock-protected sequence number and
    random hex, all lowercase hex. The sequence alone guarantees in-process
    uniqueness; time and randomness separate concurrent processes.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    def next(self) -> Receipt:
        with self._lock:
            seq = next(self._sequence)
        millis = int(self._clock() * 1000)
        return Receipt(id=f"{RECEIPT_PREFIX}{millis:x}{seq:04x}{secrets.token_hex(3)}")


class OrderService:
    """Validates the amount, issues one receipt, creates one processor order."""

    def __init__(
        self,
        adapter: ProviderAdapter,
        currency: str = "INR",
        receipts: ReceiptGenerator | None = None,
        service_name: str = "sidegate",
    ) -> None:
        self.adapter = adapter
        self.currency = currency
        self.receipts = receipts or ReceiptGenerator()
        self.service_name = service_name

    async def create_order(self, raw_input: Any) -> OrderResult:
        order = validate_request(raw_input, CREATE_ORDER, currency=self.currency)
        receipt = self.receipts.next()
        receipts_generated_total.labels(service=self.service_name).inc()
        payment_order = PaymentOrder(amount=order.amount_minor_units, currency=order.currency, receipt=receipt.id)

        token = provider_ctx.set(self.adapter.name)
        try:
            dispatch_requests_total.labels(
                service=self.service_name,
                operation=CREATE_ORDER,
                provider=self.adapter.name,
            ).inc()
            try:
                result = await self.adapter.dispatch(payment_order)
            except GatewayError as exc:
                self._record_failure(exc, receipt)
                raise
            except Exception as exc:
                error = translate_failure(self.adapter.name, exc)
                self._record_failure(error, receipt)
                raise error from exc
            if not result.provider_reference:
                error = GatewayError(
                    ErrorKind.INTERNAL,
                    "Unable to create order.",
                    reason="missing_order_id",
                    provider=self.adapter.name,
                )
                self._record_failure(error, receipt)
                raise error
            logger.info("order created receipt=%s order_id=%s", receipt.id, result.provider_reference)
            return OrderResult(order_id=result.provider_reference)
        finally:
            provider_ctx.reset(token)

    def _record_failure(self, error: GatewayError, receipt: Receipt) -> None:
        dispatch_failures_total.labels(
            service=self.service_name,
            operation=CREATE_ORDER,
            provider=self.adapter.name,
            kind=error.kind.value,
        ).inc()
        logger.warning(
            "order creation failed receipt=%s kind=%s reason=%s cause=%s",
            receipt.id,
            error.kind.value,
            error.reason,
            error.cause,
        )
