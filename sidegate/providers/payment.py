"""Payment processor provider (Razorpay-style Orders REST API)."""

import time

import httpx

from sidegate.common.errors import ErrorKind, GatewayError
from sidegate.common.logging import logger
from sidegate.common.metrics import provider_latency_seconds
from sidegate.common.schemas import DispatchResult, PaymentOrder
from sidegate.providers.errors import PaymentApiFailure, translate_failure


class PaymentAdapter:
    """Creates one processor order per dispatch, keyed by the gateway receipt."""

    name = "payment"

    def __init__(
        self,
        base_url: str,
        key_id: str,
        key_secret: str,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        service_name: str = "sidegate",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.key_id = key_id
        self.key_secret = key_secret
        self.timeout_seconds = timeout_seconds
        self.transport = transport
        self.service_name = service_name

    async def dispatch(self, request: PaymentOrder) -> DispatchResult:
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self.transport,
                auth=(self.key_id, self.key_secret),
            ) as client:
                resp = await client.post(f"{self.base_url}/orders", json=request.model_dump())
        except httpx.TransportError as exc:
            raise translate_failure(self.name, exc) from exc
        finally:
            provider_latency_seconds.labels(service=self.service_name, provider=self.name).observe(
                max(0.0, time.perf_counter() - start)
            )

        if resp.status_code >= 300:
            failure = PaymentApiFailure.from_response(resp)
            logger.error(
                "order creation rejected status=%s code=%s receipt=%s",
                failure.status_code,
                failure.code,
                request.receipt,
            )
            raise translate_failure(self.name, failure)

        try:
            order_id = resp.json().get("id")
        except (ValueError, AttributeError):
            order_id = None
        if not isinstance(order_id, str) or not order_id:
            raise GatewayError(
                ErrorKind.INTERNAL,
                "Unable to create order.",
                cause=resp.text[:1000],
                reason="missing_order_id",
                provider=self.name,
            )
        logger.info("order created order_id=%s receipt=%s", order_id, request.receipt)
        return DispatchResult(success=True, provider_reference=order_id)
