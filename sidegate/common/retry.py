"""Deployment-level retry policy wrapped around a provider adapter.

Only PROVIDER_UNAVAILABLE failures are retried. Rejections, invalid input and
internal errors are terminal and re-raised on the first attempt.
"""

import asyncio
from typing import Any

from sidegate.common.errors import GatewayError
from sidegate.common.logging import logger
from sidegate.common.metrics import retries_total
from sidegate.common.schemas import DispatchResult
from sidegate.providers.base import ProviderAdapter


class RetryingAdapter:
    """Adapter decorator with bounded exponential backoff."""

    def __init__(
        self,
        adapter: ProviderAdapter,
        attempts: int = 3,
        base_delay_seconds: float = 1.0,
        service_name: str = "sidegate",
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.adapter = adapter
        self.attempts = attempts
        self.base_delay_seconds = base_delay_seconds
        self.service_name = service_name

    @property
    def name(self) -> str:
        return self.adapter.name

    async def dispatch(self, request: Any) -> DispatchResult:
        attempt = 1
        while True:
            try:
                return await self.adapter.dispatch(request)
            except GatewayError as exc:
                if not exc.retryable or attempt >= self.attempts:
                    raise
                retries_total.labels(service=self.service_name, dependency=self.name).inc()
                # Exponential backoff: base, 2*base, 4*base...
                backoff_seconds = self.base_delay_seconds * 2 ** (attempt - 1)
                logger.warning(
                    "provider unavailable provider=%s attempt=%s backoff_s=%s reason=%s",
                    self.name,
                    attempt,
                    backoff_seconds,
                    exc.reason,
                )
                await asyncio.sleep(backoff_seconds)
            attempt += 1
