"""HTTP relay provider (EmailJS-style send endpoint)."""

import time
from typing import Any

import httpx

from sidegate.common.logging import logger, mask_email
from sidegate.common.metrics import provider_latency_seconds
from sidegate.common.schemas import DispatchResult, VerificationRequest
from sidegate.providers.errors import translate_failure
from sidegate.providers.templates import otp_subject, render_relay_message


class RelayAdapter:
    """Posts a templated envelope to a relay that emails the recipient for us."""

    name = "relay"

    def __init__(
        self,
        endpoint: str,
        origin: str,
        app_name: str,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        service_name: str = "sidegate",
    ) -> None:
        self.endpoint = endpoint
        self.origin = origin
        self.app_name = app_name
        self.timeout_seconds = timeout_seconds
        self.transport = transport
        self.service_name = service_name

    def build_envelope(self, request: VerificationRequest) -> dict[str, Any]:
        return {
            "service_id": request.metadata.get("service_id", ""),
            "template_id": request.metadata.get("template_id", ""),
            "user_id": request.metadata.get("user_id", ""),
            "template_params": {
                "to_email": request.recipient_email,
                "otp_code": request.code,
                "app_name": self.app_name,
                "from_name": f"{self.app_name} Team",
                "subject": otp_subject(self.app_name),
                "message": render_relay_message(request.code, self.app_name),
            },
        }

    async def dispatch(self, request: VerificationRequest) -> DispatchResult:
        """Send one envelope; only HTTP 200 counts as delivered."""

        envelope = self.build_envelope(request)
        headers = {"Content-Type": "application/json", "Origin": self.origin}
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                resp = await client.post(self.endpoint, json=envelope, headers=headers)
        except httpx.TransportError as exc:
            raise translate_failure(self.name, exc) from exc
        finally:
            provider_latency_seconds.labels(service=self.service_name, provider=self.name).observe(
                max(0.0, time.perf_counter() - start)
            )
        if resp.status_code != 200:
            logger.error("relay error status=%s to=%s", resp.status_code, mask_email(request.recipient_email))
            raise translate_failure(self.name, resp)
        logger.info("relay accepted email to=%s", mask_email(request.recipient_email))
        return DispatchResult(success=True, provider_reference=None)
