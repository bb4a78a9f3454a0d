"""HTTP surface for the gateway.

`create_app` receives fully built services so tests and `main` share one
wiring path; nothing here reads the environment.
"""

from datetime import datetime, timezone
from json import JSONDecodeError
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sidegate.common.config import GatewaySettings
from sidegate.common.errors import ErrorKind, GatewayError, invalid_input
from sidegate.common.logging import logger, request_id_ctx
from sidegate.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from sidegate.common.retry import RetryingAdapter
from sidegate.providers.direct_mail import DirectMailAdapter
from sidegate.providers.payment import PaymentAdapter
from sidegate.providers.relay import RelayAdapter
from sidegate.services.notification.service import NotificationDispatcher
from sidegate.services.orders.service import OrderService


ORDER_FAILURE_MESSAGE = "Unable to create order."


def _with_retry(adapter, settings: GatewaySettings):
    if settings.provider_retry_attempts <= 1:
        return adapter
    return RetryingAdapter(
        adapter,
        attempts=settings.provider_retry_attempts,
        base_delay_seconds=settings.provider_retry_base_delay_seconds,
        service_name=settings.service_name,
    )


def build_dispatcher(settings: GatewaySettings) -> NotificationDispatcher:
    """Instantiate one adapter per enabled OTP provider."""

    adapters = {}
    for name in settings.enabled_otp_providers:
        if name == "relay":
            adapter = RelayAdapter(
                endpoint=settings.relay_endpoint,
                origin=settings.relay_origin,
                app_name=settings.app_name,
                timeout_seconds=settings.provider_timeout_seconds,
                service_name=settings.service_name,
            )
        else:
            adapter = DirectMailAdapter(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password.get_secret_value(),
                mail_from=settings.mail_from or f"{settings.app_name} <{settings.smtp_username}>",
                app_name=settings.app_name,
                use_ssl=settings.smtp_use_ssl,
                timeout_seconds=settings.provider_timeout_seconds,
                service_name=settings.service_name,
            )
        adapters[name] = _with_retry(adapter, settings)
    return NotificationDispatcher(adapters, settings.default_otp_provider, service_name=settings.service_name)


def build_order_service(settings: GatewaySettings) -> OrderService:
    adapter = PaymentAdapter(
        base_url=settings.payment_base_url,
        key_id=settings.payment_key_id,
        key_secret=settings.payment_key_secret.get_secret_value(),
        timeout_seconds=settings.provider_timeout_seconds,
        service_name=settings.service_name,
    )
    return OrderService(_with_retry(adapter, settings), currency=settings.payment_currency, service_name=settings.service_name)


async def _json_body(request: Request):
    try:
        return await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        raise invalid_input("Request body must be a JSON object") from None


def create_app(
    settings: GatewaySettings,
    dispatcher: NotificationDispatcher,
    order_service: OrderService,
) -> FastAPI:
    app = FastAPI(title="Sidegate Transactional Gateway")

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Record request count and latency for every HTTP call."""

        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        token = request_id_ctx.set(request.headers.get("x-correlation-id") or str(uuid4()))
        try:
            response = await call_next(request)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            return response
        finally:
            request_id_ctx.reset(token)
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.post("/send-email")
    async def send_email(request: Request, provider: str | None = None):
        """Send one verification code through the chosen (or default) provider."""

        try:
            body = await _json_body(request)
            result = await dispatcher.send_verification_code(body, provider)
        except GatewayError as exc:
            if exc.kind is ErrorKind.INTERNAL:
                logger.error("send-email internal error cause=%s", exc.cause)
            return JSONResponse(status_code=exc.kind.http_status, content={"error": exc.caller_message()})
        return {
            "success": True,
            "message": "Email sent successfully",
            "providerReference": result.provider_reference,
        }

    @app.post("/orders")
    async def create_order(request: Request):
        """Create a payment order and return the processor's order id."""

        try:
            body = await _json_body(request)
            result = await order_service.create_order(body)
        except GatewayError as exc:
            message = exc.message if exc.kind is ErrorKind.INVALID_INPUT else ORDER_FAILURE_MESSAGE
            return JSONResponse(
                status_code=exc.kind.http_status,
                content={"error": {"code": exc.kind.callable_code, "message": message}},
            )
        return {"orderId": result.order_id}

    @app.get("/health")
    def health():
        """Container health check endpoint."""

        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    return app
