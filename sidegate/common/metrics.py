"""Prometheus metric definitions shared across the gateway."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


dispatch_requests_total = Counter(
    "dispatch_requests_total",
    "Total provider dispatches attempted",
    ["service", "operation", "provider"],
)
dispatch_failures_total = Counter(
    "dispatch_failures_total",
    "Total failed dispatches by canonical error kind",
    ["service", "operation", "provider", "kind"],
)
provider_latency_seconds = Histogram(
    "provider_latency_seconds",
    "Outbound provider call latency seconds",
    ["service", "provider"],
)
receipts_generated_total = Counter("receipts_generated_total", "Order receipts generated", ["service"])
retries_total = Counter("retries_total", "Retry count", ["service", "dependency"])
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
