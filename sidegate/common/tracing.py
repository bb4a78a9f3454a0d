"""OpenTelemetry setup for the gateway.

Spans carry the enabled OTP providers and the payment currency as resource
attributes so traces from differently configured deployments can be split.
"""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from sidegate.common.config import GatewaySettings


SERVICE_NAMESPACE = "sidegate"
# Health checks and metric scrapes are not traced.
EXCLUDED_URLS = "health,metrics"


def gateway_resource(settings: GatewaySettings) -> Resource:
    """Resource describing this gateway process and its provider wiring."""

    return Resource.create(
        {
            "service.name": settings.service_name,
            "service.namespace": SERVICE_NAMESPACE,
            "sidegate.otp_providers": ",".join(settings.enabled_otp_providers),
            "sidegate.default_otp_provider": settings.default_otp_provider,
            "sidegate.payment_currency": settings.payment_currency,
        }
    )


def setup_tracing(settings: GatewaySettings) -> TracerProvider:
    """Register a tracer provider exporting over OTLP HTTP."""

    provider = TracerProvider(resource=gateway_resource(settings))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)))
    trace.set_tracer_provider(provider)
    return provider


def instrument_app(app: FastAPI) -> None:
    FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)
