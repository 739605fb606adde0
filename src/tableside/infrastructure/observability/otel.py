from __future__ import annotations

import logging
import os
import weakref

import httpx
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_TRACER_PROVIDER: TracerProvider | None = None
_INSTRUMENTED_CLIENTS: weakref.WeakSet[httpx.Client] = weakref.WeakSet()
logger = logging.getLogger(__name__)


def get_tracer_provider() -> TracerProvider:
    global _TRACER_PROVIDER
    if _TRACER_PROVIDER is not None:
        return _TRACER_PROVIDER

    service_name = os.getenv("OTEL_SERVICE_NAME", "tableside-staff-client")
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    if endpoint:
        try:
            exporter = OTLPSpanExporter(
                endpoint=endpoint,
                insecure=endpoint.startswith("http://"),
            )
            provider.add_span_processor(BatchSpanProcessor(exporter))
        except Exception:
            logger.exception("otel_exporter_setup_failed")

    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    _TRACER_PROVIDER = provider
    return provider


def configure_otel(http_client: httpx.Client) -> None:
    provider = get_tracer_provider()
    if http_client in _INSTRUMENTED_CLIENTS:
        return
    HTTPXClientInstrumentor.instrument_client(http_client, tracer_provider=provider)
    _INSTRUMENTED_CLIENTS.add(http_client)
