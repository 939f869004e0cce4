"""
OpenTelemetry spans for MulaBoard.

Tracing is off unless ``TRACING_ENABLED=true``. With no provider
installed, ``get_tracer`` hands back OTel's no-op tracer, so the gate
and the HTTP middleware can call ``traced`` unconditionally.

Spans emitted:
    http.request       one per API call (see ``request_span``)
    eligibility.check  one per gate evaluation

Span attributes never include IP addresses or fingerprints.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
)
from opentelemetry.trace import Span, StatusCode, Tracer

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"

_provider: TracerProvider | None = None


def setup_tracing(
    service_name: str,
    otlp_endpoint: str | None = None,
    *,
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """
    Install a global TracerProvider for ``service_name``.

    Spans go to an OTLP gRPC collector in batches. Passing ``exporter``
    (tests use ``InMemorySpanExporter``) exports each span synchronously
    instead.
    """
    global _provider

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        destination = type(exporter).__name__
    else:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        destination = otlp_endpoint or DEFAULT_OTLP_ENDPOINT
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=destination, insecure=True))
        )

    trace.set_tracer_provider(provider)
    _provider = provider
    logger.info("Tracing enabled for %s, exporting to %s", service_name, destination)
    return provider


def is_tracing_enabled() -> bool:
    return _provider is not None


def get_tracer(name: str) -> Tracer:
    return trace.get_tracer(name)


@contextmanager
def traced(
    tracer: Tracer,
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """
    Run the block inside span ``name``.

    An exception leaving the block marks the span as errored, is recorded
    as a span event, and is re-raised unchanged.
    """
    with tracer.start_as_current_span(
        name, attributes=attributes, record_exception=False, set_status_on_exception=False
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(StatusCode.ERROR, str(exc))
            raise


@contextmanager
def request_span(method: str, path: str, request_id: str) -> Iterator[Span]:
    """Span covering one HTTP request; the caller sets ``http.status_code``."""
    tracer = get_tracer("mulaboard.api")
    with traced(
        tracer,
        "http.request",
        {"http.method": method, "http.route": path, "http.request_id": request_id},
    ) as span:
        yield span


def add_trace_context(
    _logger: Any, _method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor: stamp ``trace_id``/``span_id`` of the current span."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict["trace_id"] = trace.format_trace_id(ctx.trace_id)
        event_dict["span_id"] = trace.format_span_id(ctx.span_id)
    return event_dict
