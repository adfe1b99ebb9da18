"""
OpenTelemetry Configuration

Sets up distributed tracing, logging and per-request instrumentation for the
disaster relief API.
"""

import logging
import time
from flask import Flask, request, g
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor

logger = logging.getLogger(__name__)

_observability_configured = False


def setup_observability(settings):
    """Install a tracer provider when tracing is enabled in settings."""
    global _observability_configured

    setup_logging(settings.environment, settings.log_level)

    if not settings.otel_enabled or _observability_configured:
        return

    # Environment-specific sampling
    if settings.environment == 'production':
        sampler = TraceIdRatioBased(0.1)
    elif settings.environment == 'staging':
        sampler = TraceIdRatioBased(0.5)
    else:
        sampler = TraceIdRatioBased(1.0)

    resource = Resource.create({
        "service.name": settings.service_name,
        "service.version": settings.service_version,
        "deployment.environment": settings.environment
    })

    tracer_provider = TracerProvider(sampler=sampler, resource=resource)

    if settings.otel_exporter_otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    elif settings.is_development:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)
    _observability_configured = True

    logger.info(
        "Tracing enabled",
        extra={
            "service_name": settings.service_name,
            "otlp_endpoint": settings.otel_exporter_otlp_endpoint
        }
    )


def setup_logging(environment: str, log_level=None):
    """Configure root logging for the given environment."""
    level = log_level or {
        'production': 'WARNING',
        'staging': 'INFO',
        'development': 'DEBUG',
        'test': 'WARNING'
    }.get(environment, 'INFO')

    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if environment == 'production':
        logging.getLogger('pymongo').setLevel(logging.WARNING)
        logging.getLogger('urllib3').setLevel(logging.WARNING)


def instrument_app(app: Flask):
    """
    Trace every request and log its outcome.

    Responses carry the trace ID in ``X-Trace-Id`` when a span is active.
    """
    FlaskInstrumentor().instrument_app(app)

    @app.before_request
    def start_request_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        elapsed_ms = round((time.perf_counter() - g.get('request_started', time.perf_counter())) * 1000, 2)
        span_context = trace.get_current_span().get_span_context()
        trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else None

        logger.info(
            f"{request.method} {request.path} {response.status_code}",
            extra={"status_code": response.status_code, "duration_ms": elapsed_ms, "trace_id": trace_id}
        )

        if trace_id:
            response.headers['X-Trace-Id'] = trace_id
        return response
