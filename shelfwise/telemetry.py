import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from shelfwise.models import db

logger = logging.getLogger(__name__)


def init_tracing(app):
    """Export spans over OTLP when OTEL_ENABLED; otherwise only propagate context."""
    set_global_textmap(TraceContextTextMapPropagator())
    if not app.config.get("OTEL_ENABLED"):
        return None

    service_name = app.config.get("OTEL_SERVICE_NAME", "shelfwise-api")
    endpoint = app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT")

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)

    FlaskInstrumentor().instrument_app(app)
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)
    logger.info({"event": "tracing_enabled", "service": service_name, "endpoint": endpoint})
    return provider
