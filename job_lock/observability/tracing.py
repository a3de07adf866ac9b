"""
OpenTelemetry tracing.

Lock operations create spans through ``get_tracer()``, which never installs a
provider: spans go wherever the host process's tracer provider sends them,
and are no-ops if it has none. Worker processes without their own setup can
call ``setup_tracing()`` once at startup.
"""

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Tracer

from job_lock import __version__
from job_lock.config import get_settings

INSTRUMENTATION_NAME = "job_lock"


def setup_tracing(enable_console_export: bool = False) -> Tracer:
    """
    Install an SDK tracer provider for the process.

    Spans are exported over OTLP only when ``otel_exporter_otlp_endpoint``
    is configured.

    Args:
        enable_console_export: If True, also export spans to console.

    Returns:
        Tracer: The lock's tracer.
    """
    settings = get_settings()

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": __version__,
        }
    )

    provider = TracerProvider(resource=resource)

    if settings.otel_exporter_otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint,
            insecure=True,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    if enable_console_export:
        provider.add_span_processor(
            BatchSpanProcessor(ConsoleSpanExporter())
        )

    trace.set_tracer_provider(provider)

    return get_tracer()


def get_tracer() -> Tracer:
    """
    Get the lock's tracer from the current global provider.

    Returns:
        Tracer: A tracer that follows whichever provider the host installs.
    """
    return trace.get_tracer(INSTRUMENTATION_NAME, __version__)
