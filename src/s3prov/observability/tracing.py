"""OpenTelemetry spans around handler operations.

Tracing is off unless :func:`enable_tracing` is called and the
``opentelemetry-sdk`` package is installed; spans are then exported to the
console.
"""

from contextlib import contextmanager
from functools import wraps
from typing import Any, Dict, Optional

# Optional OpenTelemetry imports
try:
    from opentelemetry import trace
    from opentelemetry.trace import Status, StatusCode
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    from opentelemetry.sdk.resources import Resource
    OPENTELEMETRY_AVAILABLE = True
except ImportError:
    OPENTELEMETRY_AVAILABLE = False
    trace = None
    Status = None
    StatusCode = None
    TracerProvider = None
    BatchSpanProcessor = None
    ConsoleSpanExporter = None
    Resource = None


class S3ProvTracer:
    def __init__(self, enabled: bool = False, service_name: str = "s3prov"):
        self.enabled = enabled and OPENTELEMETRY_AVAILABLE
        self.service_name = service_name
        self.tracer = None

        if self.enabled:
            self._setup_tracer()

    def _setup_tracer(self) -> None:
        resource = Resource.create({"service.name": self.service_name})
        provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(provider)
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        self.tracer = trace.get_tracer(self.service_name)

    @contextmanager
    def span(self, name: str, attributes: Optional[Dict[str, Any]] = None):
        """Open a span named ``name``; yields ``None`` when tracing is off."""
        if not self.enabled or not self.tracer:
            yield None
            return

        with self.tracer.start_as_current_span(name) as span:
            for key, value in (attributes or {}).items():
                span.set_attribute(key, str(value))
            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise
            else:
                span.set_status(Status(StatusCode.OK))


_tracer: Optional[S3ProvTracer] = None


def get_tracer() -> S3ProvTracer:
    global _tracer
    if _tracer is None:
        _tracer = S3ProvTracer(enabled=False)
    return _tracer


def trace_operation(name: str):
    """Decorator wrapping a handler method in a span.

    The span carries the resource type of the handler when it has one.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            attributes = {}
            resource_type = getattr(args[0], "resource_type", None) if args else None
            if resource_type:
                attributes["resource.type"] = resource_type
            with get_tracer().span(name, attributes):
                return func(*args, **kwargs)
        return wrapper
    return decorator


def is_tracing_enabled() -> bool:
    return get_tracer().enabled


def enable_tracing(service_name: str = "s3prov") -> None:
    global _tracer
    _tracer = S3ProvTracer(enabled=True, service_name=service_name)


def disable_tracing() -> None:
    global _tracer
    _tracer = S3ProvTracer(enabled=False)
