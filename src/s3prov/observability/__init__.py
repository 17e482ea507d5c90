"""Observability helpers: structured logging, counters, tracing."""

from .logging import (
    S3ProvLogger,
    get_logger,
    set_verbose,
    log_config_fingerprint,
)
from .tracing import (
    S3ProvTracer,
    get_tracer,
    trace_operation,
    is_tracing_enabled,
    enable_tracing,
    disable_tracing,
)

__all__ = [
    "S3ProvLogger",
    "get_logger",
    "set_verbose",
    "log_config_fingerprint",
    "S3ProvTracer",
    "get_tracer",
    "trace_operation",
    "is_tracing_enabled",
    "enable_tracing",
    "disable_tracing",
]
