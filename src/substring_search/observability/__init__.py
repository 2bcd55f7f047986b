"""Observability module for structured logging and OpenTelemetry tracing."""

from substring_search.observability.context import (
    get_trace_context,
    operation_scope,
    set_trace_context,
    trace_context,
)
from substring_search.observability.logging import JsonFormatter, configure_logging
from substring_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "operation_scope",
    "set_trace_context",
    "trace_context",
]
