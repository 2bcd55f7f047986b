"""Trace context attached to log records emitted during index operations."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from opentelemetry.trace import Span

trace_context: ContextVar[dict | None] = ContextVar("substring_search_trace", default=None)


def new_trace_id() -> str:
    """32-char hex trace ID."""
    return uuid4().hex


def new_span_id() -> str:
    """16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Current trace context, created on first use."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": new_trace_id(), "span_id": new_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def span_ids(span: Span) -> dict:
    """Hex trace/span ids of an OpenTelemetry span."""
    ctx = span.get_span_context()
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }


@contextmanager
def operation_scope(operation: str, *, trace_id: str | None = None, span_id: str | None = None) -> Iterator[dict]:
    """Run a block under a child context naming ``operation``.

    The trace id is inherited unless given; the previous context is restored
    on exit.
    """
    parent = get_trace_context()
    scoped = {
        **parent,
        "trace_id": trace_id or parent["trace_id"],
        "span_id": span_id or new_span_id(),
        "operation": operation,
    }
    token = trace_context.set(scoped)
    try:
        yield scoped
    finally:
        trace_context.reset(token)
