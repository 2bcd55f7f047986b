"""Unit tests for observability module."""

import io
import json
import logging
from types import SimpleNamespace

from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
import pytest

from substring_search import SearchUtility
from substring_search.observability import (
    JsonFormatter,
    configure_logging,
    create_span,
    get_trace_context,
    init_tracing,
    set_trace_context,
    tracing as tracing_module,
)
from substring_search.observability.context import operation_scope, span_ids, trace_context


def _record(msg, level=logging.INFO, args=()):
    return logging.LogRecord(
        name="substring_search.search.search_utility",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.fixture
def span_exporter():
    """Route spans from a fresh SDK provider into memory."""
    provider = init_tracing("test-service")
    exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield exporter
    tracing_module._tracer_holder["tracer"] = None


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_trace_context(self):
        data = json.loads(JsonFormatter().format(_record("test message")))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["component"] == "search_utility"
        assert "timestamp" in data
        assert "trace_id" in data
        assert "span_id" in data

    def test_standard_record_attributes_are_not_repeated(self):
        data = json.loads(JsonFormatter().format(_record("plain")))

        assert "msg" not in data
        assert "lineno" not in data

    def test_format_includes_extra_fields(self):
        record = _record("indexed")
        record.uid = 7

        data = json.loads(JsonFormatter().format(record))

        assert data["uid"] == 7

    def test_format_truncates_and_redacts(self):
        record = _record("x" * 5000)
        record.api_key = "secret"

        data = json.loads(JsonFormatter().format(record))

        assert data["message"].endswith("...")
        assert data["api_key"] == "[REDACTED]"

    def test_warning_for_malformed_token_is_serializable(self):
        record = _record("Unable to expand token %r: %s", logging.WARNING, ("\udcffbad", "surrogates not allowed"))

        data = json.loads(JsonFormatter().format(record))

        assert "\\udcffbad" in data["message"]

    def test_json_default_handles_set_and_bytes(self):
        formatter = JsonFormatter()
        assert formatter._json_default({3, 1, 2}) == [1, 2, 3]
        assert formatter._json_default(frozenset({"b", "a"})) == ["a", "b"]
        assert formatter._json_default(b"ok") == "ok"

    def test_json_default_handles_unorderable_set(self):
        value = JsonFormatter()._json_default({1, "a"})
        assert isinstance(value, list)
        assert len(value) == 2


@pytest.mark.unit
class TestConfigureLogging:
    def test_installs_json_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("debug", logger_levels={"substring_search": "warning"})

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert logging.getLogger("substring_search").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            logging.getLogger("substring_search").setLevel(logging.NOTSET)

    def test_plain_text_output(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("info", json_output=False)

            assert not isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


@pytest.mark.unit
class TestTraceContext:
    """Tests for trace context propagation."""

    def test_get_trace_context_generates_ids(self):
        ctx = get_trace_context()
        assert len(ctx["trace_id"]) == 32
        assert len(ctx["span_id"]) == 16

    def test_operation_scope_inherits_trace_and_restores(self):
        set_trace_context("aa" * 16, "bb" * 8)

        with operation_scope("substring_search.search") as scoped:
            assert scoped["trace_id"] == "aa" * 16
            assert scoped["span_id"] != "bb" * 8
            assert get_trace_context()["operation"] == "substring_search.search"

        ctx = get_trace_context()
        assert ctx["span_id"] == "bb" * 8
        assert "operation" not in ctx

    def test_operation_scope_accepts_explicit_ids(self):
        with operation_scope("op", trace_id="cc" * 16, span_id="dd" * 8) as scoped:
            assert scoped == {"trace_id": "cc" * 16, "span_id": "dd" * 8, "operation": "op"}

    def test_operation_scope_restores_on_error(self):
        set_trace_context("aa" * 16, "bb" * 8)

        with pytest.raises(ValueError):
            with operation_scope("op"):
                raise ValueError("boom")

        assert "operation" not in trace_context.get()

    def test_span_ids_extracts_context(self):
        span_ctx = SimpleNamespace(trace_id=0x1234, span_id=0x5678)
        fake_span = SimpleNamespace(get_span_context=lambda: span_ctx)
        ctx = span_ids(fake_span)
        assert ctx["trace_id"].endswith("1234")
        assert ctx["span_id"].endswith("5678")


@pytest.mark.unit
class TestTracing:
    def test_create_span_without_provider_is_noop(self):
        tracing_module._tracer_holder["tracer"] = None
        with create_span("test.operation", attributes={"test.key": "value"}) as span:
            span.set_attribute("other", 1)

    def test_search_operations_emit_spans(self, span_exporter):
        utility = SearchUtility()
        utility.index_document(1, "hello world").search("wor")
        utility.remove_document(1)

        spans = {span.name: span for span in span_exporter.get_finished_spans()}

        assert set(spans) == {
            "substring_search.index_document",
            "substring_search.search",
            "substring_search.remove_document",
        }
        assert spans["substring_search.index_document"].attributes["search.tokens"] == 2
        assert spans["substring_search.search"].attributes["search.result_count"] == 1

    def test_create_span_records_errors(self, span_exporter):
        with pytest.raises(RuntimeError):
            with create_span("failing"):
                raise RuntimeError("boom")

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR

    def test_log_records_carry_operation(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter())
        utility_logger = logging.getLogger("substring_search.search.search_utility")
        utility_logger.addHandler(handler)
        try:
            SearchUtility().index_document(1, "ok \udc80")
        finally:
            utility_logger.removeHandler(handler)

        entries = [json.loads(line) for line in stream.getvalue().splitlines()]
        warnings = [entry for entry in entries if entry["level"] == "WARNING"]

        assert len(warnings) == 1
        assert warnings[0]["operation"] == "substring_search.index_document"
        assert "operation" not in get_trace_context()
