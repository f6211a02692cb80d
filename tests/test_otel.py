import logging
from types import SimpleNamespace

import httpx
import pytest
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggingHandler
from opentelemetry.sdk.trace import TracerProvider

from bookstore.app import create_app
from bookstore.config import Settings
from bookstore.otel import _log_hook


def test_log_hook_stamps_trace_and_span_ids():
    tracer = TracerProvider().get_tracer("bookstore-tests")
    record = SimpleNamespace(attributes={})
    with tracer.start_as_current_span("request"):
        _log_hook(None, record)
    assert len(record.attributes["trace_id"]) == 32
    assert len(record.attributes["span_id"]) == 16


def test_log_hook_ignores_records_outside_spans():
    record = SimpleNamespace(attributes={})
    _log_hook(None, record)
    assert record.attributes == {}


@pytest.fixture()
def otel_env(monkeypatch):
    # Nothing listens on the discard port, so every export fails fast.
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://127.0.0.1:9")
    monkeypatch.setenv("OTEL_LOGS_EXPORTER", "otlp")
    monkeypatch.setenv("OTEL_SERVICE_NAME", "bookstore-tests")
    yield
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, LoggingHandler)]:
        root.removeHandler(handler)
    LoggingInstrumentor().uninstrument()


@pytest.mark.anyio
async def test_app_instruments_with_unreachable_collector(otel_env, database):
    app = create_app(settings=Settings(database_url="sqlite://", otel_enabled=True), database=database)

    assert getattr(app, "_is_instrumented_by_opentelemetry", False)
    assert any(isinstance(h, LoggingHandler) for h in logging.getLogger().handlers)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/health")
    assert resp.status_code == 200
