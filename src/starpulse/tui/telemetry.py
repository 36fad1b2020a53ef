"""OpenTelemetry spans and trace-stamped logging for the search lifecycle.

Each submitted search, successful fetch and failed fetch runs inside a
span; log lines written while a span is active carry its trace and span
ids, so one search can be followed through the JSON log file.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

LOGGER_NAME = "starpulse.tui"

_NO_TRACE = "0" * 32
_NO_SPAN = "0" * 16


class SearchSpan:
    """Handle on an open span. Attribute errors are swallowed so a bad
    attribute value never interrupts a search."""

    def __init__(self, span: trace.Span) -> None:
        self._span = span

    def set_attribute(self, key: str, value: object) -> None:
        try:
            self._span.set_attribute(key, value)
        except Exception:
            pass

    def record_failure(self, exc: BaseException) -> None:
        self._span.record_exception(exc)
        self._span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc)))


class _TraceLogAdapter(logging.LoggerAdapter):
    """Stamps the active trace_id and span_id onto each record."""

    def process(self, msg, kwargs):
        ctx = trace.get_current_span().get_span_context()
        if ctx.is_valid:
            extra = dict(kwargs.get("extra") or {})
            extra["trace_id"] = format(ctx.trace_id, "032x")
            extra["span_id"] = format(ctx.span_id, "016x")
            kwargs["extra"] = extra
        return msg, kwargs


class Telemetry:
    """Tracer plus trace-aware logger, shared by the controller and the app."""

    def __init__(self, tracer: trace.Tracer) -> None:
        self._tracer = tracer
        self.log = _TraceLogAdapter(logging.getLogger(LOGGER_NAME), {})

    @contextmanager
    def span(self, name: str, attributes: dict | None = None) -> Iterator[SearchSpan]:
        """Open span *name*, e.g. ``"controller.submit_search"``."""
        with self._tracer.start_as_current_span(name, attributes=attributes) as otel_span:
            yield SearchSpan(otel_span)

    @classmethod
    def for_testing(cls) -> tuple[Telemetry, InMemorySpanExporter]:
        """Telemetry whose finished spans land in the returned exporter."""
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return cls(provider.get_tracer(LOGGER_NAME)), exporter

    @classmethod
    def noop(cls) -> Telemetry:
        return cls(TracerProvider().get_tracer(LOGGER_NAME))


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
                "level": record.levelname,
                "logger": record.name,
                "trace": getattr(record, "trace_id", _NO_TRACE),
                "span": getattr(record, "span_id", _NO_SPAN),
                "msg": record.getMessage(),
            },
            ensure_ascii=False,
        )


def configure_file_logging(log_dir: Path = Path("logs"), level: int = logging.DEBUG) -> Path:
    """Send ``starpulse.*`` logs to ``{log_dir}/starpulse-YYYYMMDD.log`` as JSON lines.

    The file handler is installed once per process; later calls only
    return the path.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"starpulse-{datetime.now():%Y%m%d}.log"

    logger = logging.getLogger("starpulse")
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(_JsonLineFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)
    return log_path
