"""Tracing for bridge submissions and remote call attempts.

Spans are exported through OpenTelemetry. Retry decisions are attached to
the active attempt span as events.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Generator
from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)
from opentelemetry.trace import NoOpTracer, Span, Tracer

logger = logging.getLogger(__name__)


@dataclass
class TelemetryConfig:
    service_name: str = "llm-bridge"
    enabled: bool = True
    exporter: str = "none"  # "stdout" | "otlp" | "none"
    otlp_endpoint: str = "http://localhost:4317"


def _exporter_for(config: TelemetryConfig) -> SpanExporter | None:
    if not config.enabled or config.exporter == "none":
        return None
    if config.exporter == "stdout":
        return ConsoleSpanExporter()
    if config.exporter == "otlp":
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError:
            logger.warning("OTLP exporter is not installed (pip install llm-bridge[otlp])")
            return None
        return OTLPSpanExporter(endpoint=config.otlp_endpoint, insecure=True)
    msg = f"Unknown trace exporter: {config.exporter}"
    raise ValueError(msg)


class BridgeTracer:
    """Owns the tracer provider behind the bridge's spans.

    Until :meth:`init` finds an exporter, spans are no-ops. An explicit
    *exporter* takes precedence over the one named in *config*.
    """

    def __init__(
        self,
        config: TelemetryConfig | None = None,
        exporter: SpanExporter | None = None,
    ) -> None:
        self._config = config or TelemetryConfig()
        self._exporter = exporter
        self._provider: TracerProvider | None = None
        self._tracer: Tracer = NoOpTracer()

    def init(self) -> None:
        exporter = self._exporter or _exporter_for(self._config)
        if exporter is None:
            return
        name = self._config.service_name
        provider = TracerProvider(resource=Resource.create({"service.name": name}))
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        self._provider = provider
        self._tracer = provider.get_tracer(name)

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, str] | None = None,
    ) -> Generator[Span, None, None]:
        with self._tracer.start_as_current_span(name, attributes=attributes) as s:
            yield s

    def record_event(self, name: str, attributes: dict[str, str] | None = None) -> None:
        """Attach an event to the active span; dropped when nothing records."""
        current = trace.get_current_span()
        if current.is_recording():
            current.add_event(name, attributes or {})

    def shutdown(self) -> None:
        """Flush pending spans. Safe to call more than once."""
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None


_DEFAULT_TRACER: BridgeTracer | None = None


def get_tracer() -> BridgeTracer:
    global _DEFAULT_TRACER  # noqa: PLW0603
    if _DEFAULT_TRACER is None:
        _DEFAULT_TRACER = BridgeTracer()
    return _DEFAULT_TRACER


def configure_tracing(config: TelemetryConfig) -> BridgeTracer:
    """Replace the process-wide tracer with one built from *config*."""
    global _DEFAULT_TRACER  # noqa: PLW0603
    if _DEFAULT_TRACER is not None:
        _DEFAULT_TRACER.shutdown()
    _DEFAULT_TRACER = BridgeTracer(config)
    _DEFAULT_TRACER.init()
    return _DEFAULT_TRACER


@contextlib.contextmanager
def trace_submit(session_id: str, stateless: bool = False) -> Generator[Span, None, None]:
    attrs = {"session.id": session_id, "bridge.stateless": str(stateless).lower()}
    with get_tracer().span("bridge/submit", attrs) as s:
        yield s


@contextlib.contextmanager
def trace_attempt(attempt: int, model: str) -> Generator[Span, None, None]:
    attrs = {"bridge.attempt": str(attempt), "llm.model": model}
    with get_tracer().span("bridge/attempt", attrs) as s:
        yield s
