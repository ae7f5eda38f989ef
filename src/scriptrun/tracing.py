"""OpenTelemetry tracing setup for scriptrun.

The executor and spawner open one span per call. Until ``init_tracing`` is
called the global no-op provider is used, so library callers pay nothing.

Design follows Function Core / Imperative Shell:
- Pure functions: build_resource, resolve_exporter_type, script_attributes,
  output_attributes, spawn_attributes. They compute plain dicts and import
  nothing from the OTel SDK.
- Imperative shell (internal): _create_tracer_provider builds a provider
  without setting it globally, enabling isolated testing.
- Imperative shell (public): init_tracing, get_tracer, shutdown_tracing.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.trace import Tracer

    from scriptrun.models import ProcessOutput, StrategyKind

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SERVICE_NAME = "scriptrun"
SERVICE_VERSION = "0.1.0"

SCRIPTRUN_OTEL_EXPORTER_ENV = "SCRIPTRUN_OTEL_EXPORTER"
SCRIPTRUN_OTEL_ENDPOINT_ENV = "SCRIPTRUN_OTEL_ENDPOINT"


# ---------------------------------------------------------------------------
# Enum
# ---------------------------------------------------------------------------


class ExporterType(Enum):
    """Supported trace exporter backends."""

    CONSOLE = "console"
    OTLP_GRPC = "otlp_grpc"
    OTLP_HTTP = "otlp_http"
    NONE = "none"


# ---------------------------------------------------------------------------
# Pure functions (no OTel SDK imports)
# ---------------------------------------------------------------------------


def build_resource(
    service_name: str = SERVICE_NAME,
    service_version: str = SERVICE_VERSION,
    extra_attributes: dict[str, str] | None = None,
) -> dict[str, str]:
    """Compute resource attributes as a plain dict.

    ``service.name`` and ``service.version`` always come from the explicit
    parameters, even if *extra_attributes* contains those keys.
    """
    attrs: dict[str, str] = {}
    if extra_attributes:
        attrs.update(extra_attributes)
    attrs["service.name"] = service_name
    attrs["service.version"] = service_version
    return attrs


def resolve_exporter_type(exporter: ExporterType | None = None) -> ExporterType:
    """Determine the exporter type.

    Resolution order:

    1. Explicit *exporter* parameter.
    2. ``SCRIPTRUN_OTEL_EXPORTER`` environment variable.
    3. Default: ``ExporterType.CONSOLE``.

    Raises:
        ValueError: If the environment variable contains an unrecognised value.
    """
    if exporter is not None:
        return exporter

    env_value = os.environ.get(SCRIPTRUN_OTEL_EXPORTER_ENV)
    if env_value is not None:
        try:
            return ExporterType(env_value)
        except ValueError:
            valid = ", ".join(e.value for e in ExporterType)
            msg = (
                f"Invalid {SCRIPTRUN_OTEL_EXPORTER_ENV} value {env_value!r}. "
                f"Valid options: {valid}"
            )
            raise ValueError(msg) from None

    return ExporterType.CONSOLE


def script_attributes(script: str, strategy: StrategyKind) -> dict[str, str | int]:
    """Build ``scriptrun.script.*`` span attributes.

    The script text is left out; it may carry secrets.
    """
    return {
        "scriptrun.strategy": strategy.value,
        "scriptrun.script.length": len(script),
        "scriptrun.script.lines": len(script.splitlines()),
    }


def output_attributes(output: ProcessOutput) -> dict[str, int | bool]:
    """Build ``scriptrun.output.*`` span attributes for a finished run."""
    return {
        "scriptrun.output.code": output.code,
        "scriptrun.output.success": output.success(),
        "scriptrun.output.stdout_length": len(output.stdout),
        "scriptrun.output.stderr_length": len(output.stderr),
    }


def spawn_attributes(pid: int, runner: str | None) -> dict[str, str | int]:
    """Build ``scriptrun.spawn.*`` span attributes for a launched child."""
    attrs: dict[str, str | int] = {"scriptrun.spawn.pid": pid}
    if runner is not None:
        attrs["scriptrun.spawn.runner"] = runner
    return attrs


# ---------------------------------------------------------------------------
# Imperative shell, internal
# ---------------------------------------------------------------------------


def _create_tracer_provider(
    resource_attrs: dict[str, str],
    exporter_type: ExporterType,
    endpoint: str | None = None,
) -> TracerProvider:
    """Build a ``TracerProvider`` without setting it globally."""
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider

    resource = Resource.create(resource_attrs)
    provider = TracerProvider(resource=resource)

    if exporter_type is ExporterType.CONSOLE:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    elif exporter_type is ExporterType.OTLP_GRPC:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter_grpc = OTLPSpanExporter(endpoint=endpoint) if endpoint else OTLPSpanExporter()
        provider.add_span_processor(BatchSpanProcessor(exporter_grpc))

    elif exporter_type is ExporterType.OTLP_HTTP:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter_http = OTLPSpanExporter(endpoint=endpoint) if endpoint else OTLPSpanExporter()
        provider.add_span_processor(BatchSpanProcessor(exporter_http))

    # ExporterType.NONE: no processors, spans are dropped.

    return provider


# ---------------------------------------------------------------------------
# Imperative shell, public
# ---------------------------------------------------------------------------


def init_tracing(
    exporter: ExporterType | None = None,
    endpoint: str | None = None,
    service_name: str = SERVICE_NAME,
    service_version: str = SERVICE_VERSION,
) -> None:
    """Create and globally register a ``TracerProvider``.

    Safe to call multiple times. Each call shuts down the previous provider
    and resets the OTel set-once guard so the new one is accepted.
    """
    from opentelemetry import trace

    resource_attrs = build_resource(service_name, service_version)
    exporter_type = resolve_exporter_type(exporter)
    endpoint = endpoint or os.environ.get(SCRIPTRUN_OTEL_ENDPOINT_ENV)
    provider = _create_tracer_provider(resource_attrs, exporter_type, endpoint)

    current = trace.get_tracer_provider()
    if hasattr(current, "shutdown"):
        current.shutdown()

    once = trace._TRACER_PROVIDER_SET_ONCE
    with once._lock:
        once._done = False

    trace.set_tracer_provider(provider)


def get_tracer(name: str = "scriptrun") -> Tracer:
    """Return a tracer from the globally registered provider.

    Without ``init_tracing`` the default no-op provider is used.
    """
    from opentelemetry import trace

    return trace.get_tracer(name)


def shutdown_tracing() -> None:
    """Flush pending spans and shut down the global tracer provider."""
    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()
