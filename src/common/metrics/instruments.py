"""
OpenTelemetry metrics for the advisory core.

Exports AI performance metrics (TTFT, TPS, latency, token counts) and
session health counters (quota trips, surfaced errors, geolocation
fallbacks, searches) via OTLP to an OpenTelemetry Collector.

Metrics are fire-and-forget: if the collector is down, the app continues normally.
"""

import os

from opentelemetry import metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from common.logging_config import get_logger

logger = get_logger("common_metrics")

# OTEL Collector endpoint (default: localhost:4317 for gRPC)
OTEL_ENDPOINT = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")

# Setup OTEL metrics
_resource = Resource.create({"service.name": "aura-advisor-core"})

try:
    _exporter = OTLPMetricExporter(endpoint=OTEL_ENDPOINT, insecure=True)
    _reader = PeriodicExportingMetricReader(_exporter, export_interval_millis=5000)
    _provider = MeterProvider(resource=_resource, metric_readers=[_reader])
    metrics.set_meter_provider(_provider)
    logger.info(f"OpenTelemetry metrics enabled, exporting to {OTEL_ENDPOINT}")
except Exception as e:
    logger.warning(f"OpenTelemetry setup failed (metrics disabled): {e}")
    _provider = None

# Create meters and instruments
_llm_meter = metrics.get_meter("llm", version="1.0.0")
_session_meter = metrics.get_meter("aura", version="1.0.0")

llm_ttft = _llm_meter.create_histogram(
    name="llm.ttft",
    description="Time to first token (ms)",
    unit="ms",
)

llm_total_duration = _llm_meter.create_histogram(
    name="llm.total_duration",
    description="Total request-response duration (ms)",
    unit="ms",
)

llm_tps = _llm_meter.create_histogram(
    name="llm.tokens_per_second",
    description="Tokens per second during generation",
    unit="tokens/s",
)

llm_prompt_tokens = _llm_meter.create_counter(
    name="llm.prompt_tokens",
    description="Total prompt tokens processed",
    unit="tokens",
)

llm_completion_tokens = _llm_meter.create_counter(
    name="llm.completion_tokens",
    description="Total completion tokens generated",
    unit="tokens",
)

quota_trips = _session_meter.create_counter(
    name="aura.quota_trips",
    description="Quota errors that tripped the circuit breaker",
)

errors_surfaced = _session_meter.create_counter(
    name="aura.errors_surfaced",
    description="Errors normalized and shown to the user, by kind",
)

geolocation_fallbacks = _session_meter.create_counter(
    name="aura.geolocation_fallbacks",
    description="Geo searches that continued without a coordinate",
)

searches = _session_meter.create_counter(
    name="aura.searches",
    description="Searches issued, by workflow",
)
