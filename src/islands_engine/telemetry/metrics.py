"""Metrics helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from opentelemetry import metrics as otel_metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.metrics import Counter, Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

if TYPE_CHECKING:  # pragma: no cover
    from .config import TelemetryConfig

_METER_PROVIDER: MeterProvider | None = None
_METERS: dict[str, Meter] = {}
_COUNTERS: dict[str, Counter] = {}

MetricAttributes = Mapping[str, str | bool | int | float]


def get_meter(name: str = "islands_engine") -> Meter:
    meter = _METERS.get(name)
    if meter is None:
        meter = otel_metrics.get_meter(name)
        _METERS[name] = meter
    return meter


def init_metrics(config: TelemetryConfig, export_interval_millis: int = 5000) -> Meter:
    global _METER_PROVIDER, _COUNTERS

    readers = []
    if config.otlp_metrics_endpoint:
        exporter = OTLPMetricExporter(endpoint=config.otlp_metrics_endpoint, insecure=True)
        readers.append(
            PeriodicExportingMetricReader(exporter, export_interval_millis=export_interval_millis)
        )

    provider = MeterProvider(
        resource=Resource.create(config.resource_dict()), metric_readers=readers
    )
    otel_metrics.set_meter_provider(provider)

    _METER_PROVIDER = provider
    meter = provider.get_meter(config.service_name)
    _METERS[config.service_name] = meter
    _COUNTERS = {}
    return meter


def record_game_metric(name: str, value: float, attrs: MetricAttributes | None = None) -> None:
    """Add `value` to the counter called `name`, creating it on first use."""
    counter = _COUNTERS.get(name)
    if counter is None:
        counter = get_meter().create_counter(name)
        _COUNTERS[name] = counter
    counter.add(value, attributes=attrs or {})
