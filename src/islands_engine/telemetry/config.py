"""Telemetry configuration for the islands engine."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

from .logger import init_logging
from .metrics import init_metrics
from .tracer import init_tracing

_TRUTHY = {"1", "true", "yes", "on"}


class TelemetryConfig(BaseModel):
    """Which telemetry subsystems to enable and where to export them."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "islands-engine"
    service_namespace: str = "game"
    log_level: str = "INFO"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Build a config from `ISLANDS_ENGINE_*` and `OTEL_*` variables."""

        data: Dict[str, Any] = cls().model_dump()
        data.update(overrides)

        flags = {
            "enable_tracing": ("ISLANDS_ENGINE_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
            "enable_metrics": ("ISLANDS_ENGINE_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
            "enable_logging": ("ISLANDS_ENGINE_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
        }
        for key, names in flags.items():
            flag = _flag_from_env(*names)
            if flag is not None:
                data[key] = flag

        base = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for key, signal in (
            ("otlp_traces_endpoint", "traces"),
            ("otlp_metrics_endpoint", "metrics"),
            ("otlp_logs_endpoint", "logs"),
        ):
            if data.get(key):
                continue
            explicit = os.getenv(f"OTEL_EXPORTER_OTLP_{signal.upper()}_ENDPOINT")
            data[key] = explicit or _signal_endpoint(base, signal)

        if service_name := os.getenv("OTEL_SERVICE_NAME"):
            data["service_name"] = service_name
        if service_namespace := os.getenv("OTEL_SERVICE_NAMESPACE"):
            data["service_namespace"] = service_namespace
        if log_level := os.getenv("ISLANDS_ENGINE_LOG_LEVEL"):
            data["log_level"] = log_level.strip().upper()

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            attrs = dict(data.get("resource_attributes") or {})
            for part in resource_env.split(","):
                if "=" not in part:
                    continue
                key, value = part.split("=", 1)
                attrs[key.strip()] = value.strip()
            data["resource_attributes"] = attrs

        # A configured endpoint switches its exporter on.
        if data.get("otlp_traces_endpoint"):
            data["enable_tracing"] = True
        if data.get("otlp_metrics_endpoint"):
            data["enable_metrics"] = True
        if data.get("otlp_logs_endpoint"):
            data["enable_logging"] = True

        return cls(**data)

    def resource_dict(self) -> dict[str, str]:
        """Resource attributes shared by every provider."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes


def _flag_from_env(*names: str) -> bool | None:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            return value.strip().lower() in _TRUTHY
    return None


def _signal_endpoint(base: str | None, signal: str) -> str | None:
    if not base:
        return None
    return f"{base.rstrip('/')}/v1/{signal}"


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise the enabled telemetry subsystems."""

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
