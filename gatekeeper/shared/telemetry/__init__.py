"""Telemetry: logging setup and OpenTelemetry tracing helpers."""

from gatekeeper.shared.telemetry.logging import get_logger, setup_logging
from gatekeeper.shared.telemetry.tracing import (
    add_span_attributes,
    set_span_error,
    traced,
)

__all__ = [
    "add_span_attributes",
    "get_logger",
    "set_span_error",
    "setup_logging",
    "traced",
]
