"""Utility helpers shared across the :mod:`lyric_rhymes` package."""

from __future__ import annotations

from .logging_config import configure_logging
from .observability import (
    StructuredLoggerAdapter,
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from .telemetry import StructuredTelemetry, TelemetryLogger

__all__ = [
    "configure_logging",
    "StructuredTelemetry",
    "TelemetryLogger",
    "StructuredLoggerAdapter",
    "add_span_attributes",
    "create_counter",
    "create_histogram",
    "get_logger",
    "record_exception",
    "start_span",
]
