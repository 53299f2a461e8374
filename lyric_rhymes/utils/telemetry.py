"""In-process telemetry for timing the phases of a rhyme analysis."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from copy import deepcopy
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .observability import get_logger

TelemetryListener = Callable[[str, Dict[str, Any]], None]


class StructuredTelemetry:
    """Collects phase timings, counters and metadata for the current trace.

    One trace corresponds to one analysis request. Starting a new trace
    discards the previous one; :meth:`snapshot` copies the state so callers
    can keep it around after the next request begins.
    """

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._time_fn = time_fn or time.perf_counter
        self._lock = threading.RLock()
        self._trace_id = 0
        self._listeners: List[TelemetryListener] = list(listeners or [])
        self._reset_state()

    def _reset_state(self) -> None:
        self._trace_name: Optional[str] = None
        self._timings: Dict[str, Dict[str, float]] = {}
        self._counters: Dict[str, float] = {}
        self._metadata: Dict[str, Any] = {}

    def _notify(self, event_type: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            listeners = tuple(self._listeners)
        for listener in listeners:
            listener(event_type, dict(payload))

    def now(self) -> float:
        return float(self._time_fn())

    def start_trace(self, name: str) -> int:
        """Reset collected state and start a trace called ``name``."""

        with self._lock:
            self._trace_id += 1
            self._reset_state()
            self._trace_name = name
            trace_id = self._trace_id
        self._notify("trace_started", {"trace_id": trace_id, "name": name})
        return trace_id

    def record_timing(self, name: str, duration: float) -> None:
        duration = max(0.0, float(duration))
        with self._lock:
            bucket = self._timings.setdefault(
                name, {"count": 0, "total": 0.0, "max": 0.0}
            )
            bucket["count"] += 1
            bucket["total"] += duration
            bucket["max"] = max(bucket["max"], duration)
        self._notify("timing", {"name": name, "duration": duration})

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Record how long the body of the ``with`` block takes as ``name``."""

        start = self.now()
        try:
            yield
        finally:
            self.record_timing(name, self.now() - start)

    def increment(self, name: str, amount: float = 1.0) -> None:
        with self._lock:
            value = self._counters.get(name, 0.0) + float(amount)
            self._counters[name] = value
        self._notify("counter", {"name": name, "value": value})

    def annotate(self, key: str, value: Any) -> None:
        with self._lock:
            self._metadata[key] = value
        self._notify("metadata", {"key": key, "value": value})

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return deepcopy(
                {
                    "trace_id": self._trace_id,
                    "name": self._trace_name,
                    "timings": self._timings,
                    "counters": self._counters,
                    "metadata": self._metadata,
                }
            )

    def add_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]


class TelemetryLogger:
    """Listener that forwards telemetry events to the project logger."""

    def __init__(
        self,
        *,
        logger: Optional[logging.LoggerAdapter] = None,
        level: int = logging.DEBUG,
    ) -> None:
        self._logger = logger or get_logger(__name__).bind(component="telemetry")
        self._level = level

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(self._level):
            return
        name = payload.get("name") or payload.get("key") or "event"
        context = {"telemetry.event": event_type}
        context.update({str(key): value for key, value in payload.items()})
        self._logger.log(self._level, f"Telemetry {event_type}: {name}", context=context)


__all__ = ["StructuredTelemetry", "TelemetryLogger", "TelemetryListener"]
