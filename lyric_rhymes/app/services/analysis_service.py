"""Service facade running rhyme analyses with caching and instrumentation."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from lyric_rhymes.core import (
    RhymeScheme,
    RhymeStatistics,
    Token,
    analyze_rhyme_statistics,
    build_rhyme_scheme,
)
from lyric_rhymes.utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from lyric_rhymes.utils.telemetry import StructuredTelemetry, TelemetryLogger

SCHEME = "scheme"
STATISTICS = "statistics"


class RhymeAnalysisService:
    """Runs scheme and statistics analyses against one shared vocabulary.

    Both analyses are deterministic, so results are memoized per
    ``(kind, lyrics)`` and repeated requests for the same song reuse the
    first result. ``max_concurrent_analyses`` bounds how many analyses run
    at once when the service is shared between worker threads.
    """

    def __init__(
        self,
        vocabulary: Optional[Mapping] = None,
        *,
        max_cache_entries: int = 128,
        max_concurrent_analyses: Optional[int] = None,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.vocabulary: Mapping = vocabulary if isinstance(vocabulary, Mapping) else {}
        self.telemetry = telemetry or StructuredTelemetry()
        self._latest_trace: Dict[str, Any] = {}

        self._logger = get_logger(__name__).bind(component="rhyme_analysis_service")
        if telemetry is None and self._logger.isEnabledFor(logging.DEBUG):
            self.telemetry.add_listener(TelemetryLogger())

        self._metric_requests = create_counter(
            "lyric_rhymes_analysis_requests_total",
            "Total rhyme analysis requests received.",
            label_names=("kind",),
        )
        self._metric_failures = create_counter(
            "lyric_rhymes_analysis_failures_total",
            "Rhyme analysis requests that raised an exception.",
            label_names=("kind",),
        )
        self._metric_duration = create_histogram(
            "lyric_rhymes_analysis_seconds",
            "Latency of rhyme analyses that missed the cache.",
            label_names=("kind",),
        )
        self._metric_cache_hits = create_counter(
            "lyric_rhymes_cache_hits_total",
            "Analyses answered from the result cache.",
            label_names=("kind",),
        )

        self._cache_lock = threading.RLock()
        self._max_cache_entries = max(0, int(max_cache_entries))
        self._results: OrderedDict[Tuple[str, str], Any] = OrderedDict()

        self._semaphore: Optional[threading.BoundedSemaphore] = None
        if max_concurrent_analyses is not None and int(max_concurrent_analyses) > 0:
            self._semaphore = threading.BoundedSemaphore(int(max_concurrent_analyses))

        self._logger.info(
            "Rhyme analysis service initialised",
            context={
                "vocabulary_entries": len(self.vocabulary),
                "max_cache_entries": self._max_cache_entries,
                "max_concurrent_analyses": max_concurrent_analyses,
            },
        )

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------
    def _cache_get(self, key: Tuple[str, str]) -> Any:
        with self._cache_lock:
            cached = self._results.get(key)
            if cached is not None:
                self._results.move_to_end(key)
            return cached

    def _cache_put(self, key: Tuple[str, str], value: Any) -> None:
        if self._max_cache_entries <= 0:
            return
        with self._cache_lock:
            self._results[key] = value
            self._results.move_to_end(key)
            while len(self._results) > self._max_cache_entries:
                self._results.popitem(last=False)

    def clear_cached_results(self) -> None:
        with self._cache_lock:
            dropped = len(self._results)
            self._results.clear()
        self._logger.info("Cleared analysis cache", context={"entries": dropped})

    @contextmanager
    def _analysis_slot(self) -> Iterator[None]:
        if self._semaphore is None:
            yield
            return
        with self.telemetry.timer("analysis.slot.wait"):
            self._semaphore.acquire()
        try:
            yield
        finally:
            self._semaphore.release()

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------
    def _run(self, kind: str, lyrics: Any, analyse: Callable[[Any, Mapping], Any]) -> Any:
        text = lyrics if isinstance(lyrics, str) else ""
        key = (kind, text)
        request_context = {"kind": kind, "characters": len(text)}

        self.telemetry.start_trace(f"analyze_{kind}")
        self.telemetry.increment("analysis.invoked")
        self.telemetry.annotate("input.characters", len(text))
        self._metric_requests.labels(kind=kind).inc()

        cached = self._cache_get(key)
        if cached is not None:
            self._metric_cache_hits.labels(kind=kind).inc()
            self.telemetry.increment("analysis.cache_hit")
            self._latest_trace = self.telemetry.snapshot()
            self._logger.debug("Analysis served from cache", context=request_context)
            return cached

        self._logger.info("Analysis request received", context=request_context)
        with start_span(f"lyric_rhymes.{kind}", request_context) as span:
            try:
                with self._metric_duration.labels(kind=kind).time():
                    with self._analysis_slot():
                        with self.telemetry.timer(f"analysis.{kind}"):
                            result = analyse(lyrics, self.vocabulary)
            except Exception as exc:
                failure_context = dict(request_context)
                failure_context["error"] = str(exc)
                self._metric_failures.labels(kind=kind).inc()
                self._logger.error("Analysis request failed", context=failure_context)
                record_exception(span, exc)
                self.telemetry.increment("analysis.failed")
                self._latest_trace = self.telemetry.snapshot()
                raise

            self._cache_put(key, result)
            self.telemetry.increment("analysis.completed")
            self._latest_trace = self.telemetry.snapshot()
            add_span_attributes(span, {"analysis.success": True})
        return result

    def rhyme_scheme(self, lyrics: Any) -> RhymeScheme:
        """Labelled tokens per line for ``lyrics`` together with their groups.

        Cached schemes are shared between callers and must be treated as
        read-only.
        """

        scheme = self._run(SCHEME, lyrics, build_rhyme_scheme)
        self._logger.info(
            "Rhyme scheme ready",
            context={"lines": len(scheme.lines), "groups": len(scheme.groups)},
        )
        return scheme

    def analyze_scheme(self, lyrics: Any) -> List[List[Token]]:
        return self.rhyme_scheme(lyrics).lines

    def analyze_statistics(self, lyrics: Any) -> RhymeStatistics:
        statistics = self._run(STATISTICS, lyrics, analyze_rhyme_statistics)
        self._logger.info(
            "Rhyme statistics ready",
            context={
                "rhymable_words": statistics.total_rhymable_words,
                "density": statistics.rhyme_density,
            },
        )
        return statistics

    def analyze(self, lyrics: Any) -> Dict[str, Any]:
        """JSON-ready payload with both the scheme and the statistics."""

        payload = self.rhyme_scheme(lyrics).as_dict()
        payload["statistics"] = self.analyze_statistics(lyrics).as_dict()
        return payload

    def get_latest_telemetry(self) -> Dict[str, Any]:
        """Snapshot of the telemetry recorded by the most recent request."""

        return dict(self._latest_trace)


__all__ = ["RhymeAnalysisService", "SCHEME", "STATISTICS"]
