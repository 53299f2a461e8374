import logging

from lyric_rhymes.utils.logging_config import (
    DEFAULT_FORMAT,
    LOG_FORMAT_ENV,
    LOG_LEVEL_ENV,
    LoggingSettings,
    configure_logging,
    parse_level,
)
from lyric_rhymes.utils.observability import get_logger
from lyric_rhymes.utils.telemetry import StructuredTelemetry, TelemetryLogger


def test_structured_telemetry_emits_logging_events(caplog):
    telemetry = StructuredTelemetry()
    listener = TelemetryLogger()
    telemetry.add_listener(listener)

    caplog.set_level(logging.DEBUG, logger="lyric_rhymes.utils.telemetry")

    telemetry.start_trace("test-trace")
    with telemetry.timer("phase"):
        pass
    telemetry.increment("analysis.completed")
    telemetry.annotate("input.characters", 3)

    messages = [record.message for record in caplog.records]
    assert any("Telemetry trace_started: test-trace" in message for message in messages)
    assert any("Telemetry timing: phase" in message for message in messages)
    assert any("Telemetry counter: analysis.completed" in message for message in messages)
    assert any("Telemetry metadata: input.characters" in message for message in messages)


def test_snapshot_aggregates_timings_and_resets_per_trace():
    ticks = iter([0.0, 0.5, 1.0, 1.25])
    telemetry = StructuredTelemetry(time_fn=lambda: next(ticks))

    telemetry.start_trace("first")
    with telemetry.timer("phase"):
        pass
    with telemetry.timer("phase"):
        pass
    telemetry.increment("hits", 2)

    snapshot = telemetry.snapshot()
    assert snapshot["name"] == "first"
    assert snapshot["timings"]["phase"] == {"count": 2, "total": 0.75, "max": 0.5}
    assert snapshot["counters"] == {"hits": 2.0}

    telemetry.start_trace("second")
    assert telemetry.snapshot()["timings"] == {}
    assert snapshot["timings"]["phase"]["count"] == 2


def test_removed_listeners_stop_receiving_events():
    events = []
    telemetry = StructuredTelemetry()
    listener = lambda event_type, payload: events.append(event_type)  # noqa: E731
    telemetry.add_listener(listener)
    telemetry.increment("one")
    telemetry.remove_listener(listener)
    telemetry.increment("two")

    assert events == ["counter"]


def test_structured_logger_renders_context(caplog):
    logger = get_logger("lyric_rhymes.tests").bind(component="tests")
    caplog.set_level(logging.INFO, logger="lyric_rhymes.tests")

    logger.info("Analysed", context={"words": 3})

    assert caplog.records[-1].message == 'Analysed | {"component": "tests", "words": 3}'


def test_configure_logging_reads_environment(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")

    assert configure_logging(force=True) == logging.WARNING
    assert configure_logging("debug", force=True) == logging.DEBUG
    assert configure_logging("15", force=True) == 15

    configure_logging("info", force=True)


def test_logging_settings_prefer_explicit_level():
    environ = {LOG_LEVEL_ENV: "error", LOG_FORMAT_ENV: "%(message)s"}

    assert LoggingSettings.resolve(environ=environ) == LoggingSettings(
        level=logging.ERROR, format="%(message)s"
    )
    assert LoggingSettings.resolve("debug", environ=environ).level == logging.DEBUG
    assert LoggingSettings.resolve(environ={}) == LoggingSettings(
        level=logging.INFO, format=DEFAULT_FORMAT
    )


def test_parse_level_falls_back_on_unknown_names():
    assert parse_level("Warning") == logging.WARNING
    assert parse_level(" 25 ") == 25
    assert parse_level("loud") == logging.INFO
    assert parse_level(None, default=logging.ERROR) == logging.ERROR
