import logging

import pytest

from lyric_rhymes.app.services.analysis_service import (
    SCHEME,
    RhymeAnalysisService,
)


@pytest.fixture
def service(vocabulary):
    return RhymeAnalysisService(vocabulary, max_concurrent_analyses=2)


def test_statistics_are_cached_per_lyrics(service):
    first = service.analyze_statistics("cat\nhat")
    second = service.analyze_statistics("cat\nhat")

    assert first is second
    telemetry = service.get_latest_telemetry()
    assert telemetry["name"] == "analyze_statistics"
    assert telemetry["counters"]["analysis.cache_hit"] == 1.0
    assert telemetry["metadata"]["input.characters"] == 7


def test_cache_miss_records_timings(service):
    lines = service.analyze_scheme("cat\nhat")

    assert [token.rhyme_group for token in lines[0] if token.clean] == ["A"]
    telemetry = service.get_latest_telemetry()
    assert telemetry["counters"]["analysis.completed"] == 1.0
    assert "analysis.scheme" in telemetry["timings"]
    assert "analysis.slot.wait" in telemetry["timings"]


def test_clearing_the_cache_forces_a_fresh_analysis(service):
    first = service.analyze_statistics("cat\nhat")
    service.clear_cached_results()

    assert service.analyze_statistics("cat\nhat") is not first


def test_cache_is_bounded(vocabulary):
    service = RhymeAnalysisService(vocabulary, max_cache_entries=1)

    first = service.analyze_statistics("cat\nhat")
    service.analyze_statistics("night\nlight")

    assert service.analyze_statistics("cat\nhat") is not first


def test_analyze_returns_json_ready_payload(service):
    payload = service.analyze("cat\nhat")

    assert set(payload) == {"lines", "rhymeGroups", "statistics"}
    assert payload["lines"][0][0]["text"] == "cat"
    assert payload["lines"][0][0]["rhymeGroup"] == "A"
    assert payload["lines"][0][0]["rhymeData"]["perfect"] == "AE1 T"
    assert payload["rhymeGroups"] == [
        {"rhymeSound": "AE1 T", "words": ["cat", "hat"], "count": 2, "label": "A"}
    ]
    assert payload["statistics"]["perfectRhymes"] == 1


def test_failures_are_recorded_and_reraised(service):
    def explode(lyrics, vocabulary):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        service._run(SCHEME, "cat", explode)

    telemetry = service.get_latest_telemetry()
    assert telemetry["counters"]["analysis.failed"] == 1.0
    assert "analysis.completed" not in telemetry["counters"]


def test_scheme_groups_carry_their_rhyme_sound(service):
    groups = service.analyze("cat\nhat\nnight\nlight")["rhymeGroups"]

    assert groups == [
        {"rhymeSound": "AE1 T", "words": ["cat", "hat"], "count": 2, "label": "A"},
        {"rhymeSound": "AY1 T", "words": ["light", "night"], "count": 2, "label": "B"},
    ]


def test_debug_logging_attaches_telemetry_logger(vocabulary, caplog):
    caplog.set_level(logging.DEBUG, logger="lyric_rhymes")

    service = RhymeAnalysisService(vocabulary)
    service.analyze_statistics("cat\nhat")

    messages = [record.message for record in caplog.records]
    assert any("Telemetry counter: analysis.completed" in message for message in messages)
