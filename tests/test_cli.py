import json

import pytest

from scripts.analyze_lyrics import main


@pytest.fixture
def lyrics_files(tmp_path, vocabulary):
    lyrics = tmp_path / "song.txt"
    lyrics.write_text("the cat\nin a hat\ntonight", encoding="utf-8")
    vocabulary_path = tmp_path / "vocabulary.json"
    vocabulary_path.write_text(json.dumps(vocabulary), encoding="utf-8")
    return lyrics, vocabulary_path


def test_scheme_output_labels_rhymes(lyrics_files, capsys):
    lyrics, vocabulary_path = lyrics_files

    assert main([str(lyrics), "--vocabulary", str(vocabulary_path)]) == 0

    output = capsys.readouterr().out
    assert "the cat[A]\nin a hat[A]\ntonight" in output
    assert "[A] /AE1 T/: cat, hat" in output


def test_stats_output(lyrics_files, capsys):
    lyrics, vocabulary_path = lyrics_files

    main([str(lyrics), "--vocabulary", str(vocabulary_path), "--format", "stats"])

    output = capsys.readouterr().out
    assert "Perfect rhymes: 1" in output
    assert "/AE1 T/ (2): cat, hat" in output


def test_json_output(lyrics_files, capsys):
    lyrics, vocabulary_path = lyrics_files

    main([str(lyrics), "--vocabulary", str(vocabulary_path), "--format", "json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["statistics"]["totalRhymableWords"] == 3
    assert payload["rhymeGroups"][0]["words"] == ["cat", "hat"]


def test_unreadable_vocabulary_exits_with_usage_error(lyrics_files, tmp_path):
    lyrics, _ = lyrics_files

    with pytest.raises(SystemExit) as excinfo:
        main([str(lyrics), "--vocabulary", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 2
