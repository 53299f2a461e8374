import json

import pytest

from lyric_rhymes.core.vocabulary import (
    VocabularyError,
    load_cmudict_vocabulary,
    load_vocabulary,
    load_vocabulary_json,
    vocabulary_for_lyrics,
    vocabulary_for_words,
)


@pytest.fixture
def cmudict_file(tmp_path):
    path = tmp_path / "cmudict.dict"
    path.write_text(
        ";;; comment line\n"
        "CAT  K AE1 T\n"
        "READ  R IY1 D\n"
        "READ(2)  R EH1 D\n"
        "\n"
        "BROKEN\n"
        "hat HH AE1 T\n",
        encoding="utf-8",
    )
    return path


def test_cmudict_loader_keeps_first_pronunciation(cmudict_file):
    vocabulary = load_cmudict_vocabulary(cmudict_file)

    assert vocabulary == {
        "cat": "K AE1 T",
        "read": "R IY1 D",
        "hat": "HH AE1 T",
    }


def test_json_loader_normalises_words(tmp_path):
    path = tmp_path / "vocabulary.json"
    path.write_text(
        json.dumps({"Cat": "K AE1 T", "blank": "  ", "number": 3}),
        encoding="utf-8",
    )

    assert load_vocabulary_json(path) == {"cat": "K AE1 T"}


def test_load_vocabulary_dispatches_on_suffix(tmp_path, cmudict_file):
    path = tmp_path / "words.json"
    path.write_text(json.dumps({"day": "D EY1"}), encoding="utf-8")

    assert load_vocabulary(path) == {"day": "D EY1"}
    assert load_vocabulary(cmudict_file)["cat"] == "K AE1 T"


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_json_loader_rejects_bad_documents(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(VocabularyError):
        load_vocabulary_json(path)


def test_missing_files_raise_vocabulary_error(tmp_path):
    with pytest.raises(VocabularyError):
        load_cmudict_vocabulary(tmp_path / "missing.dict")
    with pytest.raises(VocabularyError):
        load_vocabulary(tmp_path / "missing.json")


def test_pronouncing_lookup_cleans_words():
    vocabulary = vocabulary_for_words(["Cat,", "cat", "zzqxv"])

    assert vocabulary == {"cat": "K AE1 T"}


def test_vocabulary_for_lyrics_applies_overrides():
    vocabulary = vocabulary_for_lyrics(
        "The cat\nzzqxv", extra={"Zzqxv": "Z IH1 K S"}
    )

    assert vocabulary["cat"] == "K AE1 T"
    assert vocabulary["zzqxv"] == "Z IH1 K S"
