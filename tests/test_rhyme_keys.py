import pytest

from lyric_rhymes.core.rhyme_keys import (
    RhymeKeys,
    base_phoneme,
    count_syllables,
    extract_rhyme_keys,
    find_rhyme_vowel,
)


def test_extract_rhyme_keys_from_last_stressed_vowel():
    keys = extract_rhyme_keys("K AE1 T")

    assert keys == RhymeKeys(
        perfect="AE1 T",
        near="K AE1 T",
        slant="AE1 T",
        ending="T",
        full="K AE1 T",
    )


def test_secondary_stress_counts_when_it_is_rightmost():
    keys = extract_rhyme_keys("AE1 K R AH0 B AE2 T")

    assert keys.perfect == "AE2 T"
    assert keys.near == "B AE2 T"
    assert keys.slant == "AE2 T"


def test_unstressed_words_fall_back_to_last_vowel():
    keys = extract_rhyme_keys("DH AH0")

    assert keys.perfect == "AH0"
    assert keys.near == "DH AH0"
    assert keys.ending == "AH0"


def test_near_key_clamps_at_word_start():
    keys = extract_rhyme_keys("EY1")

    assert keys.perfect == "EY1"
    assert keys.near == "EY1"
    assert keys.slant == "EY1"


@pytest.mark.parametrize("value", ["", "   ", None, 42, "S T R", ["K", "AE1", "T"]])
def test_invalid_or_vowelless_input_has_no_keys(value):
    assert extract_rhyme_keys(value) is None


def test_as_dict_uses_wire_names():
    payload = extract_rhyme_keys("D EY1").as_dict()

    assert payload["fullPhonetic"] == "D EY1"
    assert payload["perfect"] == "EY1"


def test_phoneme_helpers():
    assert base_phoneme("IY0") == "IY"
    assert base_phoneme("NG") == "NG"
    assert count_syllables("R AH1 N IH0 NG".split()) == 2
    assert find_rhyme_vowel("S T R".split()) is None
