import pytest

from lyric_rhymes.core.tokenizer import (
    STOP_WORDS,
    clean_word,
    rhymable_tokens,
    tokenize_lyrics,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Night's,", "night"),
        ("HELLO!", "hello"),
        ("'Cause", "cause"),
        ("runnin'", "runnin"),
        ("rock-n-roll", "rock-n-roll"),
        ("don't", "don't"),
        ("snake_case", "snakecase"),
        ("...", ""),
        ("   ", ""),
    ],
)
def test_clean_word(raw, expected):
    assert clean_word(raw) == expected


@pytest.mark.parametrize(
    "lyrics",
    [
        "cat\nhat\nbat",
        "  Hello, world!\n\nthe cat's hat\r\nend  ",
        "\n\n",
        "trailing newline\n",
        "tabs\tand  spaces",
    ],
)
def test_tokens_reconstruct_the_original_text(lyrics, vocabulary):
    lines = tokenize_lyrics(lyrics, vocabulary)

    assert "".join(token.text for line in lines for token in line) == lyrics
    assert len(lines) == lyrics.count("\n") + 1


def test_empty_or_non_text_lyrics_give_no_lines(vocabulary):
    assert tokenize_lyrics("", vocabulary) == []
    assert tokenize_lyrics(None, vocabulary) == []


def test_rhyme_keys_attached_only_to_known_non_stopwords(vocabulary):
    lines = tokenize_lyrics("The cat's hat, and zebra", vocabulary)
    tokens = {token.text: token for token in lines[0]}

    assert tokens["The"].rhyme_keys is None
    assert tokens["and"].rhyme_keys is None
    assert tokens["cat's"].clean == "cat"
    assert tokens["cat's"].rhyme_keys.perfect == "AE1 T"
    assert tokens["hat,"].rhyme_keys is not None
    assert tokens["zebra"].rhyme_keys is None
    assert tokens[" "].clean == ""


def test_stopwords_never_carry_rhyme_keys(vocabulary):
    vocabulary.update({word: "S AH1 M" for word in STOP_WORDS})
    lyrics = " ".join(sorted(STOP_WORDS))

    assert rhymable_tokens(tokenize_lyrics(lyrics, vocabulary)) == []


def test_unparseable_phonemes_degrade_to_non_rhymable():
    lines = tokenize_lyrics("hmm cat", {"hmm": "HH M", "cat": "K AE1 T"})
    words = rhymable_tokens(lines)

    assert [token.clean for token in words] == ["cat"]


def test_token_positions_and_ids(vocabulary):
    lines = tokenize_lyrics("cat hat\nbat", vocabulary)

    assert [token.text for token in lines[0]] == ["cat", " ", "hat", "\n"]
    assert [token.word_index for token in lines[0]] == [0, 1, 2, 3]
    assert lines[1][0].line_index == 1
    assert [token.id for line in lines for token in line] == [0, 1, 2, 3, 4]


def test_non_mapping_vocabulary_is_treated_as_empty():
    lines = tokenize_lyrics("cat", ["cat"])

    assert lines[0][0].rhyme_keys is None


def test_token_as_dict(vocabulary):
    token = tokenize_lyrics("cat", vocabulary)[0][0]

    payload = token.as_dict()
    assert payload["text"] == "cat"
    assert payload["rhymeData"]["perfect"] == "AE1 T"
    assert payload["rhymeGroup"] is None
