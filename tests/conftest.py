import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from lyric_rhymes.core.rhyme_keys import extract_rhyme_keys


VOCABULARY = {
    "cat": "K AE1 T",
    "hat": "HH AE1 T",
    "bat": "B AE1 T",
    "acrobat": "AE1 K R AH0 B AE2 T",
    "night": "N AY1 T",
    "light": "L AY1 T",
    "tonight": "T AH0 N AY1 T",
    "day": "D EY1",
    "way": "W EY1",
    "stay": "S T EY1",
    "played": "P L EY1 D",
    "stayed": "S T EY1 D",
    "dog": "D AO1 G",
    "tree": "T R IY1",
    "bit": "B IH1 T",
    "beat": "B IY1 T",
    "moon": "M UW1 N",
    "soon": "S UW1 N",
    "food": "F UW1 D",
    "blue": "B L UW1",
    "grew": "G R UW1",
    "cartoon": "K AA0 R T UW1 N",
    "running": "R AH1 N IH0 NG",
    "singing": "S IH1 NG IH0 NG",
    "quickly": "K W IH1 K L IY0",
    "slowly": "S L OW1 L IY0",
    "loudly": "L AW1 D L IY0",
    # Stopwords stay non-rhymable even when the vocabulary knows them.
    "the": "DH AH0",
    "and": "AH0 N D",
}


@pytest.fixture
def vocabulary():
    return dict(VOCABULARY)


@pytest.fixture
def make_word():
    """Build a minimal rhymable word from the shared vocabulary."""

    def _make(clean: str, phones: str | None = None):
        return SimpleNamespace(
            clean=clean,
            rhyme_keys=extract_rhyme_keys(phones or VOCABULARY[clean]),
        )

    return _make
