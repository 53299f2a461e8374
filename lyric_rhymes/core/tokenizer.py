"""Split lyrics into whitespace-preserving tokens carrying rhyme keys."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional

from .rhyme_keys import RhymeKeys, extract_rhyme_keys

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "should", "can",
        "could", "may", "might", "must", "am", "i", "me", "my", "mine", "myself",
        "you", "your", "yours", "yourself", "he", "him", "his", "himself",
        "she", "her", "hers", "herself", "it", "its", "itself", "we", "us", "our",
        "ours", "ourselves", "they", "them", "their", "theirs", "themselves",
        "what", "which", "who", "whom", "this", "that", "these", "those",
        "and", "but", "or", "nor", "for", "so", "yet", "as", "if", "of", "at",
        "by", "in", "on", "to", "up", "out", "with", "from", "into", "onto",
        "near", "over", "under", "through", "about", "above", "after", "again",
        "against", "all", "any", "both", "each", "few", "more", "most", "other",
        "some", "such", "no", "not", "only", "own", "same", "than", "too", "very",
        "just", "now", "then", "say", "says", "said", "also", "get", "go", "goes",
        "got", "gone", "how", "why", "when", "where", "while", "aint", "give",
        "im", "id", "ive", "ill", "isnt", "arent", "wasnt", "werent", "cant",
        "wont", "dont", "doesnt", "didnt", "hasnt", "havent", "hadnt",
    }
)

# Anything but letters, digits, apostrophes and hyphens; a possessive 's;
# apostrophes hugging either end of the word.
_CLEAN_PATTERN = re.compile(r"[^\w'-]|_|'s\b|^'|'$")
_WHITESPACE_SPLIT = re.compile(r"(\s+)")


@dataclass
class Token:
    """One slice of the lyrics: a word, punctuation run or whitespace run."""

    text: str
    clean: str
    line_index: int
    word_index: int
    id: int = 0
    rhyme_keys: Optional[RhymeKeys] = None
    rhyme_group: Optional[str] = None

    @property
    def is_rhymable(self) -> bool:
        return self.rhyme_keys is not None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "clean": self.clean,
            "lineIndex": self.line_index,
            "wordIndex": self.word_index,
            "rhymeData": self.rhyme_keys.as_dict() if self.rhyme_keys else None,
            "rhymeGroup": self.rhyme_group,
        }


def clean_word(text: str) -> str:
    """Normalise ``text`` for vocabulary lookup: ``"Night's,"`` -> ``"night"``."""

    if not text or text.isspace():
        return ""
    return _CLEAN_PATTERN.sub("", text.strip().lower())


def lookup_rhyme_keys(clean: str, vocabulary: Mapping) -> Optional[RhymeKeys]:
    """Rhyme keys for a cleaned word, or ``None`` when it cannot rhyme."""

    if not clean or clean in STOP_WORDS:
        return None
    phonetic = vocabulary.get(clean)
    if not phonetic:
        return None
    return extract_rhyme_keys(phonetic)


def tokenize_lyrics(lyrics: Any, vocabulary: Optional[Mapping] = None) -> List[List[Token]]:
    """Tokenize ``lyrics`` into one token list per line.

    Whitespace is kept as tokens and every line but the last ends with a
    ``"\\n"`` token, so joining all ``Token.text`` values gives back the
    original string.
    """

    if not isinstance(lyrics, str) or not lyrics:
        return []
    if not isinstance(vocabulary, Mapping):
        vocabulary = {}

    raw_lines = lyrics.split("\n")
    lines: List[List[Token]] = []
    next_id = 0

    for line_index, line_text in enumerate(raw_lines):
        pieces = [piece for piece in _WHITESPACE_SPLIT.split(line_text) if piece]
        if line_index < len(raw_lines) - 1:
            pieces.append("\n")

        line_tokens: List[Token] = []
        for word_index, piece in enumerate(pieces):
            clean = clean_word(piece)
            line_tokens.append(
                Token(
                    text=piece,
                    clean=clean,
                    line_index=line_index,
                    word_index=word_index,
                    id=next_id,
                    rhyme_keys=lookup_rhyme_keys(clean, vocabulary),
                )
            )
            next_id += 1
        lines.append(line_tokens)

    return lines


def rhymable_tokens(lines: List[List[Token]]) -> List[Token]:
    """Flatten ``lines`` to the tokens that carry rhyme keys, in reading order."""

    return [token for line in lines for token in line if token.rhyme_keys is not None]


__all__ = [
    "STOP_WORDS",
    "Token",
    "clean_word",
    "lookup_rhyme_keys",
    "rhymable_tokens",
    "tokenize_lyrics",
]
