"""Loaders for the word -> phoneme string vocabulary used by the analysers."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, Iterable, Optional

import pronouncing

from lyric_rhymes.utils.observability import get_logger

from .tokenizer import clean_word

_WORD_VARIANT_PATTERN = re.compile(r"\(\d+\)$")

_logger = get_logger(__name__).bind(component="vocabulary")


class VocabularyError(ValueError):
    """Raised when a vocabulary file cannot be read or parsed."""


def _strip_variant(word: str) -> str:
    return _WORD_VARIANT_PATTERN.sub("", word).lower()


def load_cmudict_vocabulary(dict_path: Path | str) -> Dict[str, str]:
    """Read a CMU pronouncing dictionary file into a vocabulary map.

    Comment lines start with ``;;;``. Alternate pronunciations such as
    ``READ(2)`` are skipped once the word already has one.
    """

    path = Path(dict_path)
    vocabulary: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                entry = line.strip()
                if not entry or entry.startswith(";;;"):
                    continue
                parts = entry.split()
                if len(parts) < 2:
                    continue
                raw_word, *phones = parts
                word = _strip_variant(raw_word)
                if word:
                    vocabulary.setdefault(word, " ".join(phones))
    except OSError as exc:
        raise VocabularyError(f"cannot read CMU dictionary {path}: {exc}") from exc

    _logger.info(
        "Loaded CMU dictionary vocabulary",
        context={"path": str(path), "entries": len(vocabulary)},
    )
    return vocabulary


def load_vocabulary_json(path: Path | str) -> Dict[str, str]:
    """Read a JSON object mapping words to phoneme strings."""

    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise VocabularyError(f"cannot read vocabulary {source}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise VocabularyError(f"invalid vocabulary JSON in {source}: {exc}") from exc

    if not isinstance(payload, dict):
        raise VocabularyError(f"vocabulary {source} must be a JSON object")

    vocabulary = {
        str(word).lower(): phones
        for word, phones in payload.items()
        if isinstance(phones, str) and phones.strip()
    }
    _logger.info(
        "Loaded JSON vocabulary",
        context={"path": str(source), "entries": len(vocabulary)},
    )
    return vocabulary


def load_vocabulary(path: Path | str) -> Dict[str, str]:
    """Load ``path`` as JSON when it ends in ``.json``, else as CMU format."""

    if Path(path).suffix.lower() == ".json":
        return load_vocabulary_json(path)
    return load_cmudict_vocabulary(path)


def vocabulary_for_words(words: Iterable[str]) -> Dict[str, str]:
    """Look ``words`` up in the CMU dictionary bundled with ``pronouncing``.

    Words are cleaned the way the tokenizer cleans them; the first listed
    pronunciation wins and unknown words are left out.
    """

    vocabulary: Dict[str, str] = {}
    missing = 0
    for raw in words:
        word = clean_word(raw)
        if not word or word in vocabulary:
            continue
        phones = pronouncing.phones_for_word(word)
        if phones:
            vocabulary[word] = phones[0]
        else:
            missing += 1

    _logger.debug(
        "Built vocabulary from pronouncing",
        context={"entries": len(vocabulary), "missing": missing},
    )
    return vocabulary


def vocabulary_for_lyrics(lyrics: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Vocabulary covering every word of ``lyrics``; ``extra`` entries win."""

    vocabulary = vocabulary_for_words(lyrics.split())
    if extra:
        vocabulary.update({word.lower(): phones for word, phones in extra.items()})
    return vocabulary


__all__ = [
    "VocabularyError",
    "load_cmudict_vocabulary",
    "load_vocabulary",
    "load_vocabulary_json",
    "vocabulary_for_lyrics",
    "vocabulary_for_words",
]
