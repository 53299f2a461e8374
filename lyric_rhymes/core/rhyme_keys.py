"""Rhyme key extraction from ARPAbet phoneme strings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

VOWEL_PHONEMES: FrozenSet[str] = frozenset(
    {
        "AA",
        "AE",
        "AH",
        "AO",
        "AW",
        "AY",
        "EH",
        "ER",
        "EY",
        "IH",
        "IY",
        "OW",
        "OY",
        "UH",
        "UW",
    }
)

_STRESS_SUFFIX_PATTERN = re.compile(r"[012]$")
_STRESSED_PATTERN = re.compile(r"[A-Z]+[12]$")


@dataclass(frozen=True)
class RhymeKeys:
    """Comparison keys for one pronunciation, from most to least specific."""

    perfect: str
    near: str
    slant: str
    ending: str
    full: str

    @property
    def phonemes(self) -> List[str]:
        return self.full.split()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "perfect": self.perfect,
            "near": self.near,
            "slant": self.slant,
            "ending": self.ending,
            "fullPhonetic": self.full,
        }


def split_phonemes(phoneme_string: Any) -> List[str]:
    """Return the phoneme tokens of ``phoneme_string`` (empty for non-strings)."""

    if not isinstance(phoneme_string, str):
        return []
    return phoneme_string.split()


def base_phoneme(phoneme: str) -> str:
    """Strip a trailing stress digit: ``"AE1"`` -> ``"AE"``."""

    return _STRESS_SUFFIX_PATTERN.sub("", phoneme)


def is_vowel(phoneme: str) -> bool:
    return base_phoneme(phoneme) in VOWEL_PHONEMES


def count_syllables(phonemes: Sequence[str]) -> int:
    """Approximate syllables as the phonemes carrying a stress digit."""

    return sum(1 for phoneme in phonemes if _STRESS_SUFFIX_PATTERN.search(phoneme))


def find_rhyme_vowel(phonemes: Sequence[str]) -> Optional[int]:
    """Index of the last stressed phoneme, else of the last vowel, else ``None``."""

    for index in range(len(phonemes) - 1, -1, -1):
        if _STRESSED_PATTERN.search(phonemes[index]):
            return index

    for index in range(len(phonemes) - 1, -1, -1):
        if is_vowel(phonemes[index]):
            return index

    return None


def extract_rhyme_keys(phoneme_string: Any) -> Optional[RhymeKeys]:
    """Derive :class:`RhymeKeys` from a phoneme string such as ``"K AE1 T"``.

    Returns ``None`` for empty or non-string input and for pronunciations
    without any vowel.
    """

    phonemes = split_phonemes(phoneme_string)
    if not phonemes:
        return None

    vowel_index = find_rhyme_vowel(phonemes)
    if vowel_index is None:
        return None

    return RhymeKeys(
        perfect=" ".join(phonemes[vowel_index:]),
        near=" ".join(phonemes[max(0, vowel_index - 1):]),
        slant=" ".join(phonemes[-2:]),
        ending=phonemes[-1],
        full=" ".join(phonemes),
    )


__all__ = [
    "VOWEL_PHONEMES",
    "RhymeKeys",
    "base_phoneme",
    "count_syllables",
    "extract_rhyme_keys",
    "find_rhyme_vowel",
    "is_vowel",
    "split_phonemes",
]
