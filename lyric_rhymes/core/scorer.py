"""Flow-oriented phonetic similarity between two sets of rhyme keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .rhyme_keys import RhymeKeys, base_phoneme, count_syllables, is_vowel

MAX_SCORE = 100.0

# Traditional key matches, checked in order; the first hit wins.
_KEY_MATCH_SCORES: Tuple[Tuple[str, float], ...] = (
    ("perfect", 100.0),
    ("near", 80.0),
    ("slant", 60.0),
    ("ending", 45.0),
)

_VOWEL_FAMILY_GUARD = 50.0
_SAME_VOWEL_SCORE = 75.0
_VOWEL_FAMILY_SCORE = 65.0
_CONSONANT_WEIGHT = 10.0

_SYLLABLE_BONUS = 5.0
_ING_BONUS = 10.0
_ED_BONUS = 8.0
_LY_BONUS = 8.0

VOWEL_FAMILIES: Dict[str, FrozenSet[str]] = {
    "long-oo": frozenset({"UW", "UH"}),
    "long-ee": frozenset({"IY", "IH"}),
    "ay-sound": frozenset({"AY", "EY"}),
    "oh-sound": frozenset({"OW", "AO"}),
    "ah-sound": frozenset({"AA", "AH"}),
    "eh-sound": frozenset({"EH", "AE"}),
    "er-sound": frozenset({"ER", "AH"}),
    "oy-sound": frozenset({"OY"}),
    "aw-sound": frozenset({"AW", "AO"}),
}

CONSONANT_GROUPS: Dict[str, FrozenSet[str]] = {
    "stops": frozenset({"B", "P", "D", "T", "G", "K"}),
    "fricatives": frozenset({"F", "V", "TH", "DH", "S", "Z", "SH", "ZH"}),
    "nasals": frozenset({"M", "N", "NG"}),
    "liquids": frozenset({"L", "R"}),
    "semivowels": frozenset({"W", "Y"}),
}

_ING_ENDINGS = {("IH", "NG"), ("IY", "NG")}


@dataclass(frozen=True)
class SimilarityBreakdown:
    """Components of a similarity score on the 0-100 scale."""

    total: float
    traditional: float
    vowel_family: float
    consonant: float
    flow: float
    match_type: str

    @classmethod
    def empty(cls) -> "SimilarityBreakdown":
        return cls(
            total=0.0,
            traditional=0.0,
            vowel_family=0.0,
            consonant=0.0,
            flow=0.0,
            match_type="none",
        )


def core_vowel(phonemes: Sequence[str]) -> Optional[str]:
    """Base form of the rightmost vowel, e.g. ``"AE"`` for ``K AE1 T``."""

    for phoneme in reversed(phonemes):
        if is_vowel(phoneme):
            return base_phoneme(phoneme)
    return None


def ending_consonants(phonemes: Sequence[str]) -> List[str]:
    """Consonants after the last vowel, in order; empty when there is no vowel."""

    consonants: List[str] = []
    for phoneme in reversed(phonemes):
        if is_vowel(phoneme):
            consonants.reverse()
            return consonants
        consonants.append(base_phoneme(phoneme))
    return []


def _same_consonant_group(first: str, second: str) -> bool:
    return any(first in group and second in group for group in CONSONANT_GROUPS.values())


def consonant_similarity(first: Sequence[str], second: Sequence[str]) -> float:
    """Similarity of two trailing consonant clusters in ``[0, 1]``."""

    if not first and not second:
        return 1.0
    if not first or not second:
        return 0.3
    if list(first) == list(second):
        return 1.0
    if len(first) != len(second):
        return 0.2

    matches = 0.0
    for left, right in zip(first, second):
        if left == right:
            matches += 1.0
        elif _same_consonant_group(left, right):
            matches += 0.7
    return matches / len(first)


def vowel_family_score(first: Optional[str], second: Optional[str]) -> float:
    """75 for an identical core vowel, 65 for a shared family, else 0."""

    if not first or not second:
        return 0.0
    if first == second:
        return _SAME_VOWEL_SCORE
    for vowels in VOWEL_FAMILIES.values():
        if first in vowels and second in vowels:
            return _VOWEL_FAMILY_SCORE
    return 0.0


def _tail(phonemes: Sequence[str], size: int) -> Tuple[str, ...]:
    return tuple(base_phoneme(phoneme) for phoneme in phonemes[-size:])


def flow_bonus(first: Sequence[str], second: Sequence[str]) -> float:
    """Bonuses for matching syllable counts and common -ing/-ed/-ly endings.

    The ending checks look only at the final phonemes with stress digits
    stripped, so ``IH0 NG`` counts as -ing and ``L IY`` must close the word.
    The browser analyser matched the literal stressless text ``IH NG`` anywhere
    in the string, which never fires on stress-marked dictionaries, and found
    ``L IY`` anywhere. Scores for -ing pairs are therefore 10 points higher
    here, enough to lift some pairs over the scheme threshold of 77.
    """

    bonus = 0.0
    if count_syllables(first) == count_syllables(second):
        bonus += _SYLLABLE_BONUS
    if _tail(first, 2) in _ING_ENDINGS and _tail(second, 2) in _ING_ENDINGS:
        bonus += _ING_BONUS
    if _tail(first, 1) == ("D",) and _tail(second, 1) == ("D",):
        bonus += _ED_BONUS
    if _tail(first, 2) == ("L", "IY") and _tail(second, 2) == ("L", "IY"):
        bonus += _LY_BONUS
    return bonus


def _traditional_match(first: RhymeKeys, second: RhymeKeys) -> Tuple[float, str]:
    for field_name, score in _KEY_MATCH_SCORES:
        if getattr(first, field_name) == getattr(second, field_name):
            return score, field_name
    return 0.0, "none"


def score_breakdown(
    first: Optional[RhymeKeys],
    second: Optional[RhymeKeys],
) -> SimilarityBreakdown:
    """Score how well two pronunciations rhyme, with each component exposed."""

    if first is None or second is None:
        return SimilarityBreakdown.empty()

    phonemes_a = first.phonemes
    phonemes_b = second.phonemes

    score, match_type = _traditional_match(first, second)
    traditional = score

    family = vowel_family_score(core_vowel(phonemes_a), core_vowel(phonemes_b))
    consonant = 0.0
    if family:
        # A strong key match is never overridden by the coarser vowel family.
        if score < _VOWEL_FAMILY_GUARD and family > score:
            score = family
            match_type = "vowel" if family == _SAME_VOWEL_SCORE else "vowel_family"
        consonant = _CONSONANT_WEIGHT * consonant_similarity(
            ending_consonants(phonemes_a),
            ending_consonants(phonemes_b),
        )

    flow = flow_bonus(phonemes_a, phonemes_b)
    total = min(MAX_SCORE, score + consonant + flow)

    return SimilarityBreakdown(
        total=total,
        traditional=traditional,
        vowel_family=family,
        consonant=consonant,
        flow=flow,
        match_type=match_type,
    )


def phonetic_similarity(first: Optional[RhymeKeys], second: Optional[RhymeKeys]) -> float:
    """Similarity score in ``[0, 100]``; zero when either side is ``None``."""

    return score_breakdown(first, second).total


__all__ = [
    "CONSONANT_GROUPS",
    "MAX_SCORE",
    "SimilarityBreakdown",
    "VOWEL_FAMILIES",
    "consonant_similarity",
    "core_vowel",
    "ending_consonants",
    "flow_bonus",
    "phonetic_similarity",
    "score_breakdown",
    "vowel_family_score",
]
