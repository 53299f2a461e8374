"""Per-song rhyme counts, density and top rhyme groups."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from lyric_rhymes.utils.observability import get_logger

from .clustering import RhymeCluster, SimilarityMatrix
from .consolidation import STATISTICS_GROUP_LIMIT, consolidate_clusters
from .rhyme_keys import RhymeKeys
from .scorer import phonetic_similarity
from .tokenizer import STOP_WORDS, tokenize_lyrics

END_WORD_MIN_LENGTH = 3
INTERNAL_WORD_MIN_LENGTH = 4
CROSS_WORD_MIN_LENGTH = 5
INTERNAL_RHYME_THRESHOLD = 75.0

# End word against end word.
END_PERFECT_THRESHOLD = 82.0
END_NEAR_THRESHOLD = 80.0
END_SOUNDS_LIKE_THRESHOLD = 78.0

# End word against a prominent internal word. These looser bounds differ
# from the end-word pass and are kept as they are until product decides.
CROSS_PERFECT_THRESHOLD = 82.0
CROSS_NEAR_THRESHOLD = 68.0
CROSS_SOUNDS_LIKE_THRESHOLD = 55.0
CROSS_END_WORD_LIMIT = 20
CROSS_INTERNAL_WORD_LIMIT = 10

_LETTER_PATTERN = re.compile(r"[a-zA-Z]")

_logger = get_logger(__name__).bind(component="statistics")


@dataclass
class RhymeGroup:
    """A reported set of two or more distinct rhyming words."""

    words: List[str]
    count: int
    rhyme_sound: str = ""
    label: Optional[str] = None

    @classmethod
    def from_words(
        cls,
        words: Iterable[str],
        *,
        rhyme_sound: str = "",
        label: Optional[str] = None,
    ) -> "RhymeGroup":
        unique = sorted(set(words))
        return cls(words=unique, count=len(unique), rhyme_sound=rhyme_sound, label=label)

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "rhymeSound": self.rhyme_sound,
            "words": list(self.words),
            "count": self.count,
        }
        if self.label is not None:
            payload["label"] = self.label
        return payload


@dataclass
class RhymeStatistics:
    total_rhymable_words: int = 0
    perfect_rhymes: int = 0
    near_rhymes: int = 0
    sounds_like: int = 0
    internal_rhymes: int = 0
    rhyme_density: float = 0.0
    rhyme_groups: List[RhymeGroup] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalRhymableWords": self.total_rhymable_words,
            "perfectRhymes": self.perfect_rhymes,
            "nearRhymes": self.near_rhymes,
            "soundsLike": self.sounds_like,
            "internalRhymes": self.internal_rhymes,
            "rhymeDensity": self.rhyme_density,
            "rhymeGroups": [group.as_dict() for group in self.rhyme_groups],
        }


@dataclass
class LineWord:
    clean: str
    rhyme_keys: Optional[RhymeKeys]
    line_index: int
    is_end_word: bool


def _round_half_up(value: float, digits: int = 1) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def count_words(lyrics: str) -> int:
    """Whitespace-separated chunks containing at least one ASCII letter."""

    return sum(1 for chunk in lyrics.lower().split() if _LETTER_PATTERN.search(chunk))


def collect_line_words(
    lyrics: str,
    vocabulary: Mapping,
) -> Tuple[List[LineWord], List[List[LineWord]]]:
    """Return end-of-line words and, per line, the rhymable internal words."""

    end_words: List[LineWord] = []
    internal_by_line: List[List[LineWord]] = []

    for line in tokenize_lyrics(lyrics, vocabulary):
        candidates = [
            token
            for token in line
            if len(token.clean) >= END_WORD_MIN_LENGTH and token.clean not in STOP_WORDS
        ]
        if not candidates:
            continue

        last = candidates[-1]
        if last.rhyme_keys is not None:
            end_words.append(LineWord(last.clean, last.rhyme_keys, last.line_index, True))

        internal_by_line.append(
            [
                LineWord(token.clean, token.rhyme_keys, token.line_index, False)
                for token in candidates[:-1]
                if token.rhyme_keys is not None
                and len(token.clean) >= INTERNAL_WORD_MIN_LENGTH
            ]
        )

    return end_words, internal_by_line


def count_internal_rhymes(words: List[LineWord]) -> int:
    count = 0
    for i, first in enumerate(words):
        for second in words[i + 1:]:
            if phonetic_similarity(first.rhyme_keys, second.rhyme_keys) >= INTERNAL_RHYME_THRESHOLD:
                count += 1
    return count


def _pair_key(first: str, second: str) -> Tuple[str, str]:
    return (first, second) if first <= second else (second, first)


def _classify(score: float, perfect: float, near: float, sounds_like: float) -> Optional[str]:
    if score >= perfect:
        return "perfect"
    if score >= near:
        return "near"
    if score >= sounds_like:
        return "sounds_like"
    return None


def _groups_to_clusters(
    groups: Dict[str, Dict[str, int]],
    end_words: List[LineWord],
    centroids: Dict[str, RhymeKeys],
) -> List[RhymeCluster]:
    clusters = []
    for sound, members_by_word in groups.items():
        if len(members_by_word) < 2:
            continue
        members = sorted(members_by_word.values())
        clusters.append(
            RhymeCluster(
                members=members,
                words=[end_words[member].clean for member in members],
                centroid=centroids[sound],
                rhyme_sound=sound,
            )
        )
    return clusters


def analyze_rhyme_statistics(lyrics: Any, vocabulary: Optional[Mapping] = None) -> RhymeStatistics:
    """Count perfect, near, sounds-like and internal rhymes in one song.

    End-of-line words are compared pairwise across lines; internal words are
    compared within their own line; a bounded cross pass compares early end
    words with prominent internal words. Perfect end rhymes are grouped by
    rhyme sound and the groups are consolidated like clustered groups.
    """

    if not isinstance(lyrics, str) or not lyrics.strip():
        return RhymeStatistics()
    if not isinstance(vocabulary, Mapping):
        vocabulary = {}

    end_words, internal_by_line = collect_line_words(lyrics, vocabulary)
    internal_rhymes = sum(count_internal_rhymes(words) for words in internal_by_line)
    internal_words = [word for words in internal_by_line for word in words]
    total_rhymable = len(end_words) + len(internal_words)

    if total_rhymable == 0:
        return RhymeStatistics(internal_rhymes=internal_rhymes)

    counts = {"perfect": 0, "near": 0, "sounds_like": 0}
    seen_pairs: Set[Tuple[str, str]] = set()
    groups: Dict[str, Dict[str, int]] = {}
    centroids: Dict[str, RhymeKeys] = {}
    matrix = SimilarityMatrix.for_words(end_words)
    first_index: Dict[str, int] = {}
    for index, word in enumerate(end_words):
        first_index.setdefault(word.clean, index)

    for i, first in enumerate(end_words):
        for j in range(i + 1, len(end_words)):
            second = end_words[j]
            if first.clean == second.clean:
                continue
            key = _pair_key(first.clean, second.clean)
            if key in seen_pairs:
                continue
            seen_pairs.add(key)

            kind = _classify(
                matrix.score(i, j),
                END_PERFECT_THRESHOLD,
                END_NEAR_THRESHOLD,
                END_SOUNDS_LIKE_THRESHOLD,
            )
            if kind is None:
                continue
            counts[kind] += 1
            if kind == "perfect":
                sound = first.rhyme_keys.perfect
                members = groups.setdefault(sound, {})
                centroids.setdefault(sound, first.rhyme_keys)
                members.setdefault(first.clean, first_index[first.clean])
                members.setdefault(second.clean, first_index[second.clean])

    prominent = [word for word in internal_words if len(word.clean) >= CROSS_WORD_MIN_LENGTH]
    for end_word in end_words[:CROSS_END_WORD_LIMIT]:
        for internal_word in prominent[:CROSS_INTERNAL_WORD_LIMIT]:
            if end_word.clean == internal_word.clean:
                continue
            key = _pair_key(end_word.clean, internal_word.clean)
            if key in seen_pairs:
                continue
            seen_pairs.add(key)

            kind = _classify(
                phonetic_similarity(end_word.rhyme_keys, internal_word.rhyme_keys),
                CROSS_PERFECT_THRESHOLD,
                CROSS_NEAR_THRESHOLD,
                CROSS_SOUNDS_LIKE_THRESHOLD,
            )
            if kind is not None:
                counts[kind] += 1

    clusters = consolidate_clusters(
        _groups_to_clusters(groups, end_words, centroids),
        matrix,
        limit=STATISTICS_GROUP_LIMIT,
    )
    rhyme_groups = [
        RhymeGroup.from_words(cluster.words, rhyme_sound=cluster.rhyme_sound)
        for cluster in clusters
    ]

    total_words = count_words(lyrics)
    density = total_rhymable / total_words * 100 if total_words else 0.0

    statistics = RhymeStatistics(
        total_rhymable_words=total_rhymable,
        perfect_rhymes=counts["perfect"],
        near_rhymes=counts["near"],
        sounds_like=counts["sounds_like"],
        internal_rhymes=internal_rhymes,
        rhyme_density=_round_half_up(density),
        rhyme_groups=[group for group in rhyme_groups if group.count >= 2],
    )
    _logger.debug(
        "Rhyme statistics computed",
        context={
            "end_words": len(end_words),
            "internal_words": len(internal_words),
            "groups": len(statistics.rhyme_groups),
        },
    )
    return statistics


def combine_rhyme_statistics(songs: Iterable[RhymeStatistics]) -> RhymeStatistics:
    """Sum counts over songs, concatenate their groups and average density."""

    combined = RhymeStatistics()
    song_count = 0
    density_total = 0.0
    for song in songs:
        song_count += 1
        combined.total_rhymable_words += song.total_rhymable_words
        combined.perfect_rhymes += song.perfect_rhymes
        combined.near_rhymes += song.near_rhymes
        combined.sounds_like += song.sounds_like
        combined.internal_rhymes += song.internal_rhymes
        combined.rhyme_groups.extend(song.rhyme_groups)
        density_total += song.rhyme_density

    if song_count:
        combined.rhyme_density = density_total / song_count
    return combined


__all__ = [
    "LineWord",
    "RhymeGroup",
    "RhymeStatistics",
    "analyze_rhyme_statistics",
    "collect_line_words",
    "combine_rhyme_statistics",
    "count_internal_rhymes",
    "count_words",
]
