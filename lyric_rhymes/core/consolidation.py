"""Post-processing of rhyme clusters: merging, quality filtering and ranking."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from lyric_rhymes.utils.observability import get_logger

from .clustering import RhymeCluster, SimilarityMatrix
from .rhyme_keys import base_phoneme
from .scorer import phonetic_similarity

CENTROID_MERGE_THRESHOLD = 95.0
STATISTICS_GROUP_LIMIT = 15

# Word-ending combinations that rhyme even though their spelling differs.
_CROSS_PATTERN_ENDINGS: Tuple[Tuple[str, str], ...] = (("m", "nt"),)
_CROSS_PATTERN_FRAGMENTS: Tuple[Tuple[str, str], ...] = (("oom", "ew"), ("est", "ed"))
_KNOWN_FALSE_PAIRS = frozenset({frozenset({"cataclysm", "environment"})})
_MAX_LENGTH_GAP = 3

_logger = get_logger(__name__).bind(component="consolidator")


def compatible_endings(first: RhymeCluster, second: RhymeCluster) -> bool:
    """True when both centroids end in the same phoneme, stress aside."""

    return base_phoneme(first.centroid.ending) == base_phoneme(second.centroid.ending)


def should_merge(
    first: RhymeCluster,
    second: RhymeCluster,
    min_similarity: float = CENTROID_MERGE_THRESHOLD,
) -> bool:
    if set(first.words) & set(second.words):
        return True
    if phonetic_similarity(first.centroid, second.centroid) < min_similarity:
        return False
    return first.rhyme_sound == second.rhyme_sound or compatible_endings(first, second)


def select_rhyme_sound(sounds: Sequence[str]) -> str:
    """Pick the most general pattern: at most two phonemes first, then fewest."""

    def _key(sound: str) -> Tuple[bool, int]:
        length = len(sound.split())
        return (length > 2, length)

    return sorted(sounds, key=_key)[0]


def merge_clusters(first: RhymeCluster, second: RhymeCluster) -> RhymeCluster:
    """Union of both clusters; the centroid stays that of ``first``."""

    by_member: Dict[int, str] = dict(zip(first.members, first.words))
    for member, word in zip(second.members, second.words):
        by_member.setdefault(member, word)
    members = sorted(by_member)
    return RhymeCluster(
        members=members,
        words=[by_member[member] for member in members],
        centroid=first.centroid,
        rhyme_sound=select_rhyme_sound([first.rhyme_sound, second.rhyme_sound]),
    )


def merge_overlapping(
    clusters: Sequence[RhymeCluster],
    min_similarity: float = CENTROID_MERGE_THRESHOLD,
) -> List[RhymeCluster]:
    """Merge cluster pairs until no pair qualifies."""

    working = list(clusters)
    changed = True
    while changed:
        changed = False
        for i in range(len(working)):
            for j in range(i + 1, len(working)):
                if should_merge(working[i], working[j], min_similarity):
                    working[i] = merge_clusters(working[i], working[j])
                    del working[j]
                    changed = True
                    break
            if changed:
                break
    return working


def _shares_ending(first: str, second: str) -> bool:
    if first[-2:] == second[-2:] or first[-1:] == second[-1:]:
        return True
    for left, right in _CROSS_PATTERN_ENDINGS:
        if (first.endswith(left) and second.endswith(right)) or (
            first.endswith(right) and second.endswith(left)
        ):
            return True
    for left, right in _CROSS_PATTERN_FRAGMENTS:
        if (left in first and right in second) or (left in second and right in first):
            return True
    return False


def passes_quality_filter(cluster: RhymeCluster) -> bool:
    """Reject two-word groups whose spelling gives no hint of a shared ending."""

    if cluster.size < 2:
        return False
    if cluster.size > 2:
        return True

    first, second = (word.lower() for word in cluster.words)
    if abs(len(first) - len(second)) > _MAX_LENGTH_GAP:
        return False
    if frozenset({first, second}) in _KNOWN_FALSE_PAIRS:
        return False
    return _shares_ending(first, second)


def mean_internal_similarity(cluster: RhymeCluster, matrix: SimilarityMatrix) -> float:
    return matrix.mean_within(cluster.members)


def rank_clusters(
    clusters: Sequence[RhymeCluster],
    matrix: SimilarityMatrix,
) -> List[RhymeCluster]:
    """Largest clusters first; ties go to the more cohesive cluster."""

    return sorted(
        clusters,
        key=lambda cluster: (-cluster.size, -mean_internal_similarity(cluster, matrix)),
    )


def consolidate_clusters(
    clusters: Sequence[RhymeCluster],
    matrix: SimilarityMatrix,
    *,
    limit: Optional[int] = None,
    min_similarity: float = CENTROID_MERGE_THRESHOLD,
) -> List[RhymeCluster]:
    """Merge duplicates, drop weak pairs, rank, and optionally cap the result."""

    merged = merge_overlapping(clusters, min_similarity)
    kept = [cluster for cluster in merged if passes_quality_filter(cluster)]
    ranked = rank_clusters(kept, matrix)
    if limit is not None:
        ranked = ranked[:limit]

    _logger.debug(
        "Consolidated rhyme clusters",
        context={
            "input": len(clusters),
            "merged": len(merged),
            "kept": len(ranked),
            "dropped": len(merged) - len(kept),
        },
    )
    return ranked


__all__ = [
    "CENTROID_MERGE_THRESHOLD",
    "STATISTICS_GROUP_LIMIT",
    "compatible_endings",
    "consolidate_clusters",
    "mean_internal_similarity",
    "merge_clusters",
    "merge_overlapping",
    "passes_quality_filter",
    "rank_clusters",
    "select_rhyme_sound",
    "should_merge",
]
