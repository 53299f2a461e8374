"""Stable display labels for consolidated rhyme clusters."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .clustering import RhymableWord, RhymeCluster, SimilarityMatrix
from .rhyme_keys import count_syllables

LABEL_PALETTE: Tuple[str, ...] = tuple(string.ascii_uppercase) + tuple(
    str(number) for number in range(1, 21)
)


@dataclass(frozen=True)
class LabelAssignment:
    label: str
    cluster: RhymeCluster
    priority: float


def diversity_bonus(cluster: RhymeCluster, words: Sequence[RhymableWord]) -> float:
    """Reward clusters mixing words of different syllable counts."""

    if cluster.size < 2:
        return 0.0

    syllables = []
    for member in cluster.members:
        keys = words[member].rhyme_keys
        syllables.append(count_syllables(keys.phonemes) if keys else 1)

    bonus = min(len(set(syllables)) * 3, 15)
    if any(count <= 2 for count in syllables) and any(count >= 3 for count in syllables):
        bonus += 5
    return float(bonus)


def cluster_priority(
    cluster: RhymeCluster,
    matrix: SimilarityMatrix,
    words: Sequence[RhymableWord],
) -> float:
    size_score = min(cluster.size * 10, 50)
    similarity_score = matrix.mean_within(cluster.members) * 0.3
    return size_score + similarity_score + diversity_bonus(cluster, words)


def assign_labels(
    clusters: Sequence[RhymeCluster],
    matrix: SimilarityMatrix,
    words: Sequence[RhymableWord],
) -> List[LabelAssignment]:
    """Label clusters in priority order, cycling the palette past 46 clusters."""

    scored = [
        (cluster_priority(cluster, matrix, words), cluster) for cluster in clusters
    ]
    scored.sort(key=lambda item: -item[0])
    return [
        LabelAssignment(
            label=LABEL_PALETTE[position % len(LABEL_PALETTE)],
            cluster=cluster,
            priority=priority,
        )
        for position, (priority, cluster) in enumerate(scored)
    ]


__all__ = [
    "LABEL_PALETTE",
    "LabelAssignment",
    "assign_labels",
    "cluster_priority",
    "diversity_bonus",
]
