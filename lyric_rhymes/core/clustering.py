"""Greedy average-linkage clustering of rhymable words."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from lyric_rhymes.utils.observability import get_logger

from .rhyme_keys import RhymeKeys
from .scorer import MAX_SCORE, phonetic_similarity

DEFAULT_CLUSTER_THRESHOLD = 70.0
SCHEME_CLUSTER_THRESHOLD = 77.0

_logger = get_logger(__name__).bind(component="clusterer")


class RhymableWord(Protocol):
    clean: str
    rhyme_keys: Optional[RhymeKeys]


class SimilarityMatrix:
    """Symmetric pairwise similarity scores with 100 on the diagonal."""

    def __init__(self, keys: Sequence[Optional[RhymeKeys]]) -> None:
        size = len(keys)
        rows: List[List[float]] = [[0.0] * size for _ in range(size)]
        for i in range(size):
            rows[i][i] = MAX_SCORE
            for j in range(i + 1, size):
                score = phonetic_similarity(keys[i], keys[j])
                rows[i][j] = score
                rows[j][i] = score
        self._rows = rows

    @classmethod
    def for_words(cls, words: Sequence[RhymableWord]) -> "SimilarityMatrix":
        return cls([word.rhyme_keys for word in words])

    def __len__(self) -> int:
        return len(self._rows)

    def score(self, i: int, j: int) -> float:
        return self._rows[i][j]

    def mean_between(self, first: Iterable[int], second: Iterable[int]) -> float:
        """Mean score over every cross pair of the two index groups."""

        second = list(second)
        total = 0.0
        comparisons = 0
        for i in first:
            for j in second:
                total += self._rows[i][j]
                comparisons += 1
        return total / comparisons if comparisons else 0.0

    def mean_within(self, members: Sequence[int]) -> float:
        """Mean score over the distinct pairs inside one group."""

        total = 0.0
        comparisons = 0
        for position, i in enumerate(members):
            for j in members[position + 1:]:
                total += self._rows[i][j]
                comparisons += 1
        return total / comparisons if comparisons else 0.0


class DisjointSet:
    """Union-find over ``0..size-1`` whose roots are the smallest member."""

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))

    def find(self, item: int) -> int:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, first: int, second: int) -> int:
        root_a = self.find(first)
        root_b = self.find(second)
        if root_a == root_b:
            return root_a
        keep, absorbed = min(root_a, root_b), max(root_a, root_b)
        self._parent[absorbed] = keep
        return keep

    def groups(self) -> Dict[int, List[int]]:
        members: Dict[int, List[int]] = {}
        for item in range(len(self._parent)):
            members.setdefault(self.find(item), []).append(item)
        return members


@dataclass
class RhymeCluster:
    """Indices of words believed to rhyme, plus their representative keys.

    ``centroid`` is the keys of the cluster's earliest word and is not
    recomputed when clusters merge.
    """

    members: List[int]
    words: List[str]
    centroid: RhymeKeys
    rhyme_sound: str = ""

    def __post_init__(self) -> None:
        if not self.rhyme_sound:
            self.rhyme_sound = self.centroid.perfect

    @property
    def size(self) -> int:
        return len(self.members)

    def unique_words(self) -> List[str]:
        return list(dict.fromkeys(self.words))


def build_cluster(members: Sequence[int], words: Sequence[RhymableWord]) -> RhymeCluster:
    ordered = sorted(members)
    centroid = words[ordered[0]].rhyme_keys
    if centroid is None:
        raise ValueError("cluster members must carry rhyme keys")
    return RhymeCluster(
        members=ordered,
        words=[words[index].clean for index in ordered],
        centroid=centroid,
    )


def cluster_rhymable_words(
    words: Sequence[RhymableWord],
    matrix: Optional[SimilarityMatrix] = None,
    threshold: float = DEFAULT_CLUSTER_THRESHOLD,
) -> List[RhymeCluster]:
    """Merge the most similar pair of clusters until none reaches ``threshold``.

    Cluster similarity is the mean of all cross-member scores. Running sums
    of those scores are updated on each merge, so a pass costs O(k^2) for k
    live clusters and the whole run is O(n^3) in the worst case; fine for a
    song, too slow for a corpus of thousands of words.

    Only clusters with at least two members are returned, ordered by their
    earliest word.
    """

    count = len(words)
    if count < 2:
        return []
    if matrix is None:
        matrix = SimilarityMatrix.for_words(words)

    forest = DisjointSet(count)
    sizes = [1] * count
    sums = [[matrix.score(i, j) for j in range(count)] for i in range(count)]
    live = list(range(count))
    merges = 0

    while len(live) > 1:
        best_pair = None
        best_mean = 0.0
        for position, root_a in enumerate(live):
            row = sums[root_a]
            size_a = sizes[root_a]
            for root_b in live[position + 1:]:
                mean = row[root_b] / (size_a * sizes[root_b])
                if mean >= threshold and (best_pair is None or mean > best_mean):
                    best_pair = (root_a, root_b)
                    best_mean = mean
        if best_pair is None:
            break

        root_a, root_b = best_pair
        keep = forest.union(root_a, root_b)
        absorbed = root_b if keep == root_a else root_a
        for other in live:
            if other in (root_a, root_b):
                continue
            merged = sums[keep][other] + sums[absorbed][other]
            sums[keep][other] = merged
            sums[other][keep] = merged
        sizes[keep] += sizes[absorbed]
        live.remove(absorbed)
        merges += 1

    clusters = [
        build_cluster(members, words)
        for members in forest.groups().values()
        if len(members) >= 2
    ]
    clusters.sort(key=lambda cluster: cluster.members[0])

    _logger.debug(
        "Clustering finished",
        context={
            "words": count,
            "threshold": threshold,
            "merges": merges,
            "clusters": len(clusters),
        },
    )
    return clusters


__all__ = [
    "DEFAULT_CLUSTER_THRESHOLD",
    "SCHEME_CLUSTER_THRESHOLD",
    "DisjointSet",
    "RhymableWord",
    "RhymeCluster",
    "SimilarityMatrix",
    "build_cluster",
    "cluster_rhymable_words",
]
