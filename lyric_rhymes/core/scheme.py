"""Rhyme scheme annotation: label every token that belongs to a rhyme group."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lyric_rhymes.utils.observability import get_logger

from .clustering import SCHEME_CLUSTER_THRESHOLD, SimilarityMatrix, cluster_rhymable_words
from .consolidation import consolidate_clusters
from .labels import LabelAssignment, assign_labels
from .statistics import RhymeGroup
from .tokenizer import Token, rhymable_tokens, tokenize_lyrics

_logger = get_logger(__name__).bind(component="rhyme_scheme")


@dataclass
class RhymeScheme:
    """Labelled token lines plus the groups behind the labels."""

    lines: List[List[Token]] = field(default_factory=list)
    groups: List[RhymeGroup] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "lines": [[token.as_dict() for token in line] for line in self.lines],
            "rhymeGroups": [group.as_dict() for group in self.groups],
        }


def _groups_from_assignments(assignments: List[LabelAssignment]) -> List[RhymeGroup]:
    # Listed in order of first appearance; a word repeated on its own is no group.
    ordered = sorted(assignments, key=lambda assignment: assignment.cluster.members[0])
    groups = []
    for assignment in ordered:
        group = RhymeGroup.from_words(
            assignment.cluster.unique_words(),
            rhyme_sound=assignment.cluster.rhyme_sound,
            label=assignment.label,
        )
        if group.count >= 2:
            groups.append(group)
    return groups


def build_rhyme_scheme(lyrics: Any, vocabulary: Optional[Mapping] = None) -> RhymeScheme:
    """Tokenize ``lyrics``, label rhyming tokens and summarise the groups.

    Tokens outside every group keep ``rhyme_group = None``. Each group
    carries its label and the representative rhyme sound of its cluster.
    """

    lines = tokenize_lyrics(lyrics, vocabulary)
    words = rhymable_tokens(lines)
    if len(words) < 2:
        return RhymeScheme(lines=lines)

    matrix = SimilarityMatrix.for_words(words)
    clusters = cluster_rhymable_words(words, matrix, threshold=SCHEME_CLUSTER_THRESHOLD)
    consolidated = consolidate_clusters(clusters, matrix)
    assignments = assign_labels(consolidated, matrix, words)

    for assignment in assignments:
        for member in assignment.cluster.members:
            words[member].rhyme_group = assignment.label

    _logger.debug(
        "Rhyme scheme labelled",
        context={
            "rhymable_words": len(words),
            "clusters": len(assignments),
            "labels": [
                {
                    "label": assignment.label,
                    "words": assignment.cluster.unique_words()[:3],
                    "size": assignment.cluster.size,
                    "priority": round(assignment.priority),
                }
                for assignment in assignments
            ],
        },
    )
    return RhymeScheme(lines=lines, groups=_groups_from_assignments(assignments))


def analyze_rhyme_scheme(lyrics: Any, vocabulary: Optional[Mapping] = None) -> List[List[Token]]:
    """Tokenize ``lyrics`` and set ``rhyme_group`` on words that rhyme together.

    Returns one token list per line; empty or non-string lyrics give ``[]``.
    """

    return build_rhyme_scheme(lyrics, vocabulary).lines


def render_scheme(lines: List[List[Token]]) -> str:
    """Plain-text rendering with ``[label]`` after each grouped word."""

    pieces = []
    for line in lines:
        for token in line:
            pieces.append(token.text)
            if token.rhyme_group is not None:
                pieces.append(f"[{token.rhyme_group}]")
    return "".join(pieces)


__all__ = ["RhymeScheme", "analyze_rhyme_scheme", "build_rhyme_scheme", "render_scheme"]
