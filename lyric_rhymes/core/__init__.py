"""Core phonetic rhyme analysis for song lyrics."""

from .clustering import (
    DEFAULT_CLUSTER_THRESHOLD,
    SCHEME_CLUSTER_THRESHOLD,
    DisjointSet,
    RhymeCluster,
    SimilarityMatrix,
    cluster_rhymable_words,
)
from .consolidation import consolidate_clusters, passes_quality_filter
from .labels import LABEL_PALETTE, assign_labels
from .rhyme_keys import VOWEL_PHONEMES, RhymeKeys, extract_rhyme_keys
from .scheme import RhymeScheme, analyze_rhyme_scheme, build_rhyme_scheme, render_scheme
from .scorer import SimilarityBreakdown, phonetic_similarity, score_breakdown
from .statistics import (
    RhymeGroup,
    RhymeStatistics,
    analyze_rhyme_statistics,
    combine_rhyme_statistics,
)
from .tokenizer import STOP_WORDS, Token, clean_word, tokenize_lyrics
from .vocabulary import (
    VocabularyError,
    load_vocabulary,
    vocabulary_for_lyrics,
    vocabulary_for_words,
)

__all__ = [
    "DEFAULT_CLUSTER_THRESHOLD",
    "SCHEME_CLUSTER_THRESHOLD",
    "DisjointSet",
    "RhymeCluster",
    "SimilarityMatrix",
    "cluster_rhymable_words",
    "consolidate_clusters",
    "passes_quality_filter",
    "LABEL_PALETTE",
    "assign_labels",
    "VOWEL_PHONEMES",
    "RhymeKeys",
    "extract_rhyme_keys",
    "RhymeScheme",
    "analyze_rhyme_scheme",
    "build_rhyme_scheme",
    "render_scheme",
    "SimilarityBreakdown",
    "phonetic_similarity",
    "score_breakdown",
    "RhymeGroup",
    "RhymeStatistics",
    "analyze_rhyme_statistics",
    "combine_rhyme_statistics",
    "STOP_WORDS",
    "Token",
    "clean_word",
    "tokenize_lyrics",
    "VocabularyError",
    "load_vocabulary",
    "vocabulary_for_lyrics",
    "vocabulary_for_words",
]
