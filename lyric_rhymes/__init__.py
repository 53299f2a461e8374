"""Phonetic rhyme scheme and rhyme statistics analysis for song lyrics."""

from .core import (
    RhymeGroup,
    RhymeScheme,
    RhymeStatistics,
    Token,
    analyze_rhyme_scheme,
    build_rhyme_scheme,
    analyze_rhyme_statistics,
    combine_rhyme_statistics,
)

__version__ = "0.1.0"

__all__ = [
    "RhymeGroup",
    "RhymeScheme",
    "RhymeStatistics",
    "Token",
    "analyze_rhyme_scheme",
    "build_rhyme_scheme",
    "analyze_rhyme_statistics",
    "combine_rhyme_statistics",
]
