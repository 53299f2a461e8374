#!/usr/bin/env python3
"""CLI helper that prints the rhyme scheme and rhyme statistics of a lyrics file."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, Sequence

from lyric_rhymes.app.services.analysis_service import RhymeAnalysisService
from lyric_rhymes.core import (
    RhymeStatistics,
    VocabularyError,
    load_vocabulary,
    render_scheme,
    vocabulary_for_lyrics,
)
from lyric_rhymes.utils.logging_config import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Highlight the rhyme scheme of a song and summarise its rhymes."
    )
    parser.add_argument("lyrics", help="Path to a UTF-8 lyrics file ('-' reads stdin).")
    parser.add_argument(
        "--vocabulary",
        help=(
            "Word to phoneme map: a JSON object or a CMU dictionary file. "
            "Defaults to the CMU dictionary bundled with pronouncing."
        ),
    )
    parser.add_argument(
        "--format",
        choices=("scheme", "stats", "json"),
        default="scheme",
        help="Output the labelled lyrics, the statistics summary, or both as JSON.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (overrides LYRIC_RHYMES_LOG_LEVEL).",
    )
    return parser


def _read_lyrics(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _format_statistics(statistics: RhymeStatistics) -> str:
    lines = [
        f"Rhymable words: {statistics.total_rhymable_words}",
        f"Perfect rhymes: {statistics.perfect_rhymes}",
        f"Near rhymes:    {statistics.near_rhymes}",
        f"Sounds like:    {statistics.sounds_like}",
        f"Internal:       {statistics.internal_rhymes}",
        f"Rhyme density:  {statistics.rhyme_density:.1f}%",
    ]
    for group in statistics.rhyme_groups:
        lines.append(f"  /{group.rhyme_sound}/ ({group.count}): {', '.join(group.words)}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        lyrics = _read_lyrics(args.lyrics)
    except OSError as exc:
        parser.error(f"cannot read lyrics: {exc}")

    vocabulary: Dict[str, str]
    if args.vocabulary:
        try:
            vocabulary = load_vocabulary(args.vocabulary)
        except VocabularyError as exc:
            parser.error(str(exc))
    else:
        vocabulary = vocabulary_for_lyrics(lyrics)

    service = RhymeAnalysisService(vocabulary)

    if args.format == "json":
        json.dump(service.analyze(lyrics), sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
        return 0

    if args.format == "stats":
        print(_format_statistics(service.analyze_statistics(lyrics)))
        return 0

    scheme = service.rhyme_scheme(lyrics)
    print(render_scheme(scheme.lines))
    for group in scheme.groups:
        print(f"[{group.label}] /{group.rhyme_sound}/: {', '.join(group.words)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
