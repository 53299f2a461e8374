"""Logging setup shared by the CLI and the analysis service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVEL_ENV = "LYRIC_RHYMES_LOG_LEVEL"
LOG_FORMAT_ENV = "LYRIC_RHYMES_LOG_FORMAT"
PACKAGE_LOGGER = "lyric_rhymes"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured_with: Optional["LoggingSettings"] = None


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a level; unknown names give ``default``."""

    if value is None:
        return default
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class LoggingSettings:
    level: int = logging.INFO
    format: str = DEFAULT_FORMAT

    @classmethod
    def resolve(
        cls,
        level: str | int | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "LoggingSettings":
        """Explicit ``level`` first, then the environment, then ``INFO``."""

        env = os.environ if environ is None else environ
        raw_level = level if level is not None else env.get(LOG_LEVEL_ENV)
        return cls(
            level=parse_level(raw_level),
            format=env.get(LOG_FORMAT_ENV) or DEFAULT_FORMAT,
        )


def configure_logging(level: Optional[str | int] = None, *, force: bool = False) -> int:
    """Install the root handler once and set the package logger level.

    Later calls only adjust the ``lyric_rhymes`` logger level unless
    ``force`` replaces the root handlers too. Returns the level in effect.
    """

    global _configured_with

    settings = LoggingSettings.resolve(level)
    if _configured_with is None or force:
        logging.basicConfig(level=settings.level, format=settings.format, force=force)
        _configured_with = settings
    elif level is None:
        return logging.getLogger(PACKAGE_LOGGER).getEffectiveLevel()

    logging.getLogger(PACKAGE_LOGGER).setLevel(settings.level)
    return settings.level


__all__ = [
    "DEFAULT_FORMAT",
    "LOG_FORMAT_ENV",
    "LOG_LEVEL_ENV",
    "LoggingSettings",
    "configure_logging",
    "parse_level",
]
