"""Data models shared across the treeglob engine."""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from pathlib import Path

# Folder names skipped during every search unless glob filtering is disabled.
NOISE_DIRS: frozenset[str] = frozenset({"$recycle.bin", "system volume information", ".git"})


class LinkMode(str, enum.Enum):
    IGNORE = "ignore"
    REPORT_ONLY = "report-only"
    FOLLOW = "follow"

    @classmethod
    def parse(cls, value: LinkMode | str | int) -> LinkMode:
        """Accept a member, its value, or the numeric codes 0, 1 and 2."""
        if isinstance(value, LinkMode):
            return value
        codes = {0: cls.IGNORE, 1: cls.REPORT_ONLY, 2: cls.FOLLOW}
        if isinstance(value, int):
            if value in codes:
                return codes[value]
        elif isinstance(value, str) and value.strip().isdigit():
            return cls.parse(int(value))
        elif isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"invalid link mode: {value!r} (expected 0, 1 or 2)")


@dataclass(frozen=True)
class Constant:
    name: str


@dataclass(frozen=True)
class Filter:
    regex: re.Pattern[str]

    @property
    def source(self) -> str:
        return self.regex.pattern


@dataclass(frozen=True)
class Recurse:
    pass


Segment = Constant | Filter | Recurse


@dataclass(frozen=True)
class CompiledPattern:
    """Root prefix plus the ordered segments matched below it."""

    root: str
    segments: tuple[Segment, ...] = ()
    case_sensitive: bool = False

    @property
    def is_constant(self) -> bool:
        """True when the pattern is a plain path with nothing left to match."""
        return not self.segments

    @property
    def has_recurse(self) -> bool:
        return any(isinstance(segment, Recurse) for segment in self.segments)


@dataclass(frozen=True)
class SearchOptions:
    """Settings applied to one search.

    max_depth counts the directory levels a ``**`` segment may span, its
    starting directory included: 1 keeps the search in that directory, 2 adds
    its immediate children, and 0 removes the limit.

    ignore_dirs holds case-folded folder names (no path, no wildcard). Those
    folders are never matched nor descended into, and neither are the
    NOISE_DIRS names unless no_glob_filtering is set.
    """

    case_sensitive: bool = False
    autorecurse: bool = False
    link_mode: LinkMode = LinkMode.REPORT_ONLY
    max_depth: int = 0
    ignore_dirs: frozenset[str] = field(default_factory=frozenset)
    no_glob_filtering: bool = False

    def pruned_names(self) -> frozenset[str]:
        if self.no_glob_filtering:
            return self.ignore_dirs
        return self.ignore_dirs | NOISE_DIRS


@dataclass(frozen=True)
class FileMatch:
    path: Path


@dataclass(frozen=True)
class DirMatch:
    path: Path


@dataclass(frozen=True)
class ErrorMatch:
    message: str


MatchResult = FileMatch | DirMatch | ErrorMatch
