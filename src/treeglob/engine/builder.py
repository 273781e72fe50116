"""Builder and compiled search facade."""
from __future__ import annotations

import logging as logmod
from collections.abc import Iterator
from dataclasses import replace

from .autorecurse import autorecurse
from .compiler import compile_pattern
from .matcher import fold
from .models import CompiledPattern, LinkMode, MatchResult, SearchOptions, Segment
from .traversal import explore

logging = logmod.getLogger(__name__)


class GlobSearch:
    """A compiled pattern with its options, ready to be explored any number of times."""

    def __init__(self, pattern: CompiledPattern, options: SearchOptions) -> None:
        self.pattern = pattern
        self.options = options

    @property
    def root(self) -> str:
        return self.pattern.root

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self.pattern.segments

    @property
    def is_constant(self) -> bool:
        """True when the pattern names a single path and involves no matching."""
        return self.pattern.is_constant

    def explore(self) -> Iterator[MatchResult]:
        return explore(self.pattern, self.options)

    def __repr__(self) -> str:
        return f"GlobSearch(root={self.root!r}, segments={len(self.segments)}, options={self.options!r})"


class GlobBuilder:
    """Accumulates search options for a pattern; every setter returns the builder."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._options = SearchOptions()

    @property
    def options(self) -> SearchOptions:
        return self._options

    def case_sensitive(self, flag: bool = True) -> GlobBuilder:
        self._options = replace(self._options, case_sensitive=flag)
        return self

    def autorecurse(self, flag: bool = True) -> GlobBuilder:
        self._options = replace(self._options, autorecurse=flag)
        return self

    def add_ignore_dir(self, name: str) -> GlobBuilder:
        """Skip folders with this name (no path, no wildcard, any case)."""
        ignored = self._options.ignore_dirs | {fold(name)}
        self._options = replace(self._options, ignore_dirs=ignored)
        return self

    def link_mode(self, mode: LinkMode | str | int) -> GlobBuilder:
        self._options = replace(self._options, link_mode=LinkMode.parse(mode))
        return self

    def max_depth(self, depth: int) -> GlobBuilder:
        if depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {depth}")
        self._options = replace(self._options, max_depth=depth)
        return self

    def no_glob_filtering(self, flag: bool = True) -> GlobBuilder:
        self._options = replace(self._options, no_glob_filtering=flag)
        return self

    def compile(self) -> GlobSearch:
        """Compile the pattern; raises GlobError or RegexError for invalid patterns."""
        compiled = compile_pattern(self.pattern, self._options.case_sensitive)
        compiled = autorecurse(compiled, self._options.autorecurse)
        return GlobSearch(compiled, self._options)

    def __repr__(self) -> str:
        return f"GlobBuilder(pattern={self.pattern!r}, options={self._options!r})"


def new(pattern: str) -> GlobBuilder:
    return GlobBuilder(pattern)


def build(pattern: str) -> GlobSearch:
    """Compile ``pattern`` with the default tool settings.

    Case-insensitive, autorecurse on, links reported but not followed,
    unlimited depth and default noise folder filtering.
    """
    return new(pattern).autorecurse().compile()
