"""Matching of directory entry names against compiled segments."""
from __future__ import annotations

from functools import lru_cache

from .models import Constant, Filter, Recurse, Segment


@lru_cache(maxsize=4096)
def fold(name: str) -> str:
    return name.casefold()


def matches(entry_name: str, segment: Segment, case_sensitive: bool = False) -> bool:
    match segment:
        case Constant(name=name):
            if case_sensitive:
                return entry_name == name
            return fold(entry_name) == fold(name)
        case Filter(regex=regex):
            # case folding is compiled into the regex flags
            return regex.fullmatch(entry_name) is not None
        case Recurse():
            return True
    raise TypeError(f"unexpected segment {segment!r}")
