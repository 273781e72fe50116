"""Breadth-first filesystem walk driven by compiled segments.

The walk never recurses on the call stack: pending directories sit in a FIFO
queue as ``(path, segment index, recursion depth)`` items, so results come out
level by level, nearest first. Every directory is read with a single
``os.scandir`` whose handle is closed before anything is yielded, which lets
callers abandon the iterator at any point.
"""
from __future__ import annotations

import logging as logmod
import os
import stat
from collections import deque
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import NamedTuple

from .matcher import fold, matches
from .models import (
    CompiledPattern,
    Constant,
    DirMatch,
    ErrorMatch,
    FileMatch,
    Filter,
    LinkMode,
    MatchResult,
    Recurse,
    SearchOptions,
    Segment,
)

logging = logmod.getLogger(__name__)


class _Entry(NamedTuple):
    path: Path
    is_dir: bool
    is_link: bool


class _WorkItem(NamedTuple):
    path: Path
    index: int
    depth: int = 0
    is_dir: bool = True
    # real paths of the link targets followed to reach this directory
    trail: tuple[str, ...] = ()


def _list_dir(path: Path) -> tuple[list[os.DirEntry[str]], OSError | ValueError | None]:
    """Read a whole directory, keeping the entries read before a failure."""
    entries: list[os.DirEntry[str]] = []
    try:
        with os.scandir(path) as iterator:
            for dirent in iterator:
                entries.append(dirent)
    except (OSError, ValueError) as err:
        entries.sort(key=lambda dirent: dirent.name)
        return entries, err
    entries.sort(key=lambda dirent: dirent.name)
    return entries, None


def _link_target(path: Path) -> _Entry | None:
    info = os.stat(path)
    if stat.S_ISDIR(info.st_mode):
        return _Entry(path, True, True)
    if stat.S_ISREG(info.st_mode):
        return _Entry(path, False, True)
    return None


def _classify_path(path: Path, link_mode: LinkMode) -> _Entry | None:
    """Type the entry at ``path`` without listing its parent; missing entries raise OSError."""
    info = os.lstat(path)
    if stat.S_ISLNK(info.st_mode) or os.path.isjunction(path):
        if link_mode is LinkMode.IGNORE:
            return None
        return _link_target(path)
    if stat.S_ISDIR(info.st_mode):
        return _Entry(path, True, False)
    if stat.S_ISREG(info.st_mode):
        return _Entry(path, False, False)
    return None


def _failure(action: str, path: Path, err: OSError | ValueError) -> ErrorMatch:
    logging.debug("%s %s: %s", action, path, err)
    return ErrorMatch(f"{action} {path}: {err}")


class _Cursor:
    """State of a single traversal; never shared between iterations."""

    def __init__(self, compiled: CompiledPattern, options: SearchOptions) -> None:
        self.segments: Sequence[Segment] = compiled.segments
        self.case_sensitive = compiled.case_sensitive
        self.link_mode = options.link_mode
        self.max_depth = options.max_depth
        self.pruned = options.pruned_names()
        self.queue: deque[_WorkItem] = deque()

    def walk(self, root: Path) -> Iterator[MatchResult]:
        self.queue.append(_WorkItem(root, 0))
        while self.queue:
            item = self.queue.popleft()
            if item.index == len(self.segments):
                yield DirMatch(item.path) if item.is_dir else FileMatch(item.path)
                continue
            match self.segments[item.index]:
                case Constant(name=name):
                    yield from self._constant(item, name)
                case Filter() as segment:
                    entries, error = _list_dir(item.path)
                    if error is not None:
                        yield _failure("Error reading dir", item.path, error)
                    yield from self._filter(item, segment, entries)
                case Recurse():
                    yield from self._recurse(item)

    def _classify(self, dirent: os.DirEntry[str]) -> _Entry | None:
        """Type a directory entry, following links; dangling links raise OSError."""
        path = Path(dirent.path)
        if dirent.is_symlink() or dirent.is_junction():
            if self.link_mode is LinkMode.IGNORE:
                return None
            return _link_target(path)
        if dirent.is_dir(follow_symlinks=False):
            return _Entry(path, True, False)
        if dirent.is_file(follow_symlinks=False):
            return _Entry(path, False, False)
        return None

    def _constant(self, item: _WorkItem, name: str) -> Iterator[MatchResult]:
        path = item.path / name
        try:
            entry = _classify_path(path, self.link_mode)
        except (FileNotFoundError, NotADirectoryError):
            if not self.case_sensitive:
                # the filesystem may be case sensitive even if the search is not
                entries, error = _list_dir(item.path)
                if error is not None:
                    yield _failure("Error reading dir", item.path, error)
                yield from self._filter(item, Constant(name), entries)
            return
        except (OSError, ValueError) as err:
            yield _failure("Error reading entry", path, err)
            return
        if entry is not None:
            self._admit(entry, item)

    def _filter(self, item: _WorkItem, segment: Segment, entries: list[os.DirEntry[str]]) -> Iterator[MatchResult]:
        for dirent in entries:
            if not matches(dirent.name, segment, self.case_sensitive):
                continue
            try:
                entry = self._classify(dirent)
            except (OSError, ValueError) as err:
                yield _failure("Error reading entry", Path(dirent.path), err)
                continue
            if entry is not None:
                self._admit(entry, item)

    def _recurse(self, item: _WorkItem) -> Iterator[MatchResult]:
        following = self.segments[item.index + 1]
        deeper = self.max_depth == 0 or item.depth + 1 < self.max_depth
        if not deeper and not isinstance(following, Filter):
            self.queue.append(item._replace(index=item.index + 1))
            return

        entries, error = _list_dir(item.path)
        if error is not None:
            yield _failure("Error reading dir", item.path, error)
        # zero intervening levels: the directory itself faces the next segment
        if isinstance(following, Filter):
            yield from self._filter(item._replace(index=item.index + 1), following, entries)
        else:
            self.queue.append(item._replace(index=item.index + 1))
        if not deeper:
            return

        for dirent in entries:
            try:
                entry = self._classify(dirent)
            except (OSError, ValueError) as err:
                # dangling links cannot be descended; matching segments report them
                logging.debug("Not descending into %s: %s", dirent.path, err)
                continue
            if entry is None or not entry.is_dir or self._is_pruned(entry):
                continue
            trail = self._descent_trail(entry, item)
            if trail is not None:
                self.queue.append(_WorkItem(entry.path, item.index, item.depth + 1, trail=trail))

    def _is_pruned(self, entry: _Entry) -> bool:
        return entry.is_dir and fold(entry.path.name) in self.pruned

    def _admit(self, entry: _Entry, item: _WorkItem) -> None:
        """Queue an entry that satisfied the segment at ``item.index``."""
        if self._is_pruned(entry):
            return
        index = item.index + 1
        if index == len(self.segments):
            self.queue.append(_WorkItem(entry.path, index, is_dir=entry.is_dir))
        elif entry.is_dir:
            trail = self._descent_trail(entry, item)
            if trail is not None:
                self.queue.append(_WorkItem(entry.path, index, trail=trail))

    def _descent_trail(self, entry: _Entry, item: _WorkItem) -> tuple[str, ...] | None:
        """Trail for a directory about to be entered, or None if it must not be."""
        if not entry.is_link:
            return item.trail
        if self.link_mode is not LinkMode.FOLLOW:
            return None
        target = os.path.realpath(entry.path)
        if target in item.trail or Path(os.path.realpath(item.path)).is_relative_to(target):
            logging.debug("Not following %s: loops back to %s", entry.path, target)
            return None
        return item.trail + (target,)


def explore(compiled: CompiledPattern, options: SearchOptions) -> Iterator[MatchResult]:
    """Lazily yield the files, directories and entry errors matching ``compiled``.

    Each call starts an independent walk; the returned iterator is single-pass.
    """
    root = Path(compiled.root)
    logging.debug("Exploring %s with %d segment(s), %s", root, len(compiled.segments), options)
    if compiled.is_constant:
        # the root is named explicitly, so ignored folder names do not apply to it
        try:
            entry = _classify_path(root, options.link_mode)
        except (FileNotFoundError, NotADirectoryError):
            return
        except (OSError, ValueError) as err:
            yield _failure("Error reading entry", root, err)
            return
        if entry is not None:
            yield DirMatch(root) if entry.is_dir else FileMatch(root)
        return
    yield from _Cursor(compiled, options).walk(root)
