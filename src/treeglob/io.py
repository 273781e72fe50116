"""Input/output helpers for the treeglob CLI."""
import json
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass

from .engine.models import DirMatch, ErrorMatch, FileMatch, MatchResult


@dataclass
class Tally:
    """Counts of what a search produced."""

    files: int = 0
    dirs: int = 0
    errors: int = 0

    def add(self, result: MatchResult) -> None:
        if isinstance(result, FileMatch):
            self.files += 1
        elif isinstance(result, DirMatch):
            self.dirs += 1
        else:
            self.errors += 1

    def to_json(self) -> dict[str, int]:
        return {"files": self.files, "dirs": self.dirs, "errors": self.errors}


def format_match(result: MatchResult) -> str:
    """Render a result the way the file tools print it; directories end with a separator."""
    if isinstance(result, FileMatch):
        return str(result.path)
    if isinstance(result, DirMatch):
        return str(result.path) + os.sep
    return result.message


def match_to_json(result: MatchResult) -> dict[str, str]:
    if isinstance(result, FileMatch):
        return {"type": "file", "path": str(result.path)}
    if isinstance(result, DirMatch):
        return {"type": "dir", "path": str(result.path)}
    return {"type": "error", "message": result.message}


def write_json(obj: object, path: str) -> None:
    if path == "-":
        json.dump(obj, sys.stdout, indent=2, sort_keys=True, ensure_ascii=False)
        sys.stdout.write("\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(obj, handle, indent=2, sort_keys=True, ensure_ascii=False)
        handle.write("\n")


def write_text(text: str, path: str) -> None:
    if path == "-":
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)


def write_lines(lines: Iterable[str], path: str) -> None:
    """Write lines as they are produced, so long searches show progress."""
    if path == "-":
        for line in lines:
            sys.stdout.write(line + "\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        for line in lines:
            handle.write(line + "\n")


def write_error(text: str) -> None:
    sys.stderr.write(text if text.endswith("\n") else text + "\n")
    sys.stderr.flush()
