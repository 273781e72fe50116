"""Command line interface for the treeglob search engine."""
from __future__ import annotations

import argparse
import logging as logmod
import time
from collections.abc import Iterator, Sequence

from . import __version__, glob_syntax, io
from .engine.builder import GlobSearch, new
from .engine.errors import CompileError
from .engine.models import ErrorMatch, LinkMode

logging = logmod.getLogger(__name__)


def _parse_link_mode(value: str) -> LinkMode:
    try:
        return LinkMode.parse(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def _parse_depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        depth = -1
    if depth < 0:
        raise argparse.ArgumentTypeError(f"invalid max depth: {value} (expected an integer >= 0)")
    return depth


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="treeglob", description="Breadth-first glob search")
    parser.add_argument("-V", "--version", action="version", version=f"treeglob {__version__}")
    parser.add_argument("patterns", nargs="*", metavar="PATTERN")
    parser.add_argument("--syntax", action="store_true", default=False, help="Describe the glob syntax and exit")
    parser.add_argument("-c", "--case-sensitive", action="store_true", default=False)
    parser.add_argument("-a", "--autorecurse", dest="autorecurse", action="store_true", default=True)
    parser.add_argument("--no-autorecurse", dest="autorecurse", action="store_false")
    parser.add_argument(
        "-l",
        "--link-mode",
        type=_parse_link_mode,
        default=LinkMode.REPORT_ONLY,
        help="0=ignore links, 1=report links without following them (default), 2=follow links",
    )
    parser.add_argument(
        "-d",
        "--max-depth",
        type=_parse_depth,
        default=0,
        help="Directory levels a ** segment may span, 1 is the starting directory only; 0 is unlimited",
    )
    parser.add_argument(
        "--no-glob-filtering",
        action="store_true",
        default=False,
        help="Do not filter out $RECYCLE.BIN, .git and System Volume Information",
    )
    parser.add_argument(
        "-f",
        "--ignore-dir",
        action="append",
        default=[],
        metavar="NAME",
        help="Folder name to exclude (simple name, no path, no *), repeatable",
    )
    parser.add_argument("--format", choices=["text", "json"], default="text")
    parser.add_argument("--out", default="-")
    parser.add_argument("--stats", action="store_true", default=False, help="Print counts and elapsed time")
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    return parser


def _compile(pattern: str, args: argparse.Namespace) -> GlobSearch:
    builder = (
        new(pattern)
        .case_sensitive(args.case_sensitive)
        .autorecurse(args.autorecurse)
        .link_mode(args.link_mode)
        .max_depth(args.max_depth)
        .no_glob_filtering(args.no_glob_filtering)
    )
    for name in args.ignore_dir:
        builder.add_ignore_dir(name)
    logging.debug("%r", builder)
    return builder.compile()


def _text_lines(searches: Sequence[GlobSearch], tally: io.Tally) -> Iterator[str]:
    for search in searches:
        for result in search.explore():
            tally.add(result)
            if isinstance(result, ErrorMatch):
                io.write_error(result.message)
                continue
            yield io.format_match(result)


def _json_payload(patterns: Sequence[str], searches: Sequence[GlobSearch]) -> list[dict[str, object]]:
    payload: list[dict[str, object]] = []
    for pattern, search in zip(patterns, searches):
        tally = io.Tally()
        matches = []
        for result in search.explore():
            tally.add(result)
            matches.append(io.match_to_json(result))
        payload.append({"pattern": pattern, "root": search.root, "matches": matches, **tally.to_json()})
    return payload


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logmod.basicConfig(level=logmod.DEBUG if args.verbose else logmod.WARNING, format="%(name)s: %(message)s")

    if args.syntax:
        io.write_text(glob_syntax(), "-")
        return 0
    if not args.patterns:
        parser.error("at least one PATTERN is required")

    searches: list[GlobSearch] = []
    for pattern in args.patterns:
        try:
            searches.append(_compile(pattern, args))
        except CompileError as err:
            io.write_error(f"treeglob: invalid pattern {pattern!r}: {err}")
            return 1

    start = time.perf_counter()
    if args.format == "json":
        io.write_json(_json_payload(args.patterns, searches), args.out)
        return 0

    tally = io.Tally()
    io.write_lines(_text_lines(searches, tally), args.out)
    if args.stats:
        elapsed = time.perf_counter() - start
        io.write_error(
            f"{tally.files} file(s) found\n{tally.dirs} dir(s) found\n"
            f"{tally.errors} error(s)\nSearch in {elapsed:.3f}s"
        )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
