"""treeglob breadth-first glob search toolkit."""

from collections.abc import Sequence

from .engine.builder import GlobBuilder, GlobSearch, build, new
from .engine.errors import CompileError, GlobError, RegexError
from .engine.models import DirMatch, ErrorMatch, FileMatch, LinkMode, MatchResult, SearchOptions

__version__ = "2.0.0"

GLOB_SYNTAX = """\
Glob pattern rules:
- ? matches any single character.
- * matches any (possibly empty) sequence of characters.
- ** matches the current directory and arbitrary subdirectories. To match files
  in arbitrary subdirectories, use **/*. This sequence must form a single path
  component, so both **a and b** are invalid and will result in an error.
- [...] matches any character inside the brackets. Character sequences can also
  specify ranges of characters (Unicode order), so [0-9] specifies any character
  between 0 and 9 inclusive. Special cases: [[] represents an opening bracket,
  []] represents a closing bracket.
- [!...] is the negation of [...], it matches any character not in the brackets.
- The metacharacters ?, *, [, ] can be matched by escaping them between brackets
  such as [\\?], [\\]] or [\\[]. The - character can be specified inside a
  character sequence by placing it at the start or the end, e.g. [abc-].
- {choice1,choice2...} matches any of the comma-separated choices between
  braces. Can be nested, and include ?, * and character classes. The macro
  !SOURCES is replaced by common source extensions (c,cs,cpp,py,rs...) and is
  typically used as *.{!SOURCES} to find source files.
- Character classes accept escapes such as [\\d] for a single digit, and POSIX
  classes such as [[:alpha:]] or [[:xdigit:]].
- Both / and \\ separate path components.

Autorecurse glob pattern transformation:
- Constant pattern (no filter, no **) naming a directory: /**/* is appended at
  the end to search all files of all subdirectories.
- Pattern without ** ending with a filter: /** is inserted before the final
  filter to find all matching files of all subdirectories.
"""


def version() -> str:
    return __version__


def glob_syntax() -> str:
    """Help text describing the glob grammar and autorecurse rules."""
    return GLOB_SYNTAX


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point mirroring :func:`treeglob.cli.main`."""

    from .cli import main as cli_main

    return cli_main(argv)


__all__ = [
    "CompileError",
    "DirMatch",
    "ErrorMatch",
    "FileMatch",
    "GlobBuilder",
    "GlobError",
    "GlobSearch",
    "LinkMode",
    "MatchResult",
    "RegexError",
    "SearchOptions",
    "build",
    "glob_syntax",
    "main",
    "new",
    "version",
]
