"""Compilation of glob strings into root + segment programs."""
from __future__ import annotations

import logging as logmod
import os
import re

from .errors import GlobError, RegexError
from .models import CompiledPattern, Constant, Filter, Recurse, Segment

logging = logmod.getLogger(__name__)

_META = "*?[{"
_SEPARATORS = "/\\"

MATCH_ALL = "^.*$"

# brace nesting limit within one path component
MAX_BRACE_DEPTH = 64

SOURCES_MACRO = "!SOURCES"
SOURCE_EXTENSIONS = (
    "asm,awk,c,cc,cpp,cs,cxx,fs,go,h,hpp,hxx,java,jl,js,lua,py,rs,sql,ts,vb,xaml"
)
_SOURCES_RE = re.compile(re.escape(SOURCES_MACRO), re.IGNORECASE)

# ASCII equivalents of the POSIX bracket expressions accepted inside [...]
_POSIX_CLASSES: dict[str, str] = {
    "alnum": "0-9A-Za-z",
    "alpha": "A-Za-z",
    "ascii": "\\x00-\\x7F",
    "blank": "\\t ",
    "cntrl": "\\x00-\\x1F\\x7F",
    "digit": "0-9",
    "graph": "!-~",
    "lower": "a-z",
    "print": " -~",
    "punct": "!-/:-@\\[-`{-~",
    "space": "\\t\\n\\v\\f\\r ",
    "upper": "A-Z",
    "word": "0-9A-Za-z_",
    "xdigit": "0-9A-Fa-f",
}


def split_root(pattern: str) -> tuple[str, str]:
    """Separate the constant directory prefix from the part that needs matching.

    The root ends at the last separator preceding the first metacharacter. A
    pattern without metacharacters is all root, and an empty root means the
    current directory. An empty pattern behaves like ``*``.
    """
    glob = pattern or "*"
    cut = 0
    for pos, ch in enumerate(glob):
        if ch in _META:
            break
        if ch in _SEPARATORS:
            cut = pos + 1
    else:
        return glob, ""
    return glob[:cut] or ".", glob[cut:]


def native_root(root: str) -> str:
    if os.sep == "/":
        return root.replace("\\", "/")
    return root


def expand_macros(text: str) -> str:
    return _SOURCES_RE.sub(SOURCE_EXTENSIONS, text)


def compile_filter(source: str, case_sensitive: bool) -> Filter:
    flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
    try:
        return Filter(re.compile(source, flags))
    except re.error as err:
        raise RegexError(f"{err} in {source!r}") from err


def match_all_filter(case_sensitive: bool) -> Filter:
    return compile_filter(MATCH_ALL, case_sensitive)


def _class_end(text: str, start: int) -> int:
    """Index just past the ``]`` closing the class opened at ``start``, or -1."""
    pos = start + 1
    if pos < len(text) and text[pos] in "!^":
        pos += 1
    if pos < len(text) and text[pos] == "]":
        pos += 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if text.startswith("[:", pos):
            close = text.find(":]", pos + 2)
            if close >= 0:
                pos = close + 2
                continue
        if ch == "]":
            return pos + 1
        pos += 1
    return -1


def _split_components(text: str) -> list[str]:
    components: list[str] = []
    buffer: list[str] = []
    braces = 0
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == "[":
            end = _class_end(text, pos)
            if end < 0:
                raise GlobError("Unclosed [")
            buffer.append(text[pos:end])
            pos = end
            continue
        if ch in _SEPARATORS:
            if braces > 0:
                raise GlobError(f"Invalid {ch} between {{ }}")
            if buffer:
                components.append("".join(buffer))
                buffer = []
            pos += 1
            continue
        if ch == "{":
            braces += 1
        elif ch == "}":
            braces -= 1
            if braces < 0:
                raise GlobError("Extra closing }")
        buffer.append(ch)
        pos += 1
    if braces > 0:
        raise GlobError("Unclosed {")
    if buffer:
        components.append("".join(buffer))
    return components


class _GlobTranslator:
    """Recursive-descent translation of one path component into a regex."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.depth = 0

    def translate(self) -> str:
        return "^" + self._parse_sequence(in_braces=False) + "$"

    def _parse_sequence(self, in_braces: bool) -> str:
        parts: list[str] = []
        while True:
            ch = self._peek()
            if not ch:
                break
            if in_braces and ch in ",}":
                break
            if ch == "}":
                raise GlobError("Extra closing }")
            if ch == "[":
                parts.append(self._parse_class())
                continue
            if ch == "{":
                parts.append(self._parse_alternation())
                continue
            self.pos += 1
            if ch == "*":
                parts.append(".*")
            elif ch == "?":
                parts.append(".")
            else:
                parts.append(re.escape(ch))
        return "".join(parts)

    def _parse_alternation(self) -> str:
        self.pos += 1
        self.depth += 1
        if self.depth > MAX_BRACE_DEPTH:
            raise GlobError(f"Braces nested deeper than {MAX_BRACE_DEPTH} levels")
        choices: list[str] = []
        while True:
            choices.append(self._parse_sequence(in_braces=True))
            ch = self._peek()
            self.pos += 1
            if ch == ",":
                continue
            if ch == "}":
                break
            raise GlobError(f"Unclosed {{ in {self.text!r}")
        self.depth -= 1
        return "(?:" + "|".join(choices) + ")"

    def _parse_class(self) -> str:
        self.pos += 1
        parts = ["["]
        if self._peek() in ("!", "^"):
            parts.append("^")
            self.pos += 1
        if self._peek() == "]":
            parts.append("\\]")
            self.pos += 1
        while True:
            ch = self._peek()
            if not ch:
                raise GlobError(f"Unclosed [ in {self.text!r}")
            if ch == "]":
                self.pos += 1
                parts.append("]")
                return "".join(parts)
            if ch == "\\":
                escaped = self.text[self.pos + 1:self.pos + 2]
                if not escaped:
                    raise GlobError(f"Unclosed [ in {self.text!r}")
                parts.append("\\" + escaped)
                self.pos += 2
                continue
            if self.text.startswith("[:", self.pos) and ":]" in self.text[self.pos + 2:]:
                parts.append(self._parse_posix_class())
                continue
            self.pos += 1
            # [ & ~ | may start set operations in future re versions
            parts.append("\\" + ch if ch in "[&~|" else ch)

    def _parse_posix_class(self) -> str:
        close = self.text.index(":]", self.pos + 2)
        name = self.text[self.pos + 2:close]
        self.pos = close + 2
        try:
            return _POSIX_CLASSES[name]
        except KeyError:
            raise RegexError(f"Unknown character class [:{name}:]") from None

    def _peek(self) -> str:
        if self.pos >= len(self.text):
            return ""
        return self.text[self.pos]


def translate(component: str) -> str:
    """Translate a glob path component (no separators) into an anchored regex."""
    return _GlobTranslator(component).translate()


def glob_to_segments(text: str, case_sensitive: bool = False) -> list[Segment]:
    """Convert the non-root part of a glob into its ordered segments."""
    segments: list[Segment] = []
    for component in _split_components(expand_macros(text)):
        if component == "**":
            if segments and isinstance(segments[-1], Recurse):
                continue
            segments.append(Recurse())
        elif "**" in component:
            raise GlobError(f"Glob pattern ** must be alone between separators, got {component!r}")
        elif not any(ch in _META for ch in component):
            segments.append(Constant(component))
        else:
            segments.append(compile_filter(translate(component), case_sensitive))
    if segments and isinstance(segments[-1], Recurse):
        segments.append(match_all_filter(case_sensitive))
    return segments


def compile_pattern(pattern: str, case_sensitive: bool = False) -> CompiledPattern:
    if "\x00" in pattern:
        raise GlobError("Null character in pattern")
    root, remainder = split_root(pattern)
    segments = tuple(glob_to_segments(remainder, case_sensitive)) if remainder else ()
    compiled = CompiledPattern(root=native_root(root), segments=segments, case_sensitive=case_sensitive)
    logging.debug("Compiled %r: root=%r, %d segment(s)", pattern, compiled.root, len(segments))
    return compiled
