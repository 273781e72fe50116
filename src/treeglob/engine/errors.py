"""Exceptions raised while compiling glob patterns."""
from __future__ import annotations


class CompileError(ValueError):
    """A pattern that cannot be turned into a search."""

    kind = "CompileError"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}"


class GlobError(CompileError):
    """Structurally invalid glob, such as ``**`` glued to other characters."""

    kind = "GlobError"


class RegexError(CompileError):
    """The regular expression translated from a glob component does not compile."""

    kind = "RegexError"
