"""Implicit recursion added to patterns that do not ask for it."""
from __future__ import annotations

import logging as logmod
from dataclasses import replace
from pathlib import Path

from .compiler import match_all_filter
from .models import CompiledPattern, Filter, Recurse

logging = logmod.getLogger(__name__)


def autorecurse(compiled: CompiledPattern, enabled: bool = True) -> CompiledPattern:
    """Rewrite ``compiled`` so that it also searches subdirectories.

    - a constant pattern naming a directory gets ``**/*`` appended;
    - a pattern ending with a filter gets ``**`` inserted before that filter.

    Patterns that already contain ``**`` are returned unchanged.
    """
    if not enabled or compiled.has_recurse:
        return compiled
    segments = compiled.segments
    if not segments:
        if not Path(compiled.root).is_dir():
            return compiled
        segments = (Recurse(), match_all_filter(compiled.case_sensitive))
    elif isinstance(segments[-1], Filter):
        segments = segments[:-1] + (Recurse(), segments[-1])
    else:
        return compiled
    logging.debug("Autorecurse on %r: %d -> %d segment(s)", compiled.root, len(compiled.segments), len(segments))
    return replace(compiled, segments=segments)
