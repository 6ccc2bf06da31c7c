"""Filtering of emitted files that are never launched in the host.

Uses gitignore-style patterns so source maps, declaration files and build
info emitted next to the scripts are dropped before output selection.
"""

from __future__ import annotations

import os
from collections.abc import Iterable

import pathspec

from .config import DEFAULT_OUTPUT_IGNORE


def load_output_spec(patterns: Iterable[str] | None = None) -> pathspec.PathSpec:
    """Build a PathSpec from gitignore-style patterns.

    Blank lines and comments are ignored, as in a .gitignore file.
    """
    if patterns is None:
        patterns = DEFAULT_OUTPUT_IGNORE
    return pathspec.GitIgnoreSpec.from_lines(patterns)


def should_ignore(file_path: str, spec: pathspec.PathSpec) -> bool:
    """Check if an emitted file should be skipped."""
    # Match relative to the filesystem root so anchored patterns still work.
    normalized = os.path.splitdrive(file_path)[1].replace(os.sep, "/").lstrip("/")
    return spec.match_file(normalized)


def filter_outputs(paths: Iterable[str], spec: pathspec.PathSpec) -> list[str]:
    """Drop ignored paths, preserving order."""
    return [p for p in paths if not should_ignore(p, spec)]
