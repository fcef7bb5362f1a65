"""Prune specs for the walker, built with pathspec from exclude lines and `.gitignore`."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pathspec


def _read_ignore_file(path: Path) -> list[str] | None:
    """
    Read an ignore file and return its pattern lines, or `None` if the file is
    missing, unreadable, or not UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    return [line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")]


def load_gitignore(directory: Path) -> list[str]:
    """Pattern lines from `.gitignore` in the given directory (empty if absent)."""
    return _read_ignore_file(directory / ".gitignore") or []


def build_prune_spec(
    exclude: Sequence[str], root: str | Path, respect_gitignore: bool = False
) -> pathspec.PathSpec | None:
    """
    Combine `exclude` lines with the walk root's `.gitignore` (when requested)
    into a compiled `PathSpec`, or `None` if nothing should be pruned.
    """
    lines = list(exclude)
    if respect_gitignore:
        lines += load_gitignore(Path(root))
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)
