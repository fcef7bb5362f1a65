"""Infer the directory a glob pattern should be walked from."""

from __future__ import annotations

NEGATION_MARKER = "!"

# Characters that make a path segment a pattern rather than a literal name.
_GLOB_CHARS = frozenset("*?[{")


def has_meta(segment: str) -> bool:
    """Check if a path segment contains characters used to build a regex."""
    return any(c in _GLOB_CHARS for c in segment)


def pattern_root(pattern: str) -> str:
    """
    Return the deepest literal directory of a pattern, used as the start location
    for globbing. Pure string analysis; the filesystem is never consulted.

    - `""` for a negation, which never walks the filesystem
    - `"./"` when the pattern has no directory part
    - `"."` when the first directory already contains a wildcard
    """
    if pattern.startswith(NEGATION_MARKER):
        return ""
    parts = pattern.split("/")
    if len(parts) == 1:
        return "./"

    # The last segment is the file part and never belongs to the root.
    literal: list[str] = []
    for part in parts[:-1]:
        if has_meta(part):
            break
        literal.append(part)

    if literal == [""]:
        return "/"
    return "/".join(literal) or "."
