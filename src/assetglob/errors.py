"""Exceptions raised while resolving glob patterns."""

from __future__ import annotations


class GlobError(Exception):
    """Base class for fatal pattern resolution errors."""


class PatternRootError(GlobError):
    """
    A pattern that needs a filesystem walk has no inferable root directory.
    """

    def __init__(self, pattern: str) -> None:
        super().__init__(f"Cannot get root from pattern: {pattern}")
        self.pattern = pattern


class WalkError(GlobError):
    """
    The directory walk failed as a whole (e.g., the root does not exist).
    Errors on individual entries never raise this.
    """

    def __init__(self, root: str, cause: OSError, pattern: str | None = None) -> None:
        message = f"Cannot walk {root!r}: {cause.strerror or cause}"
        if pattern is not None:
            message = f"{message} (pattern: {pattern})"
        super().__init__(message)
        self.root = root
        self.cause = cause
        self.pattern = pattern
