"""Data types shared by the compiler, walker, and resolution engine."""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass, field

DEFAULT_WORKERS: int = min(32, (os.cpu_count() or 1) + 4)


@dataclass
class ResolverConfig:
    """
    Configuration for pattern resolution.

    `workers` bounds the walker's thread pool. `exclude` holds gitignore-style
    patterns whose matches are pruned during the walk, and `respect_gitignore`
    adds the walk root's `.gitignore` to them. With the defaults every entry
    under a pattern root is visited.
    """

    workers: int = DEFAULT_WORKERS
    exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = False


@dataclass(frozen=True)
class Matcher:
    """A compiled glob pattern: an anchored regex plus its negation flag."""

    regex: re.Pattern[str]
    negate: bool = False
    pattern: str = ""

    def matches(self, path: str) -> bool:
        return self.regex.fullmatch(path) is not None

    def __str__(self) -> str:
        return self.regex.pattern


@dataclass
class FileAsset:
    """
    A filesystem entry matched by an inclusion pattern.

    `pattern_root` is the root of the pattern that produced the match and is
    used to compute offsets when writing to a destination directory.
    """

    path: str
    info: os.stat_result
    pattern_root: str = ""

    @property
    def name(self) -> str:
        return os.path.basename(self.path.rstrip("/")) or self.path

    @property
    def size(self) -> int:
        return self.info.st_size

    @property
    def mode(self) -> int:
        return self.info.st_mode

    @property
    def mtime(self) -> float:
        return self.info.st_mtime

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.info.st_mode)

    @property
    def relative_path(self) -> str:
        """Path relative to `pattern_root` (unchanged for `.` and `./` roots)."""
        root = self.pattern_root.rstrip("/")
        if root in ("", "."):
            return self.path
        if self.path == root:
            return "."
        prefix = root + "/"
        if self.path.startswith(prefix):
            return self.path[len(prefix) :]
        return self.path
