"""
GlobResolver: resolves an ordered list of extended glob patterns into the
matching filesystem entries, plus the compiled matchers.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence

from assetglob.errors import PatternRootError, WalkError
from assetglob.resolver.compiler import compile_pattern
from assetglob.resolver.gitignore import build_prune_spec
from assetglob.resolver.roots import NEGATION_MARKER, pattern_root
from assetglob.resolver.types import FileAsset, Matcher, ResolverConfig
from assetglob.resolver.walker import walk

logger = logging.getLogger(__name__)


class _AssetSink:
    """Lock-guarded list receiving walked entries from any walker thread."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._assets: list[FileAsset] = []

    def __call__(self, path: str, info: os.stat_result | None, error: OSError | None) -> None:
        if error is not None or info is None:
            return
        with self._lock:
            self._assets.append(FileAsset(path=path, info=info))

    @property
    def assets(self) -> list[FileAsset]:
        with self._lock:
            return list(self._assets)


class _ResultSet:
    """
    Accumulated matches for one `resolve` call, keyed by path. Negation deletes
    records outright, so a later insert of the same path makes it present again.
    """

    def __init__(self) -> None:
        self._records: dict[str, FileAsset] = {}

    def insert(self, asset: FileAsset) -> None:
        self._records[asset.path] = asset

    def remove_matching(self, matcher: Matcher) -> int:
        matched = [path for path in self._records if matcher.matches(path)]
        for path in matched:
            del self._records[path]
        return len(matched)

    def assets(self) -> list[FileAsset]:
        return list(self._records.values())


class GlobResolver:
    """
    Resolves patterns strictly in input order. Inclusion patterns walk their
    root and add (or overwrite) matching entries; `!` patterns remove entries
    matched so far. A negation does not affect entries added by later patterns.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self._config: ResolverConfig = config if config is not None else ResolverConfig()

    def resolve(self, patterns: Sequence[str]) -> tuple[list[FileAsset], list[Matcher]]:
        """
        Return the matched assets (in no particular order) and the compiled
        matchers for every pattern, in input order.

        Raises `PatternRootError` if an inclusion pattern has no root, and
        `WalkError` if a pattern root cannot be walked.
        """
        results = _ResultSet()
        matchers: list[Matcher] = []

        for pattern in patterns:
            if pattern.startswith(NEGATION_MARKER):
                glob = pattern[len(NEGATION_MARKER) :]
                matcher = Matcher(compile_pattern(glob), negate=True, pattern=pattern)
                matchers.append(matcher)
                removed = results.remove_matching(matcher)
                logger.debug("Pattern %r removed %d paths", pattern, removed)
                continue

            matcher = Matcher(compile_pattern(pattern), negate=False, pattern=pattern)
            matchers.append(matcher)
            root = pattern_root(pattern)
            if not root:
                raise PatternRootError(pattern)

            count = 0
            for asset in self._walk_files(root, pattern):
                if matcher.matches(asset.path):
                    asset.pattern_root = root
                    results.insert(asset)
                    count += 1
            logger.debug("Pattern %r matched %d paths under %r", pattern, count, root)

        return results.assets(), matchers

    def _walk_files(self, root: str, pattern: str) -> list[FileAsset]:
        """Walk `root` and return every directory and file found, including `root`."""
        sink = _AssetSink()
        prune = build_prune_spec(
            self._config.exclude, root, respect_gitignore=self._config.respect_gitignore
        )
        try:
            walk(root, sink, workers=self._config.workers, prune=prune)
        except WalkError as e:
            raise WalkError(e.root, e.cause, pattern=pattern) from e.cause
        return sink.assets


def glob(
    patterns: Sequence[str], config: ResolverConfig | None = None
) -> tuple[list[FileAsset], list[Matcher]]:
    """
    Return files and directories that match `patterns`, plus their matchers.
    See `GlobResolver.resolve`.
    """
    return GlobResolver(config).resolve(patterns)
