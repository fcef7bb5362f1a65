"""
Concurrent directory walker.

Reports the root and every file and directory below it to a visitor callback.
Directories are scanned on a thread pool, so the visitor must be thread-safe.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

import pathspec

from assetglob.errors import WalkError
from assetglob.resolver.types import DEFAULT_WORKERS

logger = logging.getLogger(__name__)

Visitor = Callable[[str, os.stat_result | None, OSError | None], None]


def _join(parent: str, name: str) -> str:
    path = os.path.normpath(os.path.join(parent, name))
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path


def _is_pruned(prune: pathspec.PathSpec | None, root: str, path: str, is_dir: bool) -> bool:
    if prune is None:
        return False
    rel = os.path.relpath(path, root).replace(os.sep, "/")
    return prune.match_file(rel + "/" if is_dir else rel)


def _visit_entries(
    directory: str,
    entries: list[os.DirEntry[str]],
    root: str,
    visit: Visitor,
    prune: pathspec.PathSpec | None,
) -> list[str]:
    """Visit already-listed entries of one directory and return the subdirectories."""
    subdirs: list[str] = []
    for entry in entries:
        path = _join(directory, entry.name)
        try:
            info = entry.stat(follow_symlinks=False)
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.debug("Skipping entry %s: %s", path, e)
            visit(path, None, e)
            continue
        if _is_pruned(prune, root, path, is_dir):
            continue
        visit(path, info, None)
        if is_dir:
            subdirs.append(path)
    return subdirs


def _list_directory(directory: str) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as it:
        return list(it)


def _scan_directory(
    directory: str,
    root: str,
    visit: Visitor,
    prune: pathspec.PathSpec | None,
) -> list[str]:
    """Visit the entries of one subdirectory; an unreadable one is reported and skipped."""
    try:
        entries = _list_directory(directory)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        visit(directory, None, e)
        return []
    return _visit_entries(directory, entries, root, visit, prune)


def walk(
    root: str,
    visit: Visitor,
    *,
    workers: int = DEFAULT_WORKERS,
    prune: pathspec.PathSpec | None = None,
) -> None:
    """
    Walk `root` recursively, calling `visit(path, info, error)` for the root and
    every entry below it. Symlinks are reported but never followed.

    Per-entry failures below the root are passed to `visit` as `error` and the
    walk continues. Raises `WalkError` if the root cannot be stat'ed or, for a
    directory root, listed.
    """
    try:
        info = os.lstat(root)
    except OSError as e:
        raise WalkError(root, e) from e

    visit(root, info, None)
    if not os.path.isdir(root) or os.path.islink(root):
        return

    try:
        entries = _list_directory(root)
    except OSError as e:
        raise WalkError(root, e) from e
    subdirs = _visit_entries(root, entries, root, visit, prune)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        pending: set[Future[list[str]]] = {
            executor.submit(_scan_directory, subdir, root, visit, prune) for subdir in subdirs
        }
        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                for subdir in future.result():
                    pending.add(executor.submit(_scan_directory, subdir, root, visit, prune))
