"""Tests for the concurrent directory walker."""

from __future__ import annotations

import os
import stat
import threading
from pathlib import Path

import pathspec
import pytest

from assetglob.errors import WalkError
from assetglob.resolver.walker import walk


class _Recorder:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.visited: dict[str, os.stat_result | None] = {}
        self.errors: dict[str, OSError] = {}

    def __call__(self, path: str, info: os.stat_result | None, error: OSError | None) -> None:
        with self.lock:
            if error is not None:
                self.errors[path] = error
            else:
                self.visited[path] = info


def _make_tree(root: Path) -> None:
    (root / "main.go").write_text("package main\n")
    sub = root / "a" / "b"
    sub.mkdir(parents=True)
    (sub / "lib.go").write_text("package b\n")
    (root / "a" / "notes.txt").write_text("notes\n")


def test_walk_visits_root_and_all_entries(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk(".", recorder, workers=4)
    assert sorted(recorder.visited) == [".", "a", "a/b", "a/b/lib.go", "a/notes.txt", "main.go"]
    assert recorder.errors == {}


def test_walk_paths_are_joined_and_cleaned(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk("./", recorder)
    # The root is reported as given; children are clean joins.
    assert "./" in recorder.visited
    assert "main.go" in recorder.visited
    assert "./main.go" not in recorder.visited


def test_walk_nested_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk("a/b", recorder)
    assert sorted(recorder.visited) == ["a/b", "a/b/lib.go"]


def test_walk_metadata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk(".", recorder)
    info = recorder.visited["main.go"]
    assert info is not None
    assert stat.S_ISREG(info.st_mode)
    assert info.st_size == len("package main\n")
    dir_info = recorder.visited["a"]
    assert dir_info is not None and stat.S_ISDIR(dir_info.st_mode)


def test_walk_single_worker(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk(".", recorder, workers=1)
    assert len(recorder.visited) == 6


def test_walk_root_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk("main.go", recorder)
    assert list(recorder.visited) == ["main.go"]


def test_walk_missing_root_raises(tmp_path: Path):
    recorder = _Recorder()
    with pytest.raises(WalkError) as exc:
        walk(str(tmp_path / "missing"), recorder)
    assert exc.value.root == str(tmp_path / "missing")
    assert recorder.visited == {}


def test_walk_does_not_follow_symlinks(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    (tmp_path / "link").symlink_to(tmp_path / "a", target_is_directory=True)
    (tmp_path / "dangling").symlink_to(tmp_path / "nowhere")
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk(".", recorder)
    assert "link" in recorder.visited
    assert "dangling" in recorder.visited
    assert not any(p.startswith("link/") for p in recorder.visited)


def _deny_scandir(monkeypatch: pytest.MonkeyPatch, denied: str) -> None:
    """Make `os.scandir` fail with a permission error for one directory."""
    real_scandir = os.scandir

    def scandir(path: str = "."):  # type: ignore[no-untyped-def]
        if os.path.normpath(os.fspath(path)) == denied:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)


def test_walk_unreadable_directory_is_skipped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "secret.txt").write_text("x")
    monkeypatch.chdir(tmp_path)
    _deny_scandir(monkeypatch, "locked")
    recorder = _Recorder()
    walk(".", recorder, workers=2)
    assert "locked" in recorder.visited
    assert isinstance(recorder.errors["locked"], PermissionError)
    assert "locked/secret.txt" not in recorder.visited
    assert "main.go" in recorder.visited
    assert "a/b/lib.go" in recorder.visited


def test_walk_unreadable_root_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    _deny_scandir(monkeypatch, "a")
    recorder = _Recorder()
    with pytest.raises(WalkError) as exc:
        walk("a", recorder)
    assert exc.value.root == "a"
    assert isinstance(exc.value.cause, PermissionError)
    assert "a/notes.txt" not in recorder.visited


def test_walk_prune_spec(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    prune = pathspec.PathSpec.from_lines("gitwildmatch", ["b/", "*.txt"])
    walk(".", recorder, prune=prune)
    assert sorted(recorder.visited) == [".", "a", "main.go"]


def test_walk_deep_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    current = tmp_path
    for i in range(20):
        current = current / f"d{i}"
        current.mkdir()
        (current / "f.txt").write_text(str(i))
    monkeypatch.chdir(tmp_path)
    recorder = _Recorder()
    walk(".", recorder, workers=8)
    assert len(recorder.visited) == 41
