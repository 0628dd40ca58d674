"""Tree readers - the only place patternkit touches the filesystem.

The compiler talks to a reader through two calls: a cheap ``signature``
used to decide whether a cached graph is still valid, and a full ``read``
that returns the FileRecord tree handed to the tree builder.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from .record import FileRecord, tree_signature

log = logging.getLogger(__name__)


class TreeReader(Protocol):
    """Source of FileRecord trees for the compiler."""

    def signature(self) -> list[tuple[str, int]]:
        """Sorted ``(relative path, mtime_ns)`` pairs for the source."""
        ...

    def read(self) -> FileRecord:
        """Read the whole source tree."""
        ...


def _is_ignored(name: str) -> bool:
    return name.startswith(".")


def _relative(path: Path, root: Path) -> str:
    rel = path.relative_to(root).as_posix()
    return "" if rel == "." else rel


def read_tree(root_path: str | Path) -> FileRecord:
    """Recursively read ``root_path`` into a FileRecord tree.

    Dotfiles and dot-directories are skipped. Entries that cannot be
    stat'ed or read are left out of the tree.
    """
    root = Path(root_path).resolve()
    return _read_entry(root, root)


def _read_entry(path: Path, root: Path) -> FileRecord:
    st = path.stat()
    if path.is_dir():
        children: list[FileRecord] = []
        try:
            entries = sorted(os.scandir(path), key=lambda e: e.name)
        except OSError as e:
            log.debug(f"Skipping unreadable directory {path}: {e}")
            entries = []
        for entry in entries:
            if _is_ignored(entry.name):
                continue
            try:
                children.append(_read_entry(Path(entry.path), root))
            except OSError as e:
                log.debug(f"Skipping unreadable entry {entry.path}: {e}")
        return FileRecord(
            path=str(path),
            relative_path=_relative(path, root),
            mtime_ns=st.st_mtime_ns,
            is_directory=True,
            children=tuple(children),
        )

    return FileRecord(
        path=str(path),
        relative_path=_relative(path, root),
        mtime_ns=st.st_mtime_ns,
        contents=path.read_bytes(),
        is_directory=False,
    )


def scan_signature(root_path: str | Path) -> list[tuple[str, int]]:
    """Stat-only walk returning sorted ``(relative path, mtime_ns)`` pairs."""
    root = Path(root_path).resolve()
    pairs: list[tuple[str, int]] = []
    if not root.exists():
        return pairs
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not _is_ignored(d)]
        current = Path(dirpath)
        for name in list(dirnames) + filenames:
            if _is_ignored(name):
                continue
            child = current / name
            try:
                pairs.append((_relative(child, root), child.stat().st_mtime_ns))
            except OSError:
                continue
    return sorted(pairs)


class FileSystemReader:
    """Reads a component source directory from disk."""

    def __init__(self, root_path: str | Path):
        self.root_path = Path(root_path)

    def signature(self) -> list[tuple[str, int]]:
        return scan_signature(self.root_path)

    def read(self) -> FileRecord:
        return read_tree(self.root_path)


class StaticReader:
    """Serves a prebuilt FileRecord tree (embedding and tests)."""

    def __init__(self, root: FileRecord):
        self.root = root

    def signature(self) -> list[tuple[str, int]]:
        return tree_signature(self.root)

    def read(self) -> FileRecord:
        return self.root
