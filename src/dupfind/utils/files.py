"""Utility helpers for walking and hashing files."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Iterator

from dupfind.config import DEFAULT_CHUNK_SIZE
from dupfind.errors import OpenError, ReadError, TraversalError


def _is_candidate(entry: os.DirEntry) -> bool:
    # Dangling symlinks are emitted so the hashing step reports them.
    if entry.is_symlink():
        return entry.is_file() or not os.path.exists(entry.path)
    return entry.is_file(follow_symlinks=False)


def iter_file_paths(root: str | Path, *, follow_symlinks: bool = False) -> Iterator[str]:
    """Yield file paths under ``root``, descending into directories.

    Entries are visited in name order. Symlinked directories are only entered
    when ``follow_symlinks`` is set; each real directory is entered once.
    The first directory that cannot be listed raises :class:`TraversalError`
    and ends the walk.
    """
    root = os.fspath(root)
    try:
        is_dir = os.path.isdir(root)
        if not is_dir:
            os.stat(root)
    except OSError as exc:
        raise TraversalError(root, exc) from exc
    if not is_dir:
        yield root
        return

    seen: set[tuple[int, int]] = set()
    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            stat = os.stat(directory)
            key = (stat.st_dev, stat.st_ino)
            if key in seen:
                continue
            seen.add(key)
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            raise TraversalError(directory, exc) from exc

        subdirs = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    subdirs.append(entry.path)
                elif _is_candidate(entry):
                    yield entry.path
            except OSError as exc:
                raise TraversalError(entry.path, exc) from exc
        stack.extend(reversed(subdirs))


def compute_sha256(path: str | Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute SHA256 hash for a file, reading it in chunks."""
    sha = hashlib.sha256()
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise OpenError(os.fspath(path), exc) from exc
    with handle:
        try:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                sha.update(chunk)
        except OSError as exc:
            raise ReadError(os.fspath(path), exc) from exc
    return sha.hexdigest()
