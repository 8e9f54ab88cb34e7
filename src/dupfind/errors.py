"""Exception hierarchy for dupfind."""

from __future__ import annotations


class DupfindError(Exception):
    """Base class for every error raised by dupfind."""


class FileHashError(DupfindError):
    """A single file could not be hashed. Recovered by skipping the file."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class OpenError(FileHashError):
    """The file could not be opened for reading."""


class ReadError(FileHashError):
    """Reading failed after the file was opened."""


class TraversalError(DupfindError):
    """Walking the directory tree failed. Aborts the whole walk."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"Cannot traverse {path}: {cause}")
        self.path = path
        self.cause = cause


class IndexLoadError(DupfindError):
    """The index document is missing, unreadable or malformed."""


class IndexWriteError(DupfindError):
    """The index document could not be written."""


class WorkerCrashError(DupfindError):
    """One or more hashing workers terminated on an unexpected exception."""
