"""Core dupfind data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Content checksum of a single file."""

    path: str
    checksum: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "checksum": self.checksum}


@dataclass(frozen=True, slots=True)
class Duplicate:
    """A newly hashed file whose checksum is already in the index."""

    record: FileRecord
    indexed_path: str
