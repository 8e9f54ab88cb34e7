"""Checksum lookup against a previously built index."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator

from dupfind.index.storage import read_records
from dupfind.models import Duplicate, FileRecord


class ChecksumIndex:
    """Read-only checksum -> path map.

    Records are inserted in document order. When several records share a
    checksum, the one inserted last wins and earlier paths are dropped.
    """

    def __init__(self, records: Iterable[FileRecord] = ()) -> None:
        self._paths: Dict[str, str] = {}
        for record in records:
            self._paths[record.checksum] = record.path

    @classmethod
    def load(cls, path: Path) -> "ChecksumIndex":
        return cls(read_records(path))

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, checksum: object) -> bool:
        return checksum in self._paths

    def get(self, checksum: str) -> str | None:
        return self._paths.get(checksum)


def lookup_records(records: Iterable[FileRecord], index: ChecksumIndex) -> Iterator[Duplicate]:
    """Yield a :class:`Duplicate` for every record whose checksum is indexed."""
    for record in records:
        indexed_path = index.get(record.checksum)
        if indexed_path is not None:
            yield Duplicate(record=record, indexed_path=indexed_path)
