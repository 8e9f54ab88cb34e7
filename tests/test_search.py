"""Tests for checksum lookups."""

from __future__ import annotations

from pathlib import Path

import pytest

from dupfind.errors import IndexLoadError
from dupfind.index.search import ChecksumIndex, lookup_records
from dupfind.index.storage import write_index
from dupfind.models import Duplicate, FileRecord


class TestChecksumIndex:
    def test_lookup(self) -> None:
        index = ChecksumIndex([FileRecord("a.txt", "111"), FileRecord("b.txt", "222")])

        assert len(index) == 2
        assert "111" in index
        assert index.get("222") == "b.txt"
        assert index.get("333") is None
        assert "333" not in index

    def test_last_record_wins_on_collision(self) -> None:
        """Later records replace earlier ones with the same checksum."""
        index = ChecksumIndex(
            [
                FileRecord("first.txt", "abc"),
                FileRecord("other.txt", "def"),
                FileRecord("last.txt", "abc"),
            ]
        )

        assert len(index) == 2
        assert index.get("abc") == "last.txt"

    def test_empty(self) -> None:
        index = ChecksumIndex()

        assert len(index) == 0
        assert index.get("abc") is None

    def test_load(self, tmp_path: Path) -> None:
        destination = tmp_path / "index.json"
        write_index([FileRecord("x/a.txt", "abc"), FileRecord("x/b.txt", "abc")], destination)

        index = ChecksumIndex.load(destination)

        assert index.get("abc") == "x/b.txt"

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(IndexLoadError):
            ChecksumIndex.load(tmp_path / "missing.json")


class TestLookupRecords:
    def test_reports_only_hits(self) -> None:
        index = ChecksumIndex([FileRecord("old/a.txt", "111")])
        records = [FileRecord("new/d.txt", "111"), FileRecord("new/e.txt", "999")]

        duplicates = list(lookup_records(records, index))

        assert duplicates == [Duplicate(record=records[0], indexed_path="old/a.txt")]

    def test_no_hits(self) -> None:
        index = ChecksumIndex([FileRecord("old/a.txt", "111")])

        assert list(lookup_records([FileRecord("new/e.txt", "999")], index)) == []
