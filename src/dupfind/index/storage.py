"""JSON index document persistence."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List

from dupfind.errors import IndexLoadError, IndexWriteError
from dupfind.models import FileRecord

LOGGER = logging.getLogger(__name__)


def serialize_records(records: Iterable[FileRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], indent=2)


def parse_records(document: str) -> List[FileRecord]:
    """Parse an index document, validating its shape."""
    try:
        payload = json.loads(document)
    except json.JSONDecodeError as exc:
        raise IndexLoadError(f"Malformed index document: {exc}") from exc

    if not isinstance(payload, list):
        raise IndexLoadError("Malformed index document: expected a list of records")

    records: List[FileRecord] = []
    for position, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise IndexLoadError(f"Malformed index record #{position}: expected an object")
        path = entry.get("path")
        checksum = entry.get("checksum")
        if not isinstance(path, str) or not isinstance(checksum, str):
            raise IndexLoadError(
                f"Malformed index record #{position}: 'path' and 'checksum' must be strings"
            )
        records.append(FileRecord(path=path, checksum=checksum))
    return records


def read_records(path: Path) -> List[FileRecord]:
    try:
        document = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IndexLoadError(f"Cannot read index file {path}: {exc}") from exc
    records = parse_records(document)
    LOGGER.debug("Loaded %d records from %s", len(records), path)
    return records


def _index_mode(destination: Path) -> int:
    """Mode for the written index: keep an existing file's mode, else 0666 minus umask."""
    try:
        return stat.S_IMODE(os.stat(destination).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_index(records: Iterable[FileRecord], destination: Path) -> List[FileRecord]:
    """Drain ``records`` and write them to ``destination``, replacing any existing file.

    The document is written to a temporary sibling first so a failed write
    never leaves a truncated index behind. Returns the records written.
    """
    collected = list(records)
    destination = Path(destination)
    document = serialize_records(collected)

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
        )
    except OSError as exc:
        raise IndexWriteError(f"Cannot create index file {destination}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(document)
        os.chmod(tmp_name, _index_mode(destination))
        os.replace(tmp_name, destination)
    except OSError as exc:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise IndexWriteError(f"Cannot write index file {destination}: {exc}") from exc

    LOGGER.debug("Wrote %d records to %s", len(collected), destination)
    return collected
