"""Build and find operations over the record pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List

from dupfind.config import AppConfig
from dupfind.index.pipeline import PipelineStats, RecordPipeline
from dupfind.index.search import ChecksumIndex, lookup_records
from dupfind.index.storage import write_index
from dupfind.models import Duplicate, FileRecord

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildResult:
    destination: Path
    records: List[FileRecord] = field(default_factory=list)
    stats: PipelineStats = field(default_factory=PipelineStats)


class Indexer:
    """Coordinates the hashing pipeline with the index sinks."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()

    def pipeline(self, root: Path) -> RecordPipeline:
        return RecordPipeline(root, self.config)

    def build(self, root: Path, destination: Path) -> BuildResult:
        """Hash every file under ``root`` and write the index to ``destination``."""
        pipeline = self.pipeline(root)
        records = write_index(pipeline, destination)
        LOGGER.info("Indexed %d files under %s", len(records), root)
        return BuildResult(destination=Path(destination), records=records, stats=pipeline.stats)

    def find(self, root: Path, index: ChecksumIndex) -> Iterator[Duplicate]:
        """Yield files under ``root`` whose content is already in ``index``."""
        LOGGER.debug("Looking up files under %s against %d checksums", root, len(index))
        yield from lookup_records(self.pipeline(root), index)
