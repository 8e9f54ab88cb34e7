"""Concurrent walk -> hash -> collect pipeline.

One walker thread feeds file paths into a shared path channel. A pool of
hashing workers drains that channel, each path being taken by exactly one
worker, and pushes :class:`FileRecord` objects into a shared record channel.
A completion tracker joins every worker and then closes the record channel,
which ends iteration for the single consumer.

Both channels are unbounded: the walker never waits on the workers, and a
crashed worker cannot leave the walker blocked.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Iterator, Sequence, TypeVar

from dupfind.config import AppConfig
from dupfind.errors import FileHashError, TraversalError, WorkerCrashError
from dupfind.models import FileRecord
from dupfind.utils.files import compute_sha256, iter_file_paths

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    pass


class Channel(Generic[T]):
    """Unbounded queue that is closed exactly once.

    Iterating yields items until the channel is closed. Any number of
    threads may iterate concurrently; each item goes to exactly one of them
    and all of them stop once the channel is closed and drained.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("put on closed channel")
            self._queue.put(item)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("channel already closed")
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                # Hand the marker on to the next consumer.
                self._queue.put(_CLOSED)
                return
            yield item


class PathWalker(threading.Thread):
    """Producer thread emitting every file path under ``root``."""

    def __init__(self, root: str | Path, paths: Channel[str], *, follow_symlinks: bool = False) -> None:
        super().__init__(name="dupfind-walker", daemon=True)
        self.root = root
        self.paths = paths
        self.follow_symlinks = follow_symlinks
        self.emitted = 0
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            for path in iter_file_paths(self.root, follow_symlinks=self.follow_symlinks):
                self.paths.put(path)
                self.emitted += 1
        except TraversalError as exc:
            LOGGER.error("Aborting walk of %s: %s", self.root, exc)
            self.error = exc
        except Exception as exc:
            LOGGER.exception("Walker crashed on %s", self.root)
            self.error = exc
        finally:
            self.paths.close()
            LOGGER.debug("Walker finished after %d paths", self.emitted)


class HashWorker(threading.Thread):
    """Consumer/producer thread turning paths into file records."""

    def __init__(
        self,
        worker_id: int,
        paths: Channel[str],
        records: Channel[FileRecord],
        *,
        chunk_size: int,
    ) -> None:
        super().__init__(name=f"dupfind-worker-{worker_id}", daemon=True)
        self.worker_id = worker_id
        self.paths = paths
        self.records = records
        self.chunk_size = chunk_size
        self.hashed = 0
        self.failed = 0
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            for path in self.paths:
                try:
                    checksum = compute_sha256(path, chunk_size=self.chunk_size)
                except FileHashError as exc:
                    LOGGER.warning("Could not compute checksum for file %s: %s", path, exc.cause)
                    self.failed += 1
                    continue
                self.records.put(FileRecord(path=path, checksum=checksum))
                self.hashed += 1
        except Exception as exc:
            LOGGER.exception("Worker %d crashed", self.worker_id)
            self.error = exc


@dataclass(slots=True)
class PipelineStats:
    hashed: int = 0
    failed: int = 0


class HashingWorkerPool:
    """Fixed set of :class:`HashWorker` threads sharing two channels."""

    def __init__(
        self,
        paths: Channel[str],
        records: Channel[FileRecord],
        *,
        workers: int,
        chunk_size: int,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.workers = [
            HashWorker(i, paths, records, chunk_size=chunk_size) for i in range(workers)
        ]

    def start(self) -> None:
        for worker in self.workers:
            worker.start()

    def stats(self) -> PipelineStats:
        """Sum worker counters. Only meaningful once every worker has finished."""
        return PipelineStats(
            hashed=sum(worker.hashed for worker in self.workers),
            failed=sum(worker.failed for worker in self.workers),
        )

    @property
    def errors(self) -> list[BaseException]:
        return [worker.error for worker in self.workers if worker.error is not None]


class CompletionTracker(threading.Thread):
    """Closes ``records`` once every worker thread has terminated."""

    def __init__(self, workers: Sequence[threading.Thread], records: Channel[FileRecord]) -> None:
        super().__init__(name="dupfind-tracker", daemon=True)
        self.workers = list(workers)
        self.records = records

    def run(self) -> None:
        for worker in self.workers:
            worker.join()
        self.records.close()


class RecordPipeline:
    """Single-use pipeline producing one :class:`FileRecord` per hashed file.

    Records arrive in worker completion order. After the stream is exhausted,
    a traversal failure is raised as :class:`TraversalError` and a crashed
    worker as :class:`WorkerCrashError`.
    """

    def __init__(self, root: str | Path, config: AppConfig | None = None) -> None:
        self.root = root
        self.config = config or AppConfig()
        self.stats = PipelineStats()
        self._started = False

    def __iter__(self) -> Iterator[FileRecord]:
        if self._started:
            raise RuntimeError("RecordPipeline can only be iterated once")
        self._started = True
        return self._run()

    def _run(self) -> Iterator[FileRecord]:
        paths: Channel[str] = Channel()
        records: Channel[FileRecord] = Channel()

        walker = PathWalker(self.root, paths, follow_symlinks=self.config.follow_symlinks)
        pool = HashingWorkerPool(
            paths,
            records,
            workers=self.config.workers,
            chunk_size=self.config.chunk_size,
        )
        tracker = CompletionTracker(pool.workers, records)

        LOGGER.debug("Starting pipeline on %s with %d workers", self.root, self.config.workers)
        walker.start()
        pool.start()
        tracker.start()

        yield from records

        tracker.join()
        walker.join()
        self.stats = pool.stats()
        LOGGER.debug("Pipeline done: hashed %d, failed %d", self.stats.hashed, self.stats.failed)

        if walker.error is not None:
            raise walker.error
        errors = pool.errors
        if errors:
            raise WorkerCrashError(f"{len(errors)} hashing worker(s) crashed") from errors[0]

