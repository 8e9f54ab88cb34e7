"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_WORKERS = 4
DEFAULT_CHUNK_SIZE = 1 << 20


@dataclass(slots=True)
class AppConfig:
    workers: int = DEFAULT_WORKERS
    chunk_size: int = DEFAULT_CHUNK_SIZE
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")

    @staticmethod
    def resolve_index_path(index_path: Path, base_dir: Path | None = None) -> Path:
        if Path(index_path).is_absolute() or base_dir is None:
            return Path(index_path)
        return base_dir / index_path
