"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from dupfind.config import AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.workers == 4
        assert config.chunk_size == 1 << 20
        assert config.follow_symlinks is False

    def test_custom_config(self) -> None:
        """Should create config with custom values."""
        config = AppConfig(workers=8, chunk_size=4096, follow_symlinks=True)

        assert config.workers == 8
        assert config.chunk_size == 4096
        assert config.follow_symlinks is True

    @pytest.mark.parametrize("workers", [0, -1])
    def test_rejects_non_positive_workers(self, workers: int) -> None:
        with pytest.raises(ValueError, match="workers"):
            AppConfig(workers=workers)

    def test_rejects_non_positive_chunk_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_size"):
            AppConfig(chunk_size=0)

    def test_resolve_index_path_absolute(self) -> None:
        """Should return absolute path as-is."""
        resolved = AppConfig.resolve_index_path(Path("/absolute/index.json"), Path("/base"))

        assert resolved == Path("/absolute/index.json")

    def test_resolve_index_path_relative_no_base(self) -> None:
        resolved = AppConfig.resolve_index_path(Path("relative/index.json"))

        assert resolved == Path("relative/index.json")

    def test_resolve_index_path_relative_with_base(self) -> None:
        """Should resolve relative path against base_dir."""
        resolved = AppConfig.resolve_index_path(Path("relative/index.json"), Path("/base"))

        assert resolved == Path("/base/relative/index.json")
