"""Command line interface for dupfind."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from dupfind.config import AppConfig
from dupfind.errors import DupfindError
from dupfind.index.indexer import Indexer
from dupfind.index.search import ChecksumIndex


console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="dupfind - content checksum index and duplicate finder")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_index_parent(index_path: Path) -> None:
    index_path.parent.mkdir(parents=True, exist_ok=True)


def _printable(text: str) -> str:
    # Undecodable file name bytes come back as lone surrogates.
    return os.fsencode(text).decode("utf-8", "backslashreplace")


def _fail(exc: Exception) -> None:
    message = escape(_printable(str(exc)))
    err_console.print(f"[red]Error:[/red] {message}", soft_wrap=True, highlight=False)
    raise typer.Exit(code=1)


@app.command()
def build(
    path: Path = typer.Argument(..., help="Directory to index."),
    index: Path = typer.Argument(..., help="Index file."),
    workers: int = typer.Option(
        AppConfig().workers, "--workers", "-j", min=1, help="Number of parallel workers"
    ),
    follow_symlinks: bool = typer.Option(
        False, "--follow-symlinks", help="Descend into symlinked directories"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build an index of file checksums."""
    _setup_logging(verbose)
    config = AppConfig(workers=workers, follow_symlinks=follow_symlinks)
    destination = config.resolve_index_path(index, Path.cwd())

    try:
        _ensure_index_parent(destination)
        result = Indexer(config).build(path, destination)
    except (DupfindError, OSError) as exc:
        _fail(exc)

    console.print(f"Index file {_printable(str(index))} written.", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Records: {len(result.records)}, failed: {result.stats.failed}", highlight=False)


@app.command()
def find(
    path: Path = typer.Argument(..., help="Directory of files to look up."),
    index: Path = typer.Argument(..., help="Index file."),
    workers: int = typer.Option(
        AppConfig().workers, "--workers", "-j", min=1, help="Number of parallel workers"
    ),
    short: bool = typer.Option(False, "--short", help="For duplicate files, only print out path"),
    follow_symlinks: bool = typer.Option(
        False, "--follow-symlinks", help="Descend into symlinked directories"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Look up files in an index and report duplicates."""
    _setup_logging(verbose)
    config = AppConfig(workers=workers, follow_symlinks=follow_symlinks)

    try:
        checksums = ChecksumIndex.load(config.resolve_index_path(index, Path.cwd()))
        for duplicate in Indexer(config).find(path, checksums):
            if short:
                line = _printable(os.path.basename(duplicate.record.path))
            else:
                line = (
                    f"File {_printable(duplicate.record.path)} is duplicate with "
                    f"index file {_printable(duplicate.indexed_path)}"
                )
            console.print(line, markup=False, highlight=False, soft_wrap=True)
    except DupfindError as exc:
        _fail(exc)
