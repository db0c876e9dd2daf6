"""Discover and read Markdown handbooks from disk."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, Iterator

from handbook_lint.exceptions import LoaderError
from handbook_lint.pipeline import SourceDocument

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


def iter_markdown_paths(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield Markdown files from files and directories, sorted per directory.

    Raises:
        LoaderError: If a path does not exist.
    """
    for path in paths:
        if path.is_file():
            yield path
        elif path.is_dir():
            yield from sorted(
                candidate
                for candidate in path.rglob("*")
                if candidate.is_file() and candidate.suffix.lower() in MARKDOWN_SUFFIXES
            )
        else:
            raise LoaderError(f"No such file or directory: {path}")


async def read_bytes_async(path: Path) -> bytes:
    """Read a file asynchronously using a thread pool.

    Args:
        path: Path to the file to read.

    Returns:
        The raw file contents. Decoding is left to the pipeline so that an
        encoding failure becomes a per-document fatal finding.

    Raises:
        LoaderError: If the file cannot be read.
    """
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise LoaderError(f"Failed to read {path}: {exc}") from exc


async def load_sources(paths: Iterable[Path]) -> list[SourceDocument]:
    """Read every Markdown file under ``paths`` into source documents."""
    files = list(iter_markdown_paths(paths))
    contents = await asyncio.gather(*(read_bytes_async(path) for path in files))
    return [SourceDocument(id=path.as_posix(), content=content) for path, content in zip(files, contents)]
