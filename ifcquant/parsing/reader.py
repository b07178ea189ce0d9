"""Bounded incremental reading of a STEP file.

Only a prefix of the file is ever parsed.  The window starts at one chunk;
when too few elements come out it grows by one chunk and the larger prefix is
parsed again from the start, until enough elements are found, the whole file
fits, or the byte cap is reached.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from ifcquant.config import ReaderSettings
from ifcquant.models.element import Element

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes]

# parse(text, keep_tail) -> elements
ParseFn = Callable[[str, bool], Sequence[Element]]


class IfcQuantError(Exception):
    """Base class for errors surfaced to callers of ifcquant."""


class NoEntitiesFoundError(IfcQuantError):
    """Raised when the whole read policy produced zero entities."""


class SourceReadError(IfcQuantError):
    """Raised when the source file cannot be read."""


@dataclass
class ReadResult:
    """Elements parsed from the final read window."""

    elements: list[Element] = field(default_factory=list)
    bytes_read: int = 0
    truncated: bool = False


def _read_file_prefix(path: Path, size: int) -> tuple[bytes, int]:
    total = path.stat().st_size
    with path.open("rb") as fh:
        return fh.read(size), total


async def read_prefix(source: Source, size: int) -> tuple[bytes, int]:
    """Return the first *size* bytes of *source* and its total length."""
    if isinstance(source, bytes):
        return source[:size], len(source)

    path = Path(source)
    try:
        return await asyncio.to_thread(_read_file_prefix, path, size)
    except OSError as exc:
        raise SourceReadError(f"Cannot read {path}: {exc}") from exc


def decode(data: bytes) -> str:
    """Decode STEP bytes, dropping a leading BOM and any multi-byte character
    cut by the window.
    """
    return data.decode("utf-8-sig", errors="ignore")


class IncrementalReader:
    """Grow-and-reparse reader.

    Parameters
    ----------
    settings:
        Chunk size, byte cap, and element threshold.  Defaults to
        :class:`~ifcquant.config.ReaderSettings` defaults.
    """

    def __init__(self, settings: ReaderSettings | None = None) -> None:
        self.settings = settings or ReaderSettings()
        if self.settings.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

    async def read(self, source: Source, parse: ParseFn) -> ReadResult:
        """Parse the smallest sufficient prefix of *source*.

        Raises
        ------
        NoEntitiesFoundError
            No element was found within the byte cap.
        SourceReadError
            The file could not be read.
        """
        chunk = self.settings.chunk_size
        cap = max(self.settings.max_bytes, chunk)
        window = chunk

        while True:
            data, total = await read_prefix(source, window)
            truncated = total > len(data)
            elements = list(parse(decode(data), not truncated))
            logger.debug(
                "Read window %d bytes (%d of %d): %d elements",
                window, len(data), total, len(elements),
            )

            if len(elements) >= self.settings.min_elements or not truncated or window >= cap:
                break
            window = min(window + chunk, cap)

        if not elements:
            raise NoEntitiesFoundError("No valid IFC entities found in the file")

        logger.info(
            "Parsed %d elements from %d bytes%s",
            len(elements), len(data), " (truncated)" if truncated else "",
        )
        return ReadResult(elements=elements, bytes_read=len(data), truncated=truncated)
