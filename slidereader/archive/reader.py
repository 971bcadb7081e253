"""
In-memory access to the entries of an OOXML presentation package.
"""

from __future__ import annotations

import io
import re
import zipfile
import zlib
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from loguru import logger

from slidereader.core.errors import CorruptArchiveError, EntryNotFoundError

CONTENT_TYPES_ENTRY = "[Content_Types].xml"


class Archive:
    """Immutable index of archive entry names to their decompressed bytes."""

    def __init__(self, entries: Mapping[str, bytes]) -> None:
        self._entries = MappingProxyType(dict(entries))

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def list_entries(self, pattern: str | re.Pattern[str]) -> list[str]:
        """Return the entry names fully matching ``pattern``, sorted by name."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return sorted(name for name in self._entries if regex.fullmatch(name))

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._entries[path]
        except KeyError:
            raise EntryNotFoundError(path) from None

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return self.read_bytes(path).decode(encoding)


class ArchiveReader:
    """Opens presentation packages into :class:`Archive` instances."""

    def open(self, data: bytes) -> Archive:
        """
        Decompress every entry of a package held in memory.

        Raises:
            CorruptArchiveError: if the bytes are not a ZIP container, a member
                fails to decompress, or the container is not an OOXML package.
        """
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                entries = {
                    info.filename: zf.read(info)
                    for info in zf.infolist()
                    if not info.is_dir()
                }
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,
            RuntimeError,
            ValueError,
            OSError,
        ) as e:
            raise CorruptArchiveError(f"Unreadable presentation archive: {e}") from e

        if CONTENT_TYPES_ENTRY not in entries:
            raise CorruptArchiveError(
                f"Not an OOXML package: missing {CONTENT_TYPES_ENTRY}"
            )

        logger.debug(f"Opened archive with {len(entries)} entries")
        return Archive(entries)

    def open_path(self, path: str | Path) -> Archive:
        return self.open(Path(path).read_bytes())
