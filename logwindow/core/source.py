"""Byte sources the scanners read from.

A source is opened for the duration of one reader operation and closed when
the operation returns. ``FileByteSource`` reads a file on disk,
``MemoryByteSource`` serves bytes held in memory so scans can be exercised
without touching the filesystem.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union


class ShortReadError(OSError):
    """A read returned fewer bytes than the scanned region promised.

    This happens when the file shrinks while it is being scanned.
    """


class ByteSource(ABC):
    """Read-only, byte addressable view of a file."""

    @abstractmethod
    def size(self) -> int:
        """Current length in bytes."""

    @abstractmethod
    def read_at(self, offset: int, count: int) -> bytes:
        """Read up to ``count`` bytes starting at ``offset``."""

    def close(self) -> None:
        pass

    def read_exact(self, offset: int, count: int) -> bytes:
        """Read exactly ``count`` bytes or raise ``ShortReadError``."""
        data = self.read_at(offset, count)
        if len(data) != count:
            raise ShortReadError(
                f"expected {count} bytes at offset {offset}, got {len(data)}"
            )
        return data

    def __enter__(self) -> ByteSource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FileByteSource(ByteSource):
    """Byte source over a regular file opened in binary mode."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._handle = open(self.path, "rb")

    def size(self) -> int:
        return os.fstat(self._handle.fileno()).st_size

    def read_at(self, offset: int, count: int) -> bytes:
        self._handle.seek(offset)
        return self._handle.read(count)

    def close(self) -> None:
        self._handle.close()


class MemoryByteSource(ByteSource):
    """In-memory byte source, mainly for tests."""

    def __init__(self, data: bytes = b"") -> None:
        self.data = bytearray(data)
        self.reads = 0

    def size(self) -> int:
        return len(self.data)

    def read_at(self, offset: int, count: int) -> bytes:
        self.reads += 1
        return bytes(self.data[offset : offset + count])


__all__ = ["ByteSource", "FileByteSource", "MemoryByteSource", "ShortReadError"]
