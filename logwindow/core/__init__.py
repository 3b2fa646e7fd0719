"""Memory-bounded windowed access to the lines of a large text file."""

from __future__ import annotations

from logwindow.core.follow import LineFollower
from logwindow.core.line_starts import LineStartIndex
from logwindow.core.models import LoadMode, ReaderSettings, ReadResult, ReadStatus
from logwindow.core.reader import WindowedLineReader
from logwindow.core.source import (
    ByteSource,
    FileByteSource,
    MemoryByteSource,
    ShortReadError,
)

__all__ = [
    "WindowedLineReader",
    "LineFollower",
    "ReadResult",
    "ReadStatus",
    "LoadMode",
    "ReaderSettings",
    "LineStartIndex",
    "ByteSource",
    "FileByteSource",
    "MemoryByteSource",
    "ShortReadError",
]
