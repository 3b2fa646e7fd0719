"""Follow a growing file, emitting only lines that have been completed.

A writer may be caught halfway through a line. The reader treats end-of-file
as the end of that line, so the follower holds it back and reads it again
from its start on the next poll, once its delimiter has arrived.

The file is read from its tail again when it shrinks below the followed
position or is replaced by another file (a new inode). A file rewritten in
place to an equal or larger size is not detected.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from logwindow.core.constants import LINE_DELIMITER
from logwindow.core.models import LoadMode, ReadResult
from logwindow.core.reader import SourceOpener, WindowedLineReader
from logwindow.core.source import FileByteSource

logger = logging.getLogger(__name__)


class LineFollower:
    """Poll a reader for lines appended after the ones already emitted."""

    def __init__(
        self, reader: WindowedLineReader, opener: SourceOpener = FileByteSource
    ) -> None:
        self.reader = reader
        self._opener = opener
        self.position = 0
        self._inode: Optional[int] = None

    def start(self) -> ReadResult:
        """Emit the last complete lines of the file."""
        return self._complete(self.reader.tail())

    def poll(self) -> ReadResult:
        """Emit lines completed since the previous call, at most a window's worth."""
        try:
            stat = os.stat(self.reader.file)
        except OSError as e:
            logger.debug(f"Cannot stat {self.reader.file}: {e}")
            return ReadResult.unavailable()

        if stat.st_size < self.position:
            logger.warning(f"{self.reader.file} was truncated, reading from its tail")
            return self.start()
        if self._inode is not None and stat.st_ino != self._inode:
            logger.warning(f"{self.reader.file} was replaced, reading from its tail")
            return self.start()

        return self._complete(
            self.reader.load_from_top(
                self.position, self.reader.window_size, LoadMode.REFRESH
            )
        )

    def _complete(self, result: ReadResult) -> ReadResult:
        if not result.available:
            return result

        lines: List[str] = list(result.lines)
        starts = self.reader.line_starts
        try:
            inode = os.stat(self.reader.file).st_ino
            held_back = bool(lines) and not self._terminated(starts[-1])
        except OSError as e:
            logger.warning(f"Error reading file [{self.reader.file}]: {e}")
            return ReadResult.unavailable()

        self._inode = inode
        if held_back:
            logger.debug(f"Holding back unterminated line at offset {starts[-2]}")
            lines.pop()
            self.position = starts[-2]
        else:
            self.position = starts[-1] if starts else 0
        return ReadResult.of(lines)

    def _terminated(self, end: int) -> bool:
        with self._opener(self.reader.file) as source:
            return source.read_exact(end - 1, 1) == LINE_DELIMITER


__all__ = ["LineFollower"]
