"""Windowed, bidirectional line reader over a large and possibly growing file.

The reader keeps at most ``window_size`` decoded lines together with the
byte offsets that delimit them. ``top``, ``tail`` and ``refresh`` rebuild the
window from an anchor (REFRESH mode); ``move_up`` and ``move_down`` extend it
from the boundaries recorded by the previous call (MOVE mode).

``refresh`` may issue a second, backward read to fill a short window. The
file can change between the two reads and nothing locks it, so the two
halves of such a window are only as consistent as the file was across both
reads.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Sequence, Union

from logwindow.core.constants import DEFAULT_CHUNK_SIZE
from logwindow.core.line_starts import LineStartIndex
from logwindow.core.models import LoadMode, ReaderSettings, ReadResult
from logwindow.core.scanner import find_line_start, scan_backward, scan_forward
from logwindow.core.source import ByteSource, FileByteSource

logger = logging.getLogger(__name__)

SourceOpener = Callable[[Path], ByteSource]


class _WindowState:
    """Line-start index and the lines it delimits, staged for one operation."""

    def __init__(self, line_starts: LineStartIndex, lines: List[str]) -> None:
        self.line_starts = line_starts
        self.lines = lines

    def copy(self) -> _WindowState:
        return _WindowState(self.line_starts.copy(), list(self.lines))

    def reset(self, anchor: int) -> None:
        self.line_starts.clear()
        self.lines.clear()
        self.line_starts.push_back(anchor)

    def append(self, line: str, end: int) -> None:
        if self.line_starts.is_full():
            self.line_starts.pop_front()
            self.lines.pop(0)
        self.line_starts.push_back(end)
        self.lines.append(line)

    def prepend(self, line: str, start: int) -> None:
        if self.line_starts.is_full():
            self.line_starts.pop_back()
            self.lines.pop()
        self.line_starts.push_front(start)
        self.lines.insert(0, line)

    def extend_down(self, start: int, lines: Sequence[str], ends: Sequence[int]) -> None:
        """Append lines read forward from the continuation boundary ``start``.

        ``start`` is recorded again as the opening boundary of the extension
        and holds a slot of its own while the new boundaries are appended, so
        a full window gives up one more front line than it gains. Only one
        copy of it is kept in the stored offsets.
        """
        capacity = self.line_starts.capacity
        offsets = (self.line_starts.to_list() + [start] + list(ends))[-capacity:]
        kept = [
            offset
            for position, offset in enumerate(offsets)
            if position == 0 or offset != offsets[position - 1]
        ]
        held = self.lines + list(lines)
        self.line_starts = LineStartIndex(capacity, kept)
        self.lines = held[len(held) - (len(kept) - 1) :]


class WindowedLineReader:
    """Hold a bounded window of lines of ``path`` and slide it on request.

    Every operation opens the file, reads what it needs and closes it again.
    Operations return a ``ReadResult``; I/O problems make the result
    unavailable and leave the previous window untouched. One call at a time
    per instance.
    """

    def __init__(
        self,
        path: Union[str, Path],
        window_size: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        opener: SourceOpener = FileByteSource,
    ) -> None:
        self.settings = ReaderSettings(
            path=path, window_size=window_size, chunk_size=chunk_size
        )
        self._opener = opener
        # one extra boundary closes the window's last line
        self._state = _WindowState(LineStartIndex(window_size + 1), [])

    @property
    def file(self) -> Path:
        return self.settings.path

    @property
    def window_size(self) -> int:
        return self.settings.window_size

    @property
    def chunk_size(self) -> int:
        return self.settings.chunk_size

    @property
    def window(self) -> List[str]:
        """Lines of the committed window, in file order."""
        return list(self._state.lines)

    @property
    def line_starts(self) -> List[int]:
        """Offsets delimiting the committed window."""
        return self._state.line_starts.to_list()

    def top(self) -> ReadResult:
        return self.load_from_top(0, self.window_size, LoadMode.REFRESH)

    def tail(self) -> ReadResult:
        return self._execute(
            "tail",
            lambda source, state: self._load_from_bottom(
                source, state, source.size(), self.window_size, LoadMode.REFRESH
            ),
        )

    def move_up(self, lines: int) -> ReadResult:
        return self.load_from_bottom(
            self._state.line_starts.first(), lines, LoadMode.MOVE
        )

    def move_down(self, lines: int) -> ReadResult:
        return self.load_from_top(self._state.line_starts.last(), lines, LoadMode.MOVE)

    def refresh(self) -> ReadResult:
        """Re-read the window from its first line, backfilling if it came up short."""
        anchor = self._state.line_starts.first()

        def _load(source: ByteSource, state: _WindowState) -> List[str]:
            lines = self._load_from_top(
                source, state, anchor, self.window_size, LoadMode.REFRESH
            )
            if len(lines) < self.window_size:
                logger.debug(
                    f"Refresh returned {len(lines)} of {self.window_size} lines, "
                    "loading more from above"
                )
                extra = self._load_from_bottom(
                    source,
                    state,
                    state.line_starts.first(),
                    self.window_size - len(lines),
                    LoadMode.MOVE,
                )
                lines = extra + lines
            return lines

        return self._execute("refresh", _load)

    def load_from_top(self, start: int, lines: int, mode: LoadMode) -> ReadResult:
        """Read up to ``lines`` lines forward from ``start``."""
        return self._execute(
            "load_from_top",
            lambda source, state: self._load_from_top(source, state, start, lines, mode),
        )

    def load_from_bottom(self, before: int, lines: int, mode: LoadMode) -> ReadResult:
        """Read up to ``lines`` lines ending before the boundary ``before``."""
        return self._execute(
            "load_from_bottom",
            lambda source, state: self._load_from_bottom(
                source, state, before, lines, mode
            ),
        )

    def _execute(
        self, name: str, load: Callable[[ByteSource, _WindowState], List[str]]
    ) -> ReadResult:
        staged = self._state.copy()
        try:
            if not self.file.is_file():
                logger.debug(f"{name}: {self.file} is not a regular file")
                return ReadResult.unavailable()
            with self._opener(self.file) as source:
                lines = load(source, staged)
        except OSError as e:
            logger.warning(f"Error reading file [{self.file}]: {e}")
            return ReadResult.unavailable()

        self._state = staged
        logger.debug(f"{name}: loaded {len(lines)} lines from {self.file}")
        logger.debug(f"Line starts: {staged.line_starts.to_list()}")
        return ReadResult.of(lines)

    def _load_from_top(
        self,
        source: ByteSource,
        state: _WindowState,
        start: int,
        count: int,
        mode: LoadMode,
    ) -> List[str]:
        if mode == LoadMode.REFRESH:
            start = find_line_start(source, start, self.chunk_size)
            state.reset(start)

        logger.debug(f"Loading {count} lines from offset {start}, file: {self.file}")
        result = scan_forward(source, start, count, self.chunk_size)

        if mode == LoadMode.REFRESH:
            for line, end in zip(result.lines, result.offsets):
                state.append(line, end)
        elif result.lines:
            state.extend_down(start, result.lines, result.offsets)
        return result.lines

    def _load_from_bottom(
        self,
        source: ByteSource,
        state: _WindowState,
        before: int,
        count: int,
        mode: LoadMode,
    ) -> List[str]:
        if mode == LoadMode.REFRESH:
            before = find_line_start(source, before, self.chunk_size)
            state.reset(before)

        logger.debug(f"Loading {count} lines before offset {before}, file: {self.file}")
        result = scan_backward(source, before, count, self.chunk_size)

        for line, start in zip(reversed(result.lines), reversed(result.offsets)):
            state.prepend(line, start)
        return result.lines


__all__ = ["WindowedLineReader"]
