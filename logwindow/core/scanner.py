"""Chunked line scanners over a byte source.

``forward_step`` and ``backward_step`` split a single chunk into lines and
never touch I/O: the bytes of a line that spans chunks travel between calls
in the explicit ``carry`` accumulator. ``scan_forward`` and ``scan_backward``
drive them over a ``ByteSource``; ``find_line_start`` snaps an arbitrary
offset back to the start of the line containing it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from logwindow.core.constants import LINE_DELIMITER, TEXT_ENCODING
from logwindow.core.source import ByteSource

logger = logging.getLogger(__name__)


def decode_line(data: bytes) -> str:
    return data.decode(TEXT_ENCODING, errors="replace")


@dataclass
class ScanStep:
    """Outcome of splitting one chunk.

    ``offsets`` pairs with ``lines``. A forward step records the offset right
    after each line, a backward step the offset where each line starts.
    ``carry`` holds the bytes of the line that is still incomplete.
    """

    lines: List[str] = field(default_factory=list)
    offsets: List[int] = field(default_factory=list)
    carry: bytes = b""


@dataclass
class ScanResult:
    """Lines gathered by a full scan, in file order, with their offsets."""

    lines: List[str] = field(default_factory=list)
    offsets: List[int] = field(default_factory=list)


def forward_step(
    chunk: bytes, chunk_start: int, file_size: int, carry: bytes, wanted: int
) -> ScanStep:
    """Split ``chunk`` into at most ``wanted`` lines, moving toward file end.

    ``carry`` is the head of a line started in an earlier chunk. When the
    chunk reaches ``file_size`` the remaining bytes form the final line even
    without a trailing delimiter.
    """
    step = ScanStep()
    position = 0
    while len(step.lines) < wanted:
        newline = chunk.find(LINE_DELIMITER, position)
        if newline < 0:
            break
        step.lines.append(decode_line(carry + chunk[position:newline]))
        step.offsets.append(chunk_start + newline + 1)
        carry = b""
        position = newline + 1

    if len(step.lines) >= wanted:
        return step

    carry += chunk[position:]
    chunk_end = chunk_start + len(chunk)
    if chunk_end >= file_size and carry:
        step.lines.append(decode_line(carry))
        step.offsets.append(chunk_end)
        carry = b""
    step.carry = carry
    return step


def backward_step(
    chunk: bytes, chunk_start: int, carry: bytes, wanted: int
) -> ScanStep:
    """Split ``chunk`` into at most ``wanted`` lines, moving toward file start.

    ``carry`` is the tail of a line whose start lies in this chunk or an
    earlier one. Returned lines are in file order.
    """
    lines: List[str] = []
    starts: List[int] = []
    end = len(chunk)
    while len(lines) < wanted:
        newline = chunk.rfind(LINE_DELIMITER, 0, end)
        if newline < 0:
            break
        lines.append(decode_line(chunk[newline + 1 : end] + carry))
        starts.append(chunk_start + newline + 1)
        carry = b""
        end = newline

    if len(lines) < wanted:
        carry = chunk[:end] + carry
        if chunk_start == 0:
            # offset 0 always starts a line
            lines.append(decode_line(carry))
            starts.append(0)
            carry = b""
    else:
        carry = b""

    lines.reverse()
    starts.reverse()
    return ScanStep(lines=lines, offsets=starts, carry=carry)


def scan_forward(
    source: ByteSource, start: int, count: int, chunk_size: int
) -> ScanResult:
    """Read up to ``count`` lines starting at the line boundary ``start``.

    ``ScanResult.offsets`` holds the offset after each returned line.
    """
    file_size = source.size()
    result = ScanResult()
    if count <= 0 or start >= file_size:
        logger.debug(f"Nothing to read from offset {start}, file size {file_size}")
        return result

    position = start
    carry = b""
    while len(result.lines) < count and position < file_size:
        length = min(chunk_size, file_size - position)
        logger.debug(f"Reading chunk {position}..{position + length}")
        chunk = source.read_exact(position, length)
        step = forward_step(chunk, position, file_size, carry, count - len(result.lines))
        result.lines.extend(step.lines)
        result.offsets.extend(step.offsets)
        carry = step.carry
        position += length

    return result


def scan_backward(
    source: ByteSource, before: int, count: int, chunk_size: int
) -> ScanResult:
    """Read up to ``count`` lines ending before the line boundary ``before``.

    The delimiter at ``before - 1`` terminates the nearest line and does not
    open an empty one. ``ScanResult.offsets`` holds the start of each line.
    """
    result = ScanResult()
    if count <= 0 or before <= 0:
        logger.debug(f"Nothing to read before offset {before}")
        return result

    position = before
    carry = b""
    first_chunk = True
    while len(result.lines) < count and position > 0:
        chunk_start = max(0, position - chunk_size)
        logger.debug(f"Reading chunk {chunk_start}..{position}")
        chunk = source.read_exact(chunk_start, position - chunk_start)
        if first_chunk:
            first_chunk = False
            if chunk.endswith(LINE_DELIMITER):
                chunk = chunk[:-1]
        step = backward_step(chunk, chunk_start, carry, count - len(result.lines))
        result.lines[:0] = step.lines
        result.offsets[:0] = step.offsets
        carry = step.carry
        position = chunk_start

    return result


def find_line_start(source: ByteSource, offset: int, chunk_size: int) -> int:
    """Return the start of the line containing ``offset``.

    Offsets at or beyond end-of-file resolve to the current file length.
    """
    if offset <= 0:
        return 0
    file_size = source.size()
    if offset >= file_size:
        logger.debug(f"Offset {offset} is past end of file, using {file_size}")
        return file_size

    position = offset
    while position > 0:
        chunk_start = max(0, position - chunk_size)
        chunk = source.read_exact(chunk_start, position - chunk_start)
        newline = chunk.rfind(LINE_DELIMITER)
        if newline >= 0:
            return chunk_start + newline + 1
        position = chunk_start
    return 0


__all__ = [
    "ScanResult",
    "ScanStep",
    "backward_step",
    "decode_line",
    "find_line_start",
    "forward_step",
    "scan_backward",
    "scan_forward",
]
