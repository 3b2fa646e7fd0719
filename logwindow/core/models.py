"""Value types shared by the windowed line reader."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List

from pydantic import BaseModel, ConfigDict, Field

from logwindow.core.constants import DEFAULT_CHUNK_SIZE


class LoadMode(str, Enum):
    """How a scan treats the boundaries recorded by earlier calls."""

    MOVE = "move"  # Extend the current window from a recorded boundary
    REFRESH = "refresh"  # Rebuild the window from a resolved anchor


class ReadStatus(str, Enum):
    LINES = "lines"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ReadResult:
    """Outcome of one reader operation.

    An empty result means the file was read and there was nothing to return;
    an unavailable one means it could not be read at all.
    """

    status: ReadStatus
    lines: List[str] = field(default_factory=list)

    @classmethod
    def of(cls, lines: List[str]) -> ReadResult:
        status = ReadStatus.LINES if lines else ReadStatus.EMPTY
        return cls(status=status, lines=list(lines))

    @classmethod
    def unavailable(cls) -> ReadResult:
        return cls(status=ReadStatus.UNAVAILABLE)

    @property
    def available(self) -> bool:
        return self.status != ReadStatus.UNAVAILABLE

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)


class ReaderSettings(BaseModel):
    """Construction-time settings of a reader, fixed for its lifetime."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="File to read")
    window_size: int = Field(..., gt=0, description="Maximum lines held in memory")
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, gt=0, description="Bytes requested per read"
    )


__all__ = ["LoadMode", "ReadResult", "ReadStatus", "ReaderSettings"]
