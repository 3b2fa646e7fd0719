"""Bounded record of the byte offsets that delimit the lines of a window."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator, List


class LineStartIndex:
    """Ordered line boundaries with one more entry than lines in the window.

    The first entry is the offset where the window's first line starts, the
    last entry is the offset right after the window's last line. The index
    never evicts on its own: callers drop an entry from the opposite end
    before pushing onto a full index.
    """

    def __init__(self, capacity: int, offsets: Iterable[int] = ()) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._offsets: deque[int] = deque()
        for offset in offsets:
            self.push_back(offset)

    def push_front(self, offset: int) -> None:
        self._offsets.appendleft(offset)

    def push_back(self, offset: int) -> None:
        self._offsets.append(offset)

    def pop_front(self) -> int:
        return self._offsets.popleft()

    def pop_back(self) -> int:
        return self._offsets.pop()

    def first(self) -> int:
        """Return the first boundary, or 0 while nothing has been loaded."""
        return self._offsets[0] if self._offsets else 0

    def last(self) -> int:
        """Return the last boundary, or 0 while nothing has been loaded."""
        return self._offsets[-1] if self._offsets else 0

    def clear(self) -> None:
        self._offsets.clear()

    def is_full(self) -> bool:
        return len(self._offsets) >= self.capacity

    def copy(self) -> LineStartIndex:
        return LineStartIndex(self.capacity, self._offsets)

    def to_list(self) -> List[int]:
        return list(self._offsets)

    def __len__(self) -> int:
        return len(self._offsets)

    def __iter__(self) -> Iterator[int]:
        return iter(self._offsets)

    def __repr__(self) -> str:
        return f"LineStartIndex(capacity={self.capacity}, offsets={list(self._offsets)})"


__all__ = ["LineStartIndex"]
