"""Tests for WindowedLineReader against files that change between calls,
and for its failure handling."""

from __future__ import annotations

from pathlib import Path
from typing import List

from logwindow.core.models import ReadStatus
from logwindow.core.reader import WindowedLineReader
from logwindow.core.source import FileByteSource


def _lines(start: int, stop: int) -> List[str]:
    return [f"line{i}" for i in range(start, stop)]


def _content(start: int, stop: int) -> bytes:
    return "".join(f"{line}\n" for line in _lines(start, stop)).encode()


class FlakySource(FileByteSource):
    """File source that fails once a shared read budget is used up."""

    def __init__(self, path: Path, budget: dict) -> None:
        super().__init__(path)
        self.budget = budget
        self.budget.setdefault("closed", 0)

    def read_at(self, offset: int, count: int) -> bytes:
        if self.budget["reads"] is not None:
            if self.budget["reads"] <= 0:
                raise OSError("simulated disk error")
            self.budget["reads"] -= 1
        return super().read_at(offset, count)

    def close(self) -> None:
        self.budget["closed"] += 1
        super().close()


def _flaky_reader(path: Path, window_size: int, chunk_size: int = 4096):
    budget = {"reads": None}
    reader = WindowedLineReader(
        path,
        window_size=window_size,
        chunk_size=chunk_size,
        opener=lambda p: FlakySource(p, budget),
    )
    return reader, budget


class TestGrowingFile:
    """Appends between calls."""

    def test_refresh_after_growth_keeps_anchor(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 10))
        reader = WindowedLineReader(path, window_size=3)
        assert reader.tail().lines == _lines(7, 10)

        with open(path, "ab") as f:
            f.write(_content(10, 12))

        assert reader.refresh().lines == _lines(7, 10)

    def test_refresh_fills_window_once_file_grows(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 2))
        reader = WindowedLineReader(path, window_size=4)
        assert reader.top().lines == _lines(0, 2)

        with open(path, "ab") as f:
            f.write(_content(2, 6))

        assert reader.refresh().lines == _lines(0, 4)

    def test_move_down_follows_appends(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 5))
        reader = WindowedLineReader(path, window_size=3)
        reader.tail()
        assert reader.move_down(3).lines == []

        with open(path, "ab") as f:
            f.write(_content(5, 7))

        assert reader.move_down(3).lines == _lines(5, 7)
        assert reader.move_down(3).lines == []


class TestShrinkingFile:
    """Truncation and rewrites between calls."""

    def test_refresh_after_truncation_below_window(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 10))
        reader = WindowedLineReader(path, window_size=3)
        reader.tail()

        path.write_bytes(_content(0, 5))

        assert reader.refresh().lines == _lines(2, 5)
        assert reader.line_starts[-1] == path.stat().st_size

    def test_refresh_backfills_short_window(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 5))
        reader = WindowedLineReader(path, window_size=3)
        assert reader.tail().lines == _lines(2, 5)

        path.write_bytes(_content(0, 4))

        assert reader.refresh().lines == _lines(1, 4)
        assert reader.window == _lines(1, 4)

    def test_refresh_realigns_to_line_start_after_rewrite(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(b"aaaa\nbbbb\ncccc\n")
        reader = WindowedLineReader(path, window_size=2)
        reader.tail()
        assert reader.line_starts[0] == 5

        path.write_bytes(b"a\nxxxxxxx\nyy\n")

        assert reader.refresh().lines == ["xxxxxxx", "yy"]
        assert reader.line_starts == [2, 10, 13]

    def test_refresh_on_emptied_file(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 4))
        reader = WindowedLineReader(path, window_size=2)
        reader.tail()

        path.write_bytes(b"")

        result = reader.refresh()
        assert result.status == ReadStatus.EMPTY
        assert reader.window == []


class TestUnavailable:
    """Unreadable files and I/O failures."""

    def test_missing_file(self, tmp_path: Path):
        reader = WindowedLineReader(tmp_path / "missing.log", window_size=3)

        for result in (
            reader.top(),
            reader.tail(),
            reader.move_up(1),
            reader.move_down(1),
            reader.refresh(),
        ):
            assert not result.available
            assert result.status == ReadStatus.UNAVAILABLE
            assert result.lines == []

    def test_directory_is_not_a_regular_file(self, tmp_path: Path):
        reader = WindowedLineReader(tmp_path, window_size=3)

        assert reader.top().status == ReadStatus.UNAVAILABLE

    def test_stat_failure_is_unavailable(self, tmp_path: Path):
        reader = WindowedLineReader(tmp_path / ("x" * 300), window_size=3)

        for result in (reader.top(), reader.tail(), reader.refresh()):
            assert result.status == ReadStatus.UNAVAILABLE
        assert reader.line_starts == []

    def test_deleted_file_keeps_previous_window(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 6))
        reader = WindowedLineReader(path, window_size=3)
        reader.top()
        window, starts = reader.window, reader.line_starts

        path.unlink()

        assert not reader.move_down(3).available
        assert reader.window == window
        assert reader.line_starts == starts

    def test_read_error_mid_scan_commits_nothing(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 20))
        reader, budget = _flaky_reader(path, window_size=4, chunk_size=8)
        assert reader.top().lines == _lines(0, 4)
        window, starts = reader.window, reader.line_starts

        budget["reads"] = 1
        result = reader.move_down(4)

        assert result.status == ReadStatus.UNAVAILABLE
        assert reader.window == window
        assert reader.line_starts == starts

        budget["reads"] = None
        assert reader.move_down(4).lines == _lines(4, 8)

    def test_refresh_is_atomic_when_backfill_fails(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 5))
        reader, budget = _flaky_reader(path, window_size=3, chunk_size=4096)
        reader.tail()
        window, starts = reader.window, reader.line_starts

        path.write_bytes(_content(0, 4))
        # resolving the anchor and the forward scan each take one read
        budget["reads"] = 2
        result = reader.refresh()

        assert result.status == ReadStatus.UNAVAILABLE
        assert reader.window == window
        assert reader.line_starts == starts

    def test_source_closed_on_every_exit(self, tmp_path: Path):
        path = tmp_path / "app.log"
        path.write_bytes(_content(0, 3))
        reader, budget = _flaky_reader(path, window_size=2)

        reader.top()
        budget["reads"] = 0
        reader.tail()

        assert budget["closed"] == 2
