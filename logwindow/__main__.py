"""Command-line interface entrypoint for logwindow."""

from __future__ import annotations

import time
from typing import Optional

import click

from .config import get_config
from .core.follow import LineFollower
from .core.models import ReadResult
from .core.reader import WindowedLineReader
from .utils.logging_setup import setup_logging


def _build_reader(path: str, lines: Optional[int], chunk_size: Optional[int]) -> WindowedLineReader:
    config = get_config()
    return WindowedLineReader(
        path,
        window_size=lines or config.reader.window_size,
        chunk_size=chunk_size or config.reader.chunk_size,
    )


def _emit(ctx: click.Context, result: ReadResult, path: str) -> None:
    if not result.available:
        click.echo(f"Error: cannot read {path}", err=True)
        ctx.exit(1)
    for line in result.lines:
        click.echo(line)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from config).")
def cli(log_level: Optional[str]) -> None:
    """Page through large log files without loading them into memory."""
    config = get_config()
    setup_logging(log_level or config.logging.log_level, config.logging.log_file)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--lines", "-n", type=click.IntRange(min=1), default=None, help="Lines to show.")
@click.option("--chunk-size", type=click.IntRange(min=1), default=None, help="Bytes per read.")
@click.pass_context
def top(ctx: click.Context, path: str, lines: Optional[int], chunk_size: Optional[int]) -> None:
    """Print the first lines of PATH."""
    reader = _build_reader(path, lines, chunk_size)
    _emit(ctx, reader.top(), path)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--lines", "-n", type=click.IntRange(min=1), default=None, help="Lines to show.")
@click.option("--chunk-size", type=click.IntRange(min=1), default=None, help="Bytes per read.")
@click.option("--follow", "-f", is_flag=True, help="Keep printing lines as the file grows.")
@click.option("--interval", type=float, default=None, help="Seconds between polls with --follow.")
@click.pass_context
def tail(
    ctx: click.Context,
    path: str,
    lines: Optional[int],
    chunk_size: Optional[int],
    follow: bool,
    interval: Optional[float],
) -> None:
    """Print the last lines of PATH."""
    reader = _build_reader(path, lines, chunk_size)
    if not follow:
        _emit(ctx, reader.tail(), path)
        return

    follower = LineFollower(reader)
    _emit(ctx, follower.start(), path)
    interval = interval or get_config().reader.follow_interval
    try:
        while True:
            time.sleep(interval)
            for line in follower.poll().lines:
                click.echo(line)
    except KeyboardInterrupt:
        pass


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("page", type=click.IntRange(min=0))
@click.option("--lines", "-n", type=click.IntRange(min=1), default=None, help="Lines per page.")
@click.option("--chunk-size", type=click.IntRange(min=1), default=None, help="Bytes per read.")
@click.pass_context
def page(
    ctx: click.Context, path: str, page: int, lines: Optional[int], chunk_size: Optional[int]
) -> None:
    """Print page PAGE (0 based) of PATH."""
    reader = _build_reader(path, lines, chunk_size)
    result = reader.top()
    for _ in range(page):
        if not result.lines:
            break
        result = reader.move_down(reader.window_size)
    _emit(ctx, result, path)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
