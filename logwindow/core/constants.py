"""Core constants for windowed line reading."""

# Bytes requested per read call
DEFAULT_CHUNK_SIZE = 4096

# Lines resident in the window when nothing else is configured
DEFAULT_WINDOW_SIZE = 100

LINE_DELIMITER = b"\n"

TEXT_ENCODING = "utf-8"

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_WINDOW_SIZE",
    "LINE_DELIMITER",
    "TEXT_ENCODING",
]
