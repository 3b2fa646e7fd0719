"""logwindow: page through large, growing log files with bounded memory."""

__version__ = "0.1.0"
