"""Structured logging configuration."""

import logging
import sys

from playlist_organizer.logging.formatter import JSONLogFormatter


def configure_logging(level: str | int = logging.INFO, service: str = "playlist-organizer") -> None:
    """Set up structured JSON logging on the root logger."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONLogFormatter(service=service))
    root.addHandler(handler)
