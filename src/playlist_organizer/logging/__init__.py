"""Structured logging: JSON formatter and setup."""

from playlist_organizer.logging.formatter import JSONLogFormatter
from playlist_organizer.logging.setup import configure_logging

__all__ = ["JSONLogFormatter", "configure_logging"]
