"""JSON log formatter that renders session context carried in ``extra``."""

import json
import logging
from datetime import UTC, datetime
from typing import Any

# Scalar context copied verbatim when a caller sets it via ``extra``.
CONTEXT_FIELDS = ("playlist_id", "auth_state")


class JSONLogFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects.

    Besides the fixed keys, two kinds of session context are rendered:

    - ``playlist_id`` and ``auth_state`` from ``extra``, when set;
    - ``progress``: any object with ``playlist`` and ``items`` counters
      (``pos``/``total``), such as
      :class:`~playlist_organizer.spotify.client.CacheProgress`, is flattened
      into ``{"playlist": "1/3", "items": "50/120", "percent": 41.7}``.

    Example::

        {"timestamp": "...", "level": "INFO", "service": "playlist-organizer",
         "logger": "playlist_organizer.main", "message": "Caching playlist",
         "playlist_id": "37i9...", "progress": {"playlist": "1/3", ...}}
    """

    def __init__(self, service: str = "playlist-organizer") -> None:
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value:
                entry[name] = str(value)

        progress = getattr(record, "progress", None)
        if progress is not None:
            entry["progress"] = _render_progress(progress)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _render_progress(progress: Any) -> dict[str, object]:
    playlist = progress.playlist
    items = progress.items
    rendered: dict[str, object] = {
        "playlist": f"{playlist.pos}/{playlist.total}",
        "items": f"{items.pos}/{items.total}",
    }
    if items.total:
        rendered["percent"] = round(100 * items.pos / items.total, 1)
    return rendered
