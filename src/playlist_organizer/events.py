"""Change notifications emitted when the session cache is updated."""

import enum
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class SessionEvent(enum.StrEnum):
    """Kinds of session state change."""

    PLAYLISTS_UPDATED = "playlists_updated"
    PLAYLIST_ITEMS_UPDATED = "playlist_items_updated"
    SELECTION_SAVED = "selection_saved"
    SONG_TABLE_REBUILT = "song_table_rebuilt"


Listener = Callable[[SessionEvent, Any], None]


class ChangeNotifier:
    """Synchronous observer list.

    Usage::

        notifier = ChangeNotifier()
        notifier.subscribe(lambda event, payload: print(event, payload))
        notifier.emit(SessionEvent.SELECTION_SAVED, ("p1", "p2"))

    Listeners run in subscription order; an exception raised by a listener
    propagates to the caller of :meth:`emit`.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: SessionEvent, payload: Any = None) -> None:
        logger.debug("Emitting %s to %d listener(s)", event, len(self._listeners))
        for listener in list(self._listeners):
            listener(event, payload)
