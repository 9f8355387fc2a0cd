"""Session-lifetime caches: Spotify API data, the playlist selection and the song table.

Nothing here performs I/O. :class:`~playlist_organizer.spotify.client.SpotifyClient`
is the only writer; everything lives for as long as the owning
:class:`SpotifySession` and is rebuilt from scratch in a new session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from playlist_organizer.spotify.models import Playlist, PlaylistItem, PlaylistsPage

logger = logging.getLogger(__name__)

SongTable = dict[str, dict[str, bool]]


class APICache:
    """In-memory store of everything fetched from Spotify, keyed by entity id.

    - **Playlists:** one stored page, present or absent (no TTL), plus a by-id map.
    - **Playlist items:** an ordered list per playlist, grown page by page,
      with the server-reported total to tell when it is complete.
    - **Tracks:** a by-key map shared by all playlists (last write wins).
    """

    def __init__(self) -> None:
        self.playlists: PlaylistsPage | None = None
        self.playlist_map: dict[str, Playlist] = {}
        self.playlist_items: dict[str, list[PlaylistItem]] = {}
        self.playlist_totals: dict[str, int] = {}
        self.track_map: dict[str, PlaylistItem] = {}

    # ------------------------------------------------------------------
    # Point lookups
    # ------------------------------------------------------------------

    def get_playlist(self, playlist_id: str) -> Playlist | None:
        return self.playlist_map.get(playlist_id)

    def get_track(self, track_key: str) -> PlaylistItem | None:
        return self.track_map.get(track_key)

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    def store_playlists(self, page: PlaylistsPage) -> None:
        """Overwrite the stored playlist page and index its playlists by id."""
        self.playlists = page
        for playlist in page.items:
            self.playlist_map[playlist.id] = playlist

    # ------------------------------------------------------------------
    # Playlist items
    # ------------------------------------------------------------------

    def get_playlist_items(self, playlist_id: str) -> list[PlaylistItem]:
        return self.playlist_items.get(playlist_id, [])

    def cached_count(self, playlist_id: str) -> int:
        return len(self.playlist_items.get(playlist_id, []))

    def known_total(self, playlist_id: str) -> int | None:
        """Server-reported track count: from a fetched page, else from the playlist summary."""
        if playlist_id in self.playlist_totals:
            return self.playlist_totals[playlist_id]
        playlist = self.playlist_map.get(playlist_id)
        if playlist is not None:
            return playlist.tracks.total
        return None

    def is_complete(self, playlist_id: str) -> bool:
        total = self.known_total(playlist_id)
        return total is not None and self.cached_count(playlist_id) >= total

    def extend_playlist_items(
        self,
        playlist_id: str,
        offset: int,
        items: list[PlaylistItem],
        total: int,
    ) -> None:
        """Merge a fetched page into the cache.

        Every item is indexed in the track map. The page is appended to the
        playlist's ordered list only when it starts exactly where the list
        ends, so the list always mirrors the playlist from position 0.
        """
        for item in items:
            key = item.key
            if key is not None:
                self.track_map[key] = item

        self.playlist_totals[playlist_id] = total
        cached = self.playlist_items.setdefault(playlist_id, [])
        if offset == len(cached):
            cached.extend(items)
        else:
            logger.debug(
                "Not appending page at offset %d to playlist %s (have %d items)",
                offset,
                playlist_id,
                len(cached),
            )


class SelectionStore:
    """The user's chosen playlist ids, in the order they were chosen."""

    def __init__(self) -> None:
        self._selected_ids: tuple[str, ...] = ()

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return self._selected_ids

    def save(self, playlist_ids: Iterable[str]) -> None:
        """Replace the whole selection; duplicates are dropped, first occurrence wins."""
        self._selected_ids = tuple(dict.fromkeys(playlist_ids))

    def is_selected(self, playlist_id: str) -> bool:
        return playlist_id in self._selected_ids


@dataclass
class SpotifySession:
    """All mutable state of one signed-in session."""

    api_cache: APICache = field(default_factory=APICache)
    selection: SelectionStore = field(default_factory=SelectionStore)
    song_table: SongTable = field(default_factory=dict)
