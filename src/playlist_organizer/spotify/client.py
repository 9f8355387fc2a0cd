"""Spotify Web API async client with a session-lifetime cache."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from playlist_organizer.cache import SongTable, SpotifySession
from playlist_organizer.events import ChangeNotifier, Listener, SessionEvent
from playlist_organizer.songtable import build_song_table
from playlist_organizer.spotify.constants import (
    DEFAULT_PLAYLIST_ITEMS_PAGE_SIZE,
    DEFAULT_PLAYLISTS_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    PLAYLIST_ITEMS_PATH,
    SPOTIFY_API_BASE,
    USER_PLAYLISTS_PATH,
)
from playlist_organizer.spotify.exceptions import APIError, DataError
from playlist_organizer.spotify.models import PlaylistItem, PlaylistItemsPage, PlaylistsPage

if TYPE_CHECKING:
    from playlist_organizer.auth.tokens import TokenManager

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class PlaylistItemsResult:
    """One page of a playlist's items and where it came from."""

    items: list[PlaylistItem]
    total: int
    from_cache: bool


@dataclass(frozen=True, slots=True)
class ProgressCounter:
    pos: int
    total: int


@dataclass(frozen=True, slots=True)
class CacheProgress:
    """Reported after every page fetched by :meth:`SpotifyClient.cache_selected_playlists`.

    ``playlist`` counts selected playlists (1-based), ``items`` counts the
    items cached so far for the current playlist against its total.
    """

    playlist: ProgressCounter
    items: ProgressCounter


ProgressCallback = Callable[[CacheProgress], None]


class SpotifyClient:
    """Async Spotify Web API client for one signed-in session.

    Access tokens come from a :class:`~playlist_organizer.auth.tokens.TokenManager`
    on every request. Responses are validated into models and cached in the
    :class:`~playlist_organizer.cache.SpotifySession`; cached data is never
    re-fetched. No retries: every non-2xx response raises :class:`APIError`.
    """

    def __init__(
        self,
        token_manager: "TokenManager",
        session: SpotifySession | None = None,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        page_size: int = DEFAULT_PLAYLIST_ITEMS_PAGE_SIZE,
    ) -> None:
        self._token_manager = token_manager
        self._session = session if session is not None else SpotifySession()
        self._request_timeout = request_timeout
        self._page_size = page_size
        self._notifier = ChangeNotifier()

    @property
    def session(self) -> SpotifySession:
        return self._session

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Be notified of cache, selection and song-table changes. Returns an unsubscribe callable."""
        return self._notifier.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._notifier.unsubscribe(listener)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str | int] | None = None,
    ) -> Any:
        """Send an authenticated request and return the decoded JSON body.

        GET parameters go in the query string; any other method sends them
        as a form body.

        Raises:
            AuthError: If no access token is available.
            APIError: On any non-2xx response.
            DataError: If a 2xx response is not JSON.
        """
        access_token = await self._token_manager.get_valid_access_token()
        is_get = method.upper() == "GET"

        async with httpx.AsyncClient(timeout=self._request_timeout) as client:
            response = await client.request(
                method,
                f"{SPOTIFY_API_BASE}{path}",
                params=params if is_get else None,
                data=None if is_get else params,
                headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
            )

        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = _error_message(body) or response.text[:200]
            logger.error("Error %d: %s", response.status_code, message)
            raise APIError(status_code=response.status_code, message=message)

        if body is None:
            raise DataError(f"Spotify returned a non-JSON body for {method} {path}")
        return body

    # -------------------------------------------------------------------
    # Playlists
    # -------------------------------------------------------------------

    async def get_user_playlists(
        self,
        limit: int = DEFAULT_PLAYLISTS_PAGE_SIZE,
        offset: int = 0,
    ) -> PlaylistsPage:
        """GET /me/playlists, once per session.

        Once a page is cached it is returned for every later call whatever
        *limit* and *offset* are. Only one page is ever fetched.
        """
        cache = self._session.api_cache
        if cache.playlists is not None:
            logger.debug("Playlists served from cache")
            return cache.playlists

        body = await self._request("GET", USER_PLAYLISTS_PATH, {"limit": limit, "offset": offset})
        page = _validate(PlaylistsPage, body)
        cache.store_playlists(page)
        logger.info("Cached %d of %d playlists", len(page.items), page.total)
        self._notifier.emit(SessionEvent.PLAYLISTS_UPDATED, page)
        return page

    async def fetch_playlist_items(
        self,
        playlist_id: str,
        limit: int = DEFAULT_PLAYLIST_ITEMS_PAGE_SIZE,
        offset: int = 0,
    ) -> PlaylistItemsResult:
        """GET /playlists/{id}/tracks for one page, served from cache when it covers *offset*.

        Raises:
            APIError: On a non-2xx response; the cache is left untouched.
            DataError: If the response has no ``items`` field.
        """
        cache = self._session.api_cache
        cached = cache.get_playlist_items(playlist_id)
        if len(cached) > offset:
            total = cache.known_total(playlist_id)
            return PlaylistItemsResult(
                items=cached[offset : offset + limit],
                total=total if total is not None else len(cached),
                from_cache=True,
            )

        body = await self._request(
            "GET",
            PLAYLIST_ITEMS_PATH.format(playlist_id=playlist_id),
            {"limit": limit, "offset": offset},
        )
        if not isinstance(body, dict) or "items" not in body:
            raise DataError(f"Response for playlist {playlist_id} has no items field")
        page = _validate(PlaylistItemsPage, body)

        cache.extend_playlist_items(playlist_id, offset, page.items, page.total)
        self._notifier.emit(SessionEvent.PLAYLIST_ITEMS_UPDATED, playlist_id)
        return PlaylistItemsResult(items=page.items, total=page.total, from_cache=False)

    async def cache_selected_playlists(self, on_progress: ProgressCallback | None = None) -> SongTable:
        """Fetch every selected playlist's items until each is complete, then rebuild the song table.

        Playlists are fetched one after another, one page at a time, resuming
        from whatever is already cached. A failure aborts the loop and leaves
        the pages fetched so far in the cache.
        """
        cache = self._session.api_cache
        selected = self._session.selection.selected_ids

        for index, playlist_id in enumerate(selected, start=1):
            if cache.is_complete(playlist_id):
                logger.debug("Playlist %s already cached", playlist_id)
                continue

            offset = cache.cached_count(playlist_id)
            while True:
                result = await self.fetch_playlist_items(playlist_id, self._page_size, offset)
                offset += len(result.items)
                if on_progress is not None:
                    on_progress(
                        CacheProgress(
                            playlist=ProgressCounter(pos=index, total=len(selected)),
                            items=ProgressCounter(pos=offset, total=result.total),
                        )
                    )
                if offset >= result.total or not result.items:
                    break
            logger.info(
                "Cached %d items of playlist %s",
                offset,
                playlist_id,
                extra={"playlist_id": playlist_id},
            )

        return self.build_song_table()

    # -------------------------------------------------------------------
    # Selection and song table
    # -------------------------------------------------------------------

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return self._session.selection.selected_ids

    def save_selection(self, playlist_ids: Iterable[str]) -> None:
        """Replace the selection. The song table is not rebuilt."""
        self._session.selection.save(playlist_ids)
        self._notifier.emit(SessionEvent.SELECTION_SAVED, self._session.selection.selected_ids)

    def build_song_table(self) -> SongTable:
        table = build_song_table(self._session.api_cache, self._session.selection.selected_ids)
        self._session.song_table = table
        self._notifier.emit(SessionEvent.SONG_TABLE_REBUILT, table)
        return table

    def get_song_table(self) -> SongTable:
        """Return the last built song table, building it first if it is empty."""
        if not self._session.song_table:
            return self.build_song_table()
        return self._session.song_table


def _validate(model: type[_ModelT], body: Any) -> _ModelT:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise DataError(f"Malformed {model.__name__} response: {exc}") from exc


def _error_message(body: Any) -> str:
    """Extract the message from Spotify's ``{"error": {"status", "message"}}`` body."""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("message", ""))
    if isinstance(error, str):
        return error
    return ""
